"""Shared pytest fixtures for pubboard tests."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from pubboard.models import AuthorProfile, AuthorRecord, Dataset, Publication, Source
from pubboard.store import write_dataset


def make_summary(
    title: str | None = "A Paper",
    year: str | None = "2020",
    id_types: list[str] | None = None,
) -> dict[str, Any]:
    """Build an ORCID work-summary dict."""
    summary: dict[str, Any] = {}
    if title is not None:
        summary["title"] = {"title": {"value": title}}
    if year is not None:
        summary["publication-date"] = {"year": {"value": year}}
    if id_types is not None:
        summary["external-ids"] = {
            "external-id": [
                {"external-id-type": t, "external-id-value": f"{t}-1"}
                for t in id_types
            ]
        }
    return summary


def make_works_payload(*summaries: dict[str, Any]) -> dict[str, Any]:
    """Wrap summaries into an ORCID works-listing body, one group each."""
    return {"group": [{"work-summary": [s]} for s in summaries]}


def make_author(
    identifier: str, name: str, department: str = "Physics"
) -> AuthorRecord:
    return AuthorRecord(
        identifier=identifier,
        name=name,
        department=department,
        columns={"name": name, "orcid_id": identifier, "department": department},
    )


@pytest.fixture
def sample_dataset() -> Dataset:
    """A two-author dataset with mixed sources and a missing year."""
    return Dataset(
        authors=[
            AuthorProfile(
                author=make_author("0000-0001-0000-0001", "Ada Lovelace", "Math"),
                publications=[
                    Publication(title="Neural Engines", year="2019", source=Source.SCOPUS),
                    Publication(title="Analytical Notes", year="2021", source=Source.OTHER),
                    Publication(title="Untitled Draft", year="N/A", source=Source.OTHER),
                ],
            ),
            AuthorProfile(
                author=make_author("0000-0002-0000-0002", "Alan Turing", "CS"),
                publications=[
                    Publication(title="On Computable Numbers", year="2020", source=Source.CLARIVATE),
                    Publication(title="neural nets revisited", year="2019", source=Source.SCOPUS),
                ],
            ),
        ],
        generated_at=datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def snapshot_path(tmp_path: Path, sample_dataset: Dataset) -> Path:
    """Write the sample dataset to a temporary snapshot file."""
    return write_dataset(sample_dataset, tmp_path / "publications.json")


@pytest.fixture
def roster_path(tmp_path: Path) -> Path:
    """A three-author roster CSV."""
    path = tmp_path / "authors.csv"
    path.write_text(
        "name,orcid_id,department\n"
        "A. Author,0000-1111,Physics\n"
        "B. Author,0000-2222,Chemistry\n"
        "C. Author,0000-3333,Biology\n"
    )
    return path


@pytest.fixture
def tmp_config(tmp_path: Path, roster_path: Path) -> Path:
    """Create a temporary pubboard.yaml config file."""
    output = tmp_path / "publications.json"
    config_content = f"""
roster:
  path: "{roster_path}"
output_path: "{output}"
registry:
  min_interval: 0
dashboard:
  dataset: "{output}"
"""
    config_path = tmp_path / "pubboard.yaml"
    config_path.write_text(config_content)
    return config_path


@pytest.fixture
def summary():
    """Factory for ORCID work-summary dicts."""
    return make_summary


@pytest.fixture
def works_payload():
    """Factory for ORCID works-listing bodies."""
    return make_works_payload


@pytest.fixture
def author():
    """Factory for AuthorRecords."""
    return make_author
