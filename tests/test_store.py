"""Tests for snapshot persistence."""

from datetime import datetime, timezone
from pathlib import Path

import orjson
import pytest

from pubboard.config import RosterConfig
from pubboard.exceptions import DatasetUnavailableError
from pubboard.models import AuthorProfile, Dataset, Source
from pubboard.store import dataset_from_json, dataset_to_json, read_dataset, write_dataset


class TestDatasetToJson:
    def test_document_shape(self, sample_dataset: Dataset) -> None:
        document = dataset_to_json(sample_dataset)
        assert set(document) == {"authors", "last_updated"}
        assert document["last_updated"] == "2025-03-01T12:00:00+00:00"

        first = document["authors"][0]
        assert list(first) == ["name", "orcid_id", "department", "publications"]
        assert first["publications"][0] == {
            "title": "Neural Engines",
            "year": "2019",
            "source": "Scopus",
        }

    def test_roster_columns_pass_through(self, author) -> None:
        record = author("111", "Jane").model_copy(
            update={"columns": {"name": "Jane", "orcid_id": "111", "office": "B12"}}
        )
        dataset = Dataset(
            authors=[AuthorProfile(author=record)],
            generated_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        )
        entry = dataset_to_json(dataset)["authors"][0]
        assert entry["office"] == "B12"
        assert entry["publications"] == []


class TestDatasetFromJson:
    def test_rebuilds_profiles(self, sample_dataset: Dataset) -> None:
        rebuilt = dataset_from_json(dataset_to_json(sample_dataset))
        assert rebuilt.generated_at == sample_dataset.generated_at
        assert [p.author.name for p in rebuilt.authors] == ["Ada Lovelace", "Alan Turing"]
        assert rebuilt.authors[1].author.department == "CS"
        assert rebuilt.authors[1].author.identifier == "0000-0002-0000-0002"
        assert rebuilt.authors[1].publications[0].source == Source.CLARIVATE

    def test_zulu_timestamp(self) -> None:
        dataset = dataset_from_json({"authors": [], "last_updated": "2025-01-01T00:00:00.000Z"})
        assert dataset.generated_at.year == 2025

    def test_custom_columns(self) -> None:
        document = {
            "authors": [{"Researcher": "Jane", "ORCID": "1", "publications": []}],
            "last_updated": "2025-01-01T00:00:00+00:00",
        }
        columns = RosterConfig(identifier_column="ORCID", name_column="Researcher")
        dataset = dataset_from_json(document, columns)
        assert dataset.authors[0].author.name == "Jane"
        assert dataset.authors[0].author.identifier == "1"

    def test_numeric_year_is_text(self) -> None:
        document = {
            "authors": [{"name": "Jane", "publications": [{"title": "T", "year": 2019, "source": "Scopus"}]}],
            "last_updated": "2025-01-01T00:00:00+00:00",
        }
        assert dataset_from_json(document).authors[0].publications[0].year == "2019"

    @pytest.mark.parametrize(
        "document",
        [
            [],
            {},
            {"authors": "nope", "last_updated": "2025-01-01"},
            {"authors": [], "last_updated": "yesterday"},
            {"authors": ["bad"], "last_updated": "2025-01-01T00:00:00"},
            {
                "authors": [{"name": "A", "publications": [{"source": "Unknown"}]}],
                "last_updated": "2025-01-01T00:00:00",
            },
        ],
    )
    def test_invalid_documents(self, document) -> None:
        with pytest.raises(DatasetUnavailableError):
            dataset_from_json(document)


class TestWriteAndRead:
    def test_write_then_read(self, tmp_path: Path, sample_dataset: Dataset) -> None:
        path = write_dataset(sample_dataset, tmp_path / "out" / "publications.json")
        assert path.exists()
        loaded = read_dataset(path)
        assert len(loaded.authors) == 2
        assert loaded.authors[0].publications == sample_dataset.authors[0].publications

    def test_overwrites_whole_file(self, tmp_path: Path, sample_dataset: Dataset) -> None:
        path = tmp_path / "publications.json"
        path.write_text('{"stale": true}')
        write_dataset(sample_dataset, path)
        assert "stale" not in orjson.loads(path.read_bytes())

    def test_no_temp_files_left(self, tmp_path: Path, sample_dataset: Dataset) -> None:
        write_dataset(sample_dataset, tmp_path / "publications.json")
        assert [p.name for p in tmp_path.iterdir()] == ["publications.json"]

    def test_read_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DatasetUnavailableError, match="Cannot read"):
            read_dataset(tmp_path / "missing.json")

    def test_read_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "publications.json"
        path.write_text("{not json")
        with pytest.raises(DatasetUnavailableError, match="not valid JSON"):
            read_dataset(path)
