"""Load the publication snapshot and flatten it for the dashboard."""

import logging

import httpx
from pydantic import BaseModel, Field

from pubboard.config import RosterConfig
from pubboard.dashboard.engine import year_sort_key
from pubboard.exceptions import DatasetUnavailableError
from pubboard.models import Dataset, FilterOptions, FlatPublication
from pubboard.store import dataset_from_json, read_dataset

logger = logging.getLogger(__name__)


class LoadedData(BaseModel):
    """A loaded snapshot together with its derived views."""

    dataset: Dataset
    publications: list[FlatPublication] = Field(default_factory=list)
    options: FilterOptions = Field(default_factory=FilterOptions)


def _is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def fetch_dataset(
    location: str,
    columns: RosterConfig | None = None,
    client: httpx.Client | None = None,
    timeout: float = 10.0,
) -> Dataset:
    """Fetch the snapshot from a URL or a local path.

    Args:
        location: ``http(s)://`` URL or filesystem path.
        columns: Roster column names used in the snapshot.
        client: Optional HTTP client for URL locations.
        timeout: Request timeout when no client is given.

    Returns:
        Parsed Dataset.

    Raises:
        DatasetUnavailableError: On network errors, non-success status,
            missing files, or invalid documents.
    """
    if not _is_url(location):
        return read_dataset(location, columns)

    try:
        if client is not None:
            response = client.get(location)
        else:
            response = httpx.get(location, timeout=timeout)
    except httpx.HTTPError as e:
        raise DatasetUnavailableError(f"Request for {location} failed: {e}") from e

    if not response.is_success:
        raise DatasetUnavailableError(
            f"Data not found at {location} (status {response.status_code})"
        )
    try:
        document = response.json()
    except ValueError as e:
        raise DatasetUnavailableError(f"{location} is not valid JSON: {e}") from e
    return dataset_from_json(document, columns)


def flatten(dataset: Dataset) -> list[FlatPublication]:
    """Denormalize per-author publication lists into one list.

    Args:
        dataset: Loaded snapshot.

    Returns:
        One entry per (author, publication) pair, author order first.
    """
    return [
        FlatPublication(
            title=pub.title,
            year=pub.year,
            source=pub.source.value,
            author_name=profile.author.name,
            department=profile.author.department,
        )
        for profile in dataset.authors
        for pub in profile.publications
    ]


def filter_options(pubs: list[FlatPublication]) -> FilterOptions:
    """Derive the select-filter choices from the flattened list.

    Authors and sources keep first-seen order; years are newest first,
    with non-numeric years at the end.
    """
    authors = list(dict.fromkeys(p.author_name for p in pubs))
    sources = list(dict.fromkeys(p.source for p in pubs))
    years = sorted(
        dict.fromkeys(p.year for p in pubs),
        key=lambda y: year_sort_key(y, descending=True),
    )
    return FilterOptions(authors=authors, sources=sources, years=years)


def load_dashboard_data(
    location: str,
    columns: RosterConfig | None = None,
    client: httpx.Client | None = None,
) -> LoadedData | None:
    """Fetch and prepare the snapshot, or return None if it is unavailable.

    Args:
        location: URL or path of the snapshot.
        columns: Roster column names used in the snapshot.
        client: Optional HTTP client for URL locations.

    Returns:
        LoadedData, or None when the snapshot could not be loaded.
    """
    try:
        dataset = fetch_dataset(location, columns=columns, client=client)
    except DatasetUnavailableError as e:
        logger.error("Error loading publication data: %s", e)
        return None

    publications = flatten(dataset)
    logger.info(
        "Loaded %d publications for %d authors",
        len(publications),
        len(dataset.authors),
    )
    return LoadedData(
        dataset=dataset,
        publications=publications,
        options=filter_options(publications),
    )
