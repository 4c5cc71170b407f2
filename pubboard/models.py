"""Pydantic data models for pubboard.

Defines the core domain types: authors, publications, the persisted
dataset, and the flattened records the dashboard works on.
"""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

TITLE_PLACEHOLDER = "Title not available"
YEAR_PLACEHOLDER = "N/A"


def _as_text(value: Any) -> Any:
    """Coerce numeric values to their displayed string form."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class Source(StrEnum):
    """Bibliographic catalog that indexed a publication."""

    SCOPUS = "Scopus"
    CLARIVATE = "Clarivate"
    OTHER = "ORCID / Other"


class AuthorRecord(BaseModel):
    """One roster row, keyed by its registry identifier."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    name: str = ""
    department: str = ""
    # Every roster column, verbatim and in header order.
    columns: dict[str, str] = Field(default_factory=dict)


class Publication(BaseModel):
    """A normalized publication attached to an author."""

    model_config = ConfigDict(frozen=True)

    title: str = TITLE_PLACEHOLDER
    year: str = YEAR_PLACEHOLDER
    source: Source = Source.OTHER

    @field_validator("year", mode="before")
    @classmethod
    def coerce_year(cls, value: Any) -> Any:
        return _as_text(value)


class AuthorProfile(BaseModel):
    """An author together with the publications the registry returned."""

    author: AuthorRecord
    publications: list[Publication] = Field(default_factory=list)


class Dataset(BaseModel):
    """The persisted snapshot shared by the collector and the dashboard."""

    authors: list[AuthorProfile] = Field(default_factory=list)
    generated_at: datetime


class FlatPublication(BaseModel):
    """A publication denormalized with its author's context."""

    model_config = ConfigDict(frozen=True)

    title: str
    year: str
    source: str
    author_name: str
    department: str = ""

    @field_validator("year", mode="before")
    @classmethod
    def coerce_year(cls, value: Any) -> Any:
        return _as_text(value)


class CollectResult(BaseModel):
    """Result of a collection run."""

    timestamp: datetime
    authors_checked: int
    authors_collected: int
    total_publications: int
    skipped_rows: int = 0
    errors: list[str] = Field(default_factory=list)


class FilterState(BaseModel):
    """Current dashboard filter and sort selection."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    search: str = ""
    author: str = "all"
    source: str = "all"
    year: str = "all"
    ascending: bool = False

    @field_validator("author", "source", "year", mode="before")
    @classmethod
    def coerce_selection(cls, value: Any) -> Any:
        return _as_text(value)


class FilterOptions(BaseModel):
    """Distinct values offered by the dashboard's select filters."""

    authors: list[str] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)
    years: list[str] = Field(default_factory=list)
