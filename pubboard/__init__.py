"""pubboard -- Researcher publication collection and dashboard engine."""

from pubboard.core import PubBoard
from pubboard.models import (
    AuthorProfile,
    AuthorRecord,
    CollectResult,
    Dataset,
    FilterOptions,
    FilterState,
    FlatPublication,
    Publication,
    Source,
)

__all__ = [
    "AuthorProfile",
    "AuthorRecord",
    "CollectResult",
    "Dataset",
    "FilterOptions",
    "FilterState",
    "FlatPublication",
    "PubBoard",
    "Publication",
    "Source",
]
