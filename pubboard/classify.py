"""Classify a work by the catalog that indexed it.

The registry attaches typed external identifiers to each work. A Scopus
EID wins over a Web of Science UID; anything else is the catch-all.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pubboard.models import Source

# Checked in order; first hit wins.
_SOURCE_PRIORITY: tuple[tuple[str, Source], ...] = (
    ("eid", Source.SCOPUS),
    ("wosuid", Source.CLARIVATE),
)


def _id_type(entry: Any) -> str | None:
    if isinstance(entry, Mapping):
        return entry.get("external-id-type")
    return getattr(entry, "type", None)


def classify_source(external_ids: Iterable[Any] | None) -> Source:
    """Determine which catalog indexed a work.

    Args:
        external_ids: External identifier entries, either typed
            ExternalId records or raw registry dicts carrying an
            ``external-id-type`` key. May be None or empty.

    Returns:
        Source.SCOPUS if any entry has type ``eid``, else
        Source.CLARIVATE if any has type ``wosuid``, else Source.OTHER.
    """
    if not external_ids:
        return Source.OTHER
    types = {_id_type(e) for e in external_ids}
    for id_type, source in _SOURCE_PRIORITY:
        if id_type in types:
            return source
    return Source.OTHER


def source_token(source: str) -> str:
    """Return a CSS-safe class token for a source label.

    >>> source_token("ORCID / Other")
    'source-ORCID---Other'
    """
    return "source-" + str(source).replace("/", "-").replace(" ", "-")
