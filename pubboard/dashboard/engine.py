"""Filter, sort and aggregate the flattened publication list.

Every function here is pure: it takes the full list plus the current
FilterState and returns new lists or counts, leaving its input as is.
"""

import math
from collections import Counter

from pubboard.models import FilterState, FlatPublication

ALL = "all"


def numeric_year(year: str) -> float | None:
    """Return the year as a number, or None if it is not numeric."""
    try:
        value = float(year)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(value) else value


def year_sort_key(year: str, descending: bool = False) -> tuple[int, float]:
    """Sort key placing numeric years in order and the rest after them."""
    value = numeric_year(year)
    if value is None:
        return (1, 0.0)
    return (0, -value if descending else value)


def matches(pub: FlatPublication, state: FilterState) -> bool:
    """Return True if a publication passes every active filter."""
    if state.search.lower() not in pub.title.lower():
        return False
    if state.author != ALL and pub.author_name != state.author:
        return False
    if state.source != ALL and pub.source != state.source:
        return False
    # Years compare in their displayed form, so 2019 matches "2019".
    if state.year != ALL and str(pub.year) != str(state.year):
        return False
    return True


def filter_publications(
    pubs: list[FlatPublication], state: FilterState
) -> list[FlatPublication]:
    """Apply the search, author, source and year filters.

    Args:
        pubs: Full flattened publication list.
        state: Current filter selection.

    Returns:
        Matching publications in their original order.
    """
    return [p for p in pubs if matches(p, state)]


def sort_by_year(
    pubs: list[FlatPublication], ascending: bool = False
) -> list[FlatPublication]:
    """Order publications by year.

    Non-numeric years (``"N/A"``) sort after every numeric year in both
    directions. Ties keep their input order.

    Args:
        pubs: Publications to sort.
        ascending: Oldest first when True, newest first otherwise.

    Returns:
        A new, sorted list.
    """
    return sorted(pubs, key=lambda p: year_sort_key(p.year, not ascending))


def count_by_source(pubs: list[FlatPublication]) -> dict[str, int]:
    """Count publications per source label, in first-seen order."""
    return dict(Counter(p.source for p in pubs))


def count_by_year(pubs: list[FlatPublication]) -> dict[str, int]:
    """Count publications per year.

    The returned mapping is keyed in ascending year order (non-numeric
    years last), which is the histogram's label axis.
    """
    counts = Counter(p.year for p in pubs)
    return {year: counts[year] for year in sorted(counts, key=year_sort_key)}
