"""Router for summary statistics."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from pubboard.api.deps import get_session
from pubboard.dashboard.engine import (
    count_by_source,
    count_by_year,
    filter_publications,
)
from pubboard.dashboard.session import DashboardSession
from pubboard.models import FilterState

router = APIRouter(tags=["stats"])


@router.get("/stats")
async def get_stats(
    search: str = Query(""),
    author: str = Query("all"),
    source: str = Query("all"),
    year: str = Query("all"),
    session: DashboardSession = Depends(get_session),
) -> dict[str, Any]:
    """Return publication counts by source and year for a filter.

    Args:
        search: Title search term.
        author: Selected author.
        source: Selected source label.
        year: Selected year.
        session: Injected dashboard session.

    Returns:
        Total and filtered counts plus the two breakdowns.

    Raises:
        HTTPException: 503 if the snapshot is unavailable.
    """
    if session.data is None:
        raise HTTPException(status_code=503, detail="Publication data unavailable")

    state = FilterState(search=search, author=author, source=source, year=year)
    filtered = filter_publications(session.data.publications, state)
    return {
        "total_authors": len(session.data.dataset.authors),
        "total_publications": len(session.data.publications),
        "filtered_publications": len(filtered),
        "by_source": count_by_source(filtered),
        "by_year": count_by_year(filtered),
    }
