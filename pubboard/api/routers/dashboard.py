"""Router for the dashboard view."""

from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException, Query

from pubboard.api.deps import get_session
from pubboard.dashboard.session import DashboardSession

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("")
async def get_view(
    search: str = Query("", description="Case-insensitive title search"),
    author: str = Query("all", description="Author name or 'all'"),
    source: str = Query("all", description="Source label or 'all'"),
    year: str = Query("all", description="Publication year or 'all'"),
    sort: Literal["asc", "desc"] = Query("desc", description="Year order"),
    session: DashboardSession = Depends(get_session),
) -> dict[str, Any]:
    """Render the dashboard for the given filters.

    When the snapshot is unavailable the unavailable view is returned
    with ``available: false`` and an error message.

    Args:
        search: Title search term.
        author: Selected author.
        source: Selected source label.
        year: Selected year.
        sort: ``asc`` for oldest first, ``desc`` for newest first.
        session: Injected dashboard session.

    Returns:
        The rendered DashboardView.
    """
    view = session.update(
        search=search,
        author=author,
        source=source,
        year=year,
        ascending=sort == "asc",
    )
    return view.model_dump(mode="json")


@router.get("/options")
async def get_options(
    session: DashboardSession = Depends(get_session),
) -> dict[str, Any]:
    """Return the distinct values for the author, source and year filters.

    Raises:
        HTTPException: 503 if the snapshot is unavailable.
    """
    if not session.available:
        raise HTTPException(status_code=503, detail="Publication data unavailable")
    return session.options.model_dump()


@router.post("/reload")
async def reload_data(
    session: DashboardSession = Depends(get_session),
) -> dict[str, Any]:
    """Re-fetch the snapshot and reset the filters."""
    view = session.load()
    return view.model_dump(mode="json")
