"""FastAPI application factory for pubboard.

The dashboard session is loaded when the server starts, so the first
request renders from a snapshot that is already in memory.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from pubboard.api import deps
from pubboard.api.routers import dashboard, stats

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    session = deps.get_session()
    if not session.available:
        logger.warning(
            "Serving without publication data; POST /dashboard/reload "
            "once the snapshot exists"
        )
    yield


def create_app(config_path: str | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config_path: Path to pubboard.yaml, or None for defaults.

    Returns:
        FastAPI instance titled after ``dashboard.title``, with the
        dashboard and stats routers mounted.

    Raises:
        FileNotFoundError: If ``config_path`` does not exist.
    """
    deps.set_config_path(config_path)
    config = deps.get_engine().config

    application = FastAPI(
        title=config.dashboard.title,
        description=f"Filterable views over {config.dashboard.dataset}",
        version="0.1.0",
        lifespan=_lifespan,
    )
    application.include_router(dashboard.router)
    application.include_router(stats.router)
    return application
