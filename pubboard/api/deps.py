"""Shared FastAPI dependencies.

One engine and one dashboard session serve the whole process. The
session keeps the filter state between requests; endpoints are
coroutines, so renders never interleave.
"""

from __future__ import annotations

import functools
import logging

from pubboard.core import PubBoard
from pubboard.dashboard.session import DashboardSession

logger = logging.getLogger(__name__)

# Populated at startup by create_app().
_config_path: str | None = None


def set_config_path(path: str | None) -> None:
    """Point the engine at a config file and drop any loaded session.

    Args:
        path: Path to pubboard.yaml, or None for defaults.
    """
    global _config_path  # noqa: PLW0603
    _config_path = path
    get_engine.cache_clear()
    get_session.cache_clear()


@functools.lru_cache(maxsize=1)
def get_engine() -> PubBoard:
    """Return the cached engine.

    Raises:
        FileNotFoundError: If the config file is missing.
    """
    return PubBoard(_config_path)


@functools.lru_cache(maxsize=1)
def get_session() -> DashboardSession:
    """Return the process-wide dashboard session, loaded on first use."""
    config = get_engine().config
    session = DashboardSession(config.dashboard.dataset, columns=config.roster)
    session.load()
    logger.info(
        "Dashboard session ready for %s (available: %s)",
        config.dashboard.dataset,
        session.available,
    )
    return session
