"""Dashboard session: the explicit application state.

A session owns the loaded snapshot, the current FilterState and the
chart registry. Each input change produces exactly one recompute and
render pass through the pure engine functions.
"""

import logging
from typing import Any

import httpx

from pubboard.config import RosterConfig
from pubboard.dashboard.loader import LoadedData, load_dashboard_data
from pubboard.dashboard.render import (
    ChartRegistry,
    DashboardView,
    render_unavailable,
    render_view,
)
from pubboard.models import FilterOptions, FilterState

logger = logging.getLogger(__name__)


class DashboardSession:
    """Interactive state for one dashboard."""

    def __init__(
        self,
        location: str,
        columns: RosterConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """Create a session for the snapshot at ``location``.

        Args:
            location: Snapshot URL or path.
            columns: Roster column names used in the snapshot.
            client: Optional HTTP client for URL locations.
        """
        self.location = location
        self.columns = columns
        self._client = client
        self.data: LoadedData | None = None
        self.state = FilterState()
        self.charts = ChartRegistry()

    @property
    def available(self) -> bool:
        return self.data is not None

    @property
    def options(self) -> FilterOptions:
        return self.data.options if self.data else FilterOptions()

    def load(self) -> DashboardView:
        """Fetch the snapshot and render the initial view."""
        self.data = load_dashboard_data(
            self.location, columns=self.columns, client=self._client
        )
        self.state = FilterState()
        return self.view()

    def view(self) -> DashboardView:
        """Render the current state."""
        if self.data is None:
            return render_unavailable(self.charts, self.state)
        return render_view(self.data, self.state, self.charts)

    def update(self, **changes: Any) -> DashboardView:
        """Apply filter changes and re-render.

        Args:
            **changes: FilterState fields to change, e.g. ``search="x"``.

        Returns:
            The re-rendered view.

        Raises:
            pydantic.ValidationError: If a key is not a FilterState field.
        """
        self.state = FilterState.model_validate(
            {**self.state.model_dump(), **changes}
        )
        return self.view()

    def toggle_sort(self) -> DashboardView:
        """Flip the year sort direction and re-render."""
        return self.update(ascending=not self.state.ascending)
