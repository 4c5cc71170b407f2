"""Project filtered, sorted and aggregated data into dashboard views.

The renderer produces view models (cards, a results line and chart
specifications) that a front end displays as-is. Chart instances live in
a :class:`ChartRegistry`, which destroys the previous chart in a slot
before creating its replacement.
"""

import itertools
import logging
from typing import Literal

from pydantic import BaseModel, Field

from pubboard.classify import source_token
from pubboard.dashboard.engine import (
    count_by_source,
    count_by_year,
    filter_publications,
    sort_by_year,
)
from pubboard.dashboard.loader import LoadedData
from pubboard.models import FilterOptions, FilterState, FlatPublication

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = (
    "Error loading publication data. The data file might not have been "
    "generated yet. Please check back later."
)
NO_MATCHES_MESSAGE = "No publications match your criteria."
YEAR_BAR_COLOR = "rgba(0, 51, 102, 0.7)"

SOURCE_CHART = "source-chart"
YEAR_CHART = "year-chart"


class PublicationCard(BaseModel):
    """One publication as shown in the result list."""

    title: str
    author_name: str
    department: str
    year: str
    source: str
    css_class: str


class ChartDataset(BaseModel):
    label: str | None = None
    data: list[int] = Field(default_factory=list)
    background_color: str | None = None


class ChartSpec(BaseModel):
    """Chart type, label axis and data series."""

    type: Literal["doughnut", "bar"]
    labels: list[str] = Field(default_factory=list)
    datasets: list[ChartDataset] = Field(default_factory=list)


class Chart:
    """A live chart instance bound to one slot."""

    def __init__(self, chart_id: int, slot: str, spec: ChartSpec) -> None:
        self.id = chart_id
        self.slot = slot
        self.spec = spec
        self.destroyed = False

    def destroy(self) -> None:
        self.destroyed = True

    def __repr__(self) -> str:
        state = "destroyed" if self.destroyed else "live"
        return f"Chart(id={self.id}, slot={self.slot!r}, {state})"


class ChartRegistry:
    """Holds at most one live chart per slot."""

    def __init__(self) -> None:
        self._charts: dict[str, Chart] = {}
        self._ids = itertools.count(1)

    def get(self, slot: str) -> Chart | None:
        return self._charts.get(slot)

    def replace(self, slot: str, spec: ChartSpec) -> Chart:
        """Destroy the chart currently in ``slot`` and create a new one.

        Args:
            slot: Chart slot (canvas) name.
            spec: Specification for the new chart.

        Returns:
            The newly created chart.
        """
        previous = self._charts.pop(slot, None)
        if previous is not None:
            previous.destroy()
        chart = Chart(next(self._ids), slot, spec)
        self._charts[slot] = chart
        logger.debug("Rendered %r", chart)
        return chart

    def destroy_all(self) -> None:
        for chart in self._charts.values():
            chart.destroy()
        self._charts.clear()

    def live(self) -> list[Chart]:
        return list(self._charts.values())


class DashboardView(BaseModel):
    """Everything the dashboard displays for one filter state."""

    available: bool = True
    error: str | None = None
    message: str | None = None
    cards: list[PublicationCard] = Field(default_factory=list)
    shown: int = 0
    total: int = 0
    results_count: str = ""
    charts: dict[str, ChartSpec] = Field(default_factory=dict)
    options: FilterOptions = Field(default_factory=FilterOptions)
    state: FilterState = Field(default_factory=FilterState)
    sort_label: str = ""
    last_updated: str | None = None


def render_card(pub: FlatPublication) -> PublicationCard:
    return PublicationCard(
        title=pub.title,
        author_name=pub.author_name,
        department=pub.department,
        year=pub.year,
        source=pub.source,
        css_class=source_token(pub.source),
    )


def results_summary(shown: int, total: int) -> str:
    return f"Showing {shown} of {total} publications."


def sort_label(ascending: bool) -> str:
    return f"Sort by Year ({'Oldest' if ascending else 'Newest'})"


def source_chart(counts: dict[str, int]) -> ChartSpec:
    """Doughnut chart of publications per source."""
    return ChartSpec(
        type="doughnut",
        labels=list(counts),
        datasets=[ChartDataset(data=list(counts.values()))],
    )


def year_chart(counts: dict[str, int]) -> ChartSpec:
    """Bar chart of publications per year.

    Args:
        counts: Year counts already keyed in ascending year order.
    """
    return ChartSpec(
        type="bar",
        labels=list(counts),
        datasets=[
            ChartDataset(
                label="Publications",
                data=list(counts.values()),
                background_color=YEAR_BAR_COLOR,
            )
        ],
    )


def render_view(
    data: LoadedData, state: FilterState, charts: ChartRegistry
) -> DashboardView:
    """Run one filter/sort/aggregate pass and build the view.

    Both charts are recreated in ``charts`` from the filtered set.

    Args:
        data: Loaded snapshot and its derived views.
        state: Current filter selection.
        charts: Chart registry owned by the session.

    Returns:
        The rendered DashboardView.
    """
    filtered = filter_publications(data.publications, state)
    ordered = sort_by_year(filtered, ascending=state.ascending)

    source_spec = charts.replace(
        SOURCE_CHART, source_chart(count_by_source(filtered))
    ).spec
    year_spec = charts.replace(YEAR_CHART, year_chart(count_by_year(filtered))).spec

    generated = data.dataset.generated_at.date().isoformat()
    return DashboardView(
        cards=[render_card(p) for p in ordered],
        message=None if ordered else NO_MATCHES_MESSAGE,
        shown=len(ordered),
        total=len(data.publications),
        results_count=results_summary(len(ordered), len(data.publications)),
        charts={SOURCE_CHART: source_spec, YEAR_CHART: year_spec},
        options=data.options,
        state=state,
        sort_label=sort_label(state.ascending),
        last_updated=f"Data last updated: {generated}",
    )


def render_unavailable(
    charts: ChartRegistry, state: FilterState | None = None
) -> DashboardView:
    """Build the view shown when the snapshot could not be loaded."""
    charts.destroy_all()
    state = state or FilterState()
    return DashboardView(
        available=False,
        error=UNAVAILABLE_MESSAGE,
        state=state,
        sort_label=sort_label(state.ascending),
    )
