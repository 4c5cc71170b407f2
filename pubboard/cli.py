"""CLI interface for pubboard using Click.

Wraps the core engine for use in scheduled CI jobs and interactive
terminal use.
"""

import asyncio
import logging
import sys

import click
import orjson

from pubboard.core import PubBoard
from pubboard.dashboard.render import SOURCE_CHART, YEAR_CHART, DashboardView
from pubboard.dashboard.session import DashboardSession
from pubboard.exceptions import RosterError

logger = logging.getLogger(__name__)


def _get_engine(config: str | None) -> PubBoard:
    """Create a PubBoard engine from an optional config path.

    Args:
        config: Path to pubboard.yaml, or None for defaults.

    Returns:
        Initialized PubBoard instance.
    """
    try:
        return PubBoard(config)
    except FileNotFoundError:
        click.echo(f"Error: Config file not found: {config}", err=True)
        sys.exit(1)


def _open_session(engine: PubBoard, dataset: str | None) -> DashboardSession:
    session = DashboardSession(
        dataset or engine.config.dashboard.dataset,
        columns=engine.config.roster,
    )
    session.load()
    if not session.available:
        click.echo(
            "Error loading publication data. The data file might not have "
            "been generated yet.",
            err=True,
        )
        sys.exit(1)
    return session


@click.group()
@click.option(
    "-c",
    "--config",
    default=None,
    help="Path to pubboard.yaml (defaults are used when omitted).",
    type=click.Path(),
)
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """pubboard -- Publication dashboard for research groups."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@main.command()
@click.option("--roster", default=None, help="Override the roster CSV path.")
@click.option("-o", "--output", default=None, help="Override the output path.")
@click.pass_context
def collect(ctx: click.Context, roster: str | None, output: str | None) -> None:
    """Fetch publications for every roster author and write the snapshot."""
    engine = _get_engine(ctx.obj["config"])
    if roster:
        engine.config.roster.path = roster
    try:
        result = asyncio.run(engine.collect(output_path=output))
    except RosterError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    destination = output or engine.config.output_path
    click.echo(f"Collection complete at {result.timestamp.isoformat()}")
    click.echo(f"Authors checked: {result.authors_checked}")
    click.echo(f"Authors collected: {result.authors_collected}")
    click.echo(f"Publications: {result.total_publications}")
    if result.skipped_rows:
        click.echo(f"Rows without identifier: {result.skipped_rows}")
    click.echo(f"Snapshot written to {destination}")

    if result.errors:
        click.echo(f"\nErrors ({len(result.errors)}):")
        for e in result.errors:
            click.echo(f"  - {e}")


def _echo_view(view: DashboardView) -> None:
    if view.last_updated:
        click.echo(view.last_updated)
    if view.message:
        click.echo(view.message)
    for card in view.cards:
        dept = f" ({card.department})" if card.department else ""
        click.echo(
            f"  {card.title} ({card.year}) -- {card.author_name}{dept} "
            f"[{card.source}]"
        )
    click.echo(view.results_count)


@main.command()
@click.option("--search", default="", help="Case-insensitive title search.")
@click.option("--author", default="all", help="Filter by author name.")
@click.option("--source", default="all", help="Filter by source label.")
@click.option("--year", default="all", help="Filter by year.")
@click.option("--oldest-first", is_flag=True, help="Sort oldest first.")
@click.option("--dataset", default=None, help="Snapshot path or URL.")
@click.option("--json", "as_json", is_flag=True, help="Print the view as JSON.")
@click.pass_context
def show(
    ctx: click.Context,
    search: str,
    author: str,
    source: str,
    year: str,
    oldest_first: bool,
    dataset: str | None,
    as_json: bool,
) -> None:
    """Show publications from the snapshot with optional filters."""
    engine = _get_engine(ctx.obj["config"])
    session = _open_session(engine, dataset)
    view = session.update(
        search=search,
        author=author,
        source=source,
        year=year,
        ascending=oldest_first,
    )
    if as_json:
        data = orjson.dumps(
            view.model_dump(mode="json"), option=orjson.OPT_INDENT_2
        ).decode()
        click.echo(data)
        return
    _echo_view(view)


@main.command()
@click.option("--dataset", default=None, help="Snapshot path or URL.")
@click.pass_context
def stats(ctx: click.Context, dataset: str | None) -> None:
    """Show publication counts by source and by year."""
    engine = _get_engine(ctx.obj["config"])
    session = _open_session(engine, dataset)
    view = session.view()

    source_spec = view.charts[SOURCE_CHART]
    year_spec = view.charts[YEAR_CHART]
    click.echo(f"Total publications: {view.total}")
    click.echo("\nBy source:")
    for label, count in zip(source_spec.labels, source_spec.datasets[0].data):
        click.echo(f"  {label}: {count}")
    click.echo("\nBy year:")
    for label, count in zip(year_spec.labels, year_spec.datasets[0].data):
        click.echo(f"  {label}: {count}")


@main.command()
@click.option("--host", default="127.0.0.1", help="Bind address.")
@click.option("--port", default=8000, type=int, help="Port number.")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int) -> None:
    """Start the dashboard API server (requires pubboard[api])."""
    try:
        import uvicorn
    except ImportError:
        click.echo(
            "API dependencies not installed. Run: pip install pubboard[api]",
            err=True,
        )
        sys.exit(1)

    from pubboard.api.app import create_app

    try:
        app = create_app(ctx.obj["config"])
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    uvicorn.run(app, host=host, port=port)
