"""Core orchestration engine for pubboard.

Ties together the roster, the works registry, and the snapshot store.
This is the single entry point used by the CLI, the API and library
consumers.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path

from pubboard.config import PubBoardConfig, load_config
from pubboard.dashboard.loader import fetch_dataset
from pubboard.exceptions import RegistryError
from pubboard.models import (
    AuthorProfile,
    AuthorRecord,
    CollectResult,
    Dataset,
)
from pubboard.roster import load_roster, to_author_records
from pubboard.sources.base import WorksRegistry
from pubboard.sources.orcid import OrcidBackend
from pubboard.store import write_dataset

logger = logging.getLogger(__name__)


async def collect_dataset(
    authors: list[AuthorRecord],
    registry: WorksRegistry,
    now: datetime | None = None,
) -> tuple[Dataset, CollectResult]:
    """Fetch publications for each author, one request at a time.

    Authors are processed strictly in order. A registry failure for one
    author is logged and that author is left out of the dataset; the
    remaining authors are still processed.

    Args:
        authors: Authors to query, in roster order.
        registry: Works registry backend.
        now: Generation timestamp; defaults to the current UTC time.

    Returns:
        Tuple of (dataset, run summary).
    """
    generated_at = now or datetime.now(timezone.utc)
    profiles: list[AuthorProfile] = []
    errors: list[str] = []

    for author in authors:
        display_name = author.name or author.identifier
        logger.info("Fetching data for %s...", display_name)
        try:
            publications = await registry.fetch_publications(author.identifier)
        except RegistryError as e:
            logger.error("Failed to process %s: %s", display_name, e)
            errors.append(f"{display_name}: {e}")
            continue
        profiles.append(AuthorProfile(author=author, publications=publications))

    dataset = Dataset(authors=profiles, generated_at=generated_at)
    result = CollectResult(
        timestamp=generated_at,
        authors_checked=len(authors),
        authors_collected=len(profiles),
        total_publications=sum(len(p.publications) for p in profiles),
        errors=errors,
    )
    return dataset, result


class PubBoard:
    """Main orchestrator for publication collection.

    Used by the CLI, the REST API, and library consumers.
    """

    def __init__(
        self, config: PubBoardConfig | str | Path | None = None
    ) -> None:
        """Initialize PubBoard.

        Args:
            config: A loaded config, a path to a pubboard YAML file, or
                None for the defaults.
        """
        if isinstance(config, PubBoardConfig):
            self.config = config
        else:
            self.config = load_config(config)

    def _make_registry(self) -> OrcidBackend:
        registry = self.config.registry
        return OrcidBackend(
            base_url=registry.base_url,
            timeout=registry.timeout,
            min_interval=registry.min_interval,
            user_agent=registry.user_agent,
        )

    async def collect(
        self,
        registry: WorksRegistry | None = None,
        output_path: str | Path | None = None,
    ) -> CollectResult:
        """Regenerate the publication snapshot from the roster.

        Args:
            registry: Registry backend to use instead of ORCID.
            output_path: Override for the configured snapshot path.

        Returns:
            CollectResult summarizing the run.

        Raises:
            RosterError: If the roster cannot be read or lacks the
                identifier column. Nothing is written.
        """
        logger.info("Starting publication data fetch...")
        rows = load_roster(
            self.config.roster.resolved_path,
            required=(self.config.roster.identifier_column,),
        )
        authors, skipped = to_author_records(rows, self.config.roster)
        if skipped:
            logger.info("Skipped %d roster rows without an identifier", skipped)

        if registry is None:
            async with self._make_registry() as backend:
                dataset, result = await collect_dataset(authors, backend)
        else:
            dataset, result = await collect_dataset(authors, registry)

        destination = (
            Path(output_path) if output_path else self.config.resolved_output_path
        )
        write_dataset(dataset, destination)
        return result.model_copy(update={"skipped_rows": skipped})

    def load_dataset(self, location: str | None = None) -> Dataset:
        """Load the published snapshot the dashboard reads.

        Args:
            location: Path or URL; defaults to ``dashboard.dataset``.

        Returns:
            Parsed Dataset.

        Raises:
            DatasetUnavailableError: If the snapshot cannot be loaded.
        """
        return fetch_dataset(
            location or self.config.dashboard.dataset,
            columns=self.config.roster,
        )
