"""ORCID works-registry backend using httpx.

Queries the public ORCID API for the works an author has claimed and
normalizes each work group's primary summary into a Publication.
"""

import logging
from typing import Annotated, Any

import httpx
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
)

from pubboard.classify import classify_source
from pubboard.config import ORCID_WORKS_URL
from pubboard.exceptions import RegistryError
from pubboard.models import TITLE_PLACEHOLDER, YEAR_PLACEHOLDER, Publication
from pubboard.sources.base import RateLimiter

logger = logging.getLogger(__name__)


def _or_none(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    try:
        return handler(value)
    except ValidationError:
        logger.debug("Ignoring malformed work field: %r", value)
        return None


# Optional registry field; a value of the wrong shape reads as absent.
Lenient = WrapValidator(_or_none)


class _Value(BaseModel):
    value: Any = None


class _Title(BaseModel):
    title: Annotated[_Value | None, Lenient] = None


class _PublicationDate(BaseModel):
    year: Annotated[_Value | None, Lenient] = None


class ExternalId(BaseModel):
    """One typed external identifier attached to a work."""

    model_config = ConfigDict(populate_by_name=True)

    type: Annotated[str | None, Lenient] = Field(
        default=None, alias="external-id-type"
    )
    value: Annotated[str | None, Lenient] = Field(
        default=None, alias="external-id-value"
    )


class _ExternalIds(BaseModel):
    external_id: Annotated[list[ExternalId] | None, Lenient] = Field(
        default=None, alias="external-id"
    )


class WorkSummary(BaseModel):
    """Registry representation of one publication instance.

    Every nested field is optional and a malformed one is treated as
    missing; :meth:`resolved_title` and :meth:`resolved_year` substitute
    the placeholders in that case.
    """

    title: Annotated[_Title | None, Lenient] = None
    publication_date: Annotated[_PublicationDate | None, Lenient] = Field(
        default=None, alias="publication-date"
    )
    external_ids: Annotated[_ExternalIds | None, Lenient] = Field(
        default=None, alias="external-ids"
    )

    def resolved_title(self) -> str:
        value = None
        if self.title and self.title.title:
            value = _scalar(self.title.title.value)
        return value or TITLE_PLACEHOLDER

    def resolved_year(self) -> str:
        value = None
        if self.publication_date and self.publication_date.year:
            value = _scalar(self.publication_date.year.value)
        return value or YEAR_PLACEHOLDER

    def identifiers(self) -> list[ExternalId]:
        if self.external_ids is None:
            return []
        return self.external_ids.external_id or []


def _scalar(value: Any) -> str | None:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None
    return str(value)


class WorkGroup(BaseModel):
    """A group of duplicate or variant records for one publication."""

    work_summary: Annotated[list[WorkSummary] | None, Lenient] = Field(
        default=None, alias="work-summary"
    )


class WorksResponse(BaseModel):
    """Top-level body of the works-listing endpoint."""

    group: list[WorkGroup]


def summary_to_publication(summary: WorkSummary) -> Publication:
    """Convert a work summary into a Publication.

    Args:
        summary: Parsed registry work summary.

    Returns:
        Publication with defaults substituted for missing fields.
    """
    return Publication(
        title=summary.resolved_title(),
        year=summary.resolved_year(),
        source=classify_source(summary.identifiers()),
    )


def parse_works_response(payload: Any) -> list[Publication]:
    """Normalize a decoded works-listing body into publications.

    Only the first summary of each group is used. Groups without any
    summary are skipped.

    Args:
        payload: Decoded JSON body.

    Returns:
        Publications in registry order.

    Raises:
        pydantic.ValidationError: If the body lacks a valid ``group`` list.
    """
    response = WorksResponse.model_validate(payload)
    publications: list[Publication] = []
    for index, group in enumerate(response.group):
        if not group.work_summary:
            logger.debug("Work group %d has no summaries; skipping", index)
            continue
        publications.append(summary_to_publication(group.work_summary[0]))
    return publications


class OrcidBackend:
    """ORCID public API backend.

    Use as an async context manager so the underlying HTTP client is
    closed once the run is finished.
    """

    def __init__(
        self,
        base_url: str = ORCID_WORKS_URL,
        timeout: float = 30.0,
        min_interval: float = 0.5,
        user_agent: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the ORCID backend.

        Args:
            base_url: Registry API root, without trailing slash.
            timeout: Per-request timeout in seconds.
            min_interval: Minimum seconds between two requests.
            user_agent: Optional User-Agent header value.
            client: Pre-built HTTP client; mainly for tests.
        """
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._user_agent = user_agent
        self._client = client
        self._owns_client = client is None
        self._limiter = RateLimiter(min_interval)

    async def __aenter__(self) -> "OrcidBackend":
        self._ensure_client()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"User-Agent": self._user_agent} if self._user_agent else None
            self._client = httpx.AsyncClient(timeout=self._timeout, headers=headers)
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this backend created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def works_url(self, identifier: str) -> str:
        """Return the works-listing URL for an identifier."""
        return f"{self.base_url}/{identifier}/works"

    async def fetch_publications(self, identifier: str) -> list[Publication]:
        """Fetch and normalize all works listed for one ORCID iD.

        Args:
            identifier: ORCID iD, e.g. ``0000-0002-1825-0097``.

        Returns:
            Publications in registry order.

        Raises:
            RegistryError: On transport failure, non-success status, or a
                malformed body.
        """
        client = self._ensure_client()
        await self._limiter.acquire()

        url = self.works_url(identifier)
        try:
            response = await client.get(
                url, headers={"Accept": "application/json"}
            )
        except httpx.HTTPError as e:
            raise RegistryError(identifier, f"Request failed: {e}") from e

        if not response.is_success:
            raise RegistryError(
                identifier,
                f"API request failed with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RegistryError(identifier, f"Malformed JSON body: {e}") from e

        try:
            publications = parse_works_response(payload)
        except ValidationError as e:
            raise RegistryError(
                identifier,
                f"Unexpected response shape ({e.error_count()} errors)",
            ) from e

        logger.debug(
            "Fetched %d publications for %s", len(publications), identifier
        )
        return publications
