"""Exception hierarchy for pubboard."""


class PubBoardError(Exception):
    """Base class for all pubboard errors."""


class RosterError(PubBoardError):
    """The author roster could not be read or parsed."""


class RegistryError(PubBoardError):
    """A works-registry request for one author failed."""

    def __init__(
        self,
        identifier: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.identifier = identifier
        self.status_code = status_code


class DatasetUnavailableError(PubBoardError):
    """The publication snapshot could not be fetched or decoded."""
