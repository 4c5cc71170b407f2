"""Configuration loading and validation for pubboard.

Reads a YAML config file and produces a validated PubBoardConfig object.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

ORCID_WORKS_URL = "https://pub.orcid.org/v3.0"


class RosterConfig(BaseModel):
    """Location and column names of the author roster."""

    path: str = "authors.csv"
    identifier_column: str = "orcid_id"
    name_column: str = "name"
    department_column: str = "department"

    @property
    def resolved_path(self) -> Path:
        """Return the roster path with ~ expanded."""
        return Path(self.path).expanduser()


class RegistryConfig(BaseModel):
    """Works registry endpoint and request pacing."""

    base_url: str = ORCID_WORKS_URL
    timeout: float = Field(default=30.0, gt=0)
    min_interval: float = Field(default=0.5, ge=0)
    user_agent: str | None = None


class DashboardConfig(BaseModel):
    """Where the dashboard loads its snapshot from."""

    # A local path or an http(s) URL.
    dataset: str = "publications.json"
    title: str = "Publication Dashboard"


class PubBoardConfig(BaseModel):
    """Top-level pubboard configuration."""

    roster: RosterConfig = Field(default_factory=RosterConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    output_path: str = "publications.json"
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)

    @property
    def resolved_output_path(self) -> Path:
        """Return the snapshot output path with ~ expanded."""
        return Path(self.output_path).expanduser()


def load_config(config_path: str | Path | None = None) -> PubBoardConfig:
    """Load and validate a pubboard YAML configuration file.

    Args:
        config_path: Path to the YAML config file. When None, the
            built-in defaults are returned.

    Returns:
        Validated PubBoardConfig instance.

    Raises:
        FileNotFoundError: If the config file does not exist.
        yaml.YAMLError: If the YAML is malformed.
        pydantic.ValidationError: If the config fails validation.
    """
    if config_path is None:
        return PubBoardConfig()

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    config = PubBoardConfig.model_validate(raw)
    logger.info(
        "Loaded config from %s (roster: %s, output: %s)",
        path,
        config.roster.path,
        config.output_path,
    )
    return config
