"""Flat-file persistence for the publication snapshot.

The snapshot is a single JSON document::

    {
      "authors": [{<roster columns>..., "publications": [...]}],
      "last_updated": "2025-01-01T00:00:00+00:00"
    }

It is always rewritten whole: the new content goes to a temporary file
in the same directory, which then replaces the old snapshot.
"""

import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any

import orjson
from pydantic import ValidationError

from pubboard.config import RosterConfig
from pubboard.exceptions import DatasetUnavailableError
from pubboard.models import AuthorProfile, AuthorRecord, Dataset, Publication

logger = logging.getLogger(__name__)


def dataset_to_json(dataset: Dataset) -> dict[str, Any]:
    """Serialize a Dataset to the snapshot document shape.

    Roster columns are emitted verbatim, followed by ``publications``.

    Args:
        dataset: Dataset to serialize.

    Returns:
        JSON-serializable dictionary.
    """
    authors = []
    for profile in dataset.authors:
        entry: dict[str, Any] = dict(profile.author.columns)
        entry["publications"] = [
            p.model_dump(mode="json") for p in profile.publications
        ]
        authors.append(entry)
    return {
        "authors": authors,
        "last_updated": dataset.generated_at.isoformat(),
    }


def dataset_from_json(
    document: Any, columns: RosterConfig | None = None
) -> Dataset:
    """Rebuild a Dataset from a decoded snapshot document.

    Args:
        document: Decoded JSON snapshot.
        columns: Roster column names used to recover identifier, name
            and department. Defaults to the standard column names.

    Returns:
        Parsed Dataset.

    Raises:
        DatasetUnavailableError: If the document does not have the
            snapshot shape.
    """
    columns = columns or RosterConfig()
    if not isinstance(document, dict) or not isinstance(
        document.get("authors"), list
    ):
        raise DatasetUnavailableError("Snapshot has no 'authors' list")

    try:
        generated_at = datetime.fromisoformat(
            str(document.get("last_updated", "")).replace("Z", "+00:00")
        )
        profiles = []
        for entry in document["authors"]:
            fields = {
                k: "" if v is None else str(v)
                for k, v in entry.items()
                if k != "publications"
            }
            profiles.append(
                AuthorProfile(
                    author=AuthorRecord(
                        identifier=fields.get(columns.identifier_column, ""),
                        name=fields.get(columns.name_column, ""),
                        department=fields.get(columns.department_column, ""),
                        columns=fields,
                    ),
                    publications=[
                        Publication.model_validate(p)
                        for p in entry.get("publications") or []
                    ],
                )
            )
    except (AttributeError, TypeError, ValueError, ValidationError) as e:
        raise DatasetUnavailableError(f"Invalid snapshot document: {e}") from e

    return Dataset(authors=profiles, generated_at=generated_at)


def write_dataset(dataset: Dataset, path: str | Path) -> Path:
    """Atomically write the snapshot file.

    Args:
        dataset: Dataset to persist.
        path: Destination file path.

    Returns:
        The destination path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = orjson.dumps(dataset_to_json(dataset), option=orjson.OPT_INDENT_2)

    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info(
        "Wrote %s with data for %d authors", path, len(dataset.authors)
    )
    return path


def read_dataset(
    path: str | Path, columns: RosterConfig | None = None
) -> Dataset:
    """Read a snapshot file from disk.

    Args:
        path: Snapshot file path.
        columns: Roster column names, see :func:`dataset_from_json`.

    Returns:
        Parsed Dataset.

    Raises:
        DatasetUnavailableError: If the file is missing or invalid.
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise DatasetUnavailableError(f"Cannot read {path}: {e}") from e
    try:
        document = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise DatasetUnavailableError(f"{path} is not valid JSON: {e}") from e
    return dataset_from_json(document, columns)
