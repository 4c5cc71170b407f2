"""Author roster parsing.

Reads the delimited roster of lab members that drives a collection run.
The first non-blank line holds the column headers; every following line
becomes one ordered ``header -> cell`` mapping.
"""

import csv
import io
import logging
from collections.abc import Iterable
from pathlib import Path

from pubboard.config import RosterConfig
from pubboard.exceptions import RosterError
from pubboard.models import AuthorRecord

logger = logging.getLogger(__name__)

# Snapshot entries store the author's works under this key.
RESERVED_COLUMNS = frozenset({"publications"})


def parse_roster(
    text: str, required: Iterable[str] = ()
) -> list[dict[str, str]]:
    """Parse roster text into one mapping per data line.

    Short lines are padded with empty strings for the missing trailing
    columns. Lines with more cells than headers are rejected.

    Args:
        text: Raw CSV text, header line first.
        required: Column names the header line must contain.

    Returns:
        List of dicts keyed by header, in file order.

    Raises:
        RosterError: If there is no header line, a required column is
            missing, a header is reserved, or a line has more cells than
            there are headers.
    """
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    headers: list[str] | None = None
    rows: list[dict[str, str]] = []

    for cells in reader:
        if not any(c.strip() for c in cells):
            continue
        cells = [c.strip() for c in cells]
        if headers is None:
            headers = cells
            _check_headers(headers, required)
            continue

        line_no = reader.line_num
        if len(cells) > len(headers):
            raise RosterError(
                f"Roster line {line_no} has {len(cells)} cells "
                f"but only {len(headers)} columns"
            )
        if len(cells) < len(headers):
            logger.warning(
                "Roster line %d has %d of %d columns; padding with blanks",
                line_no,
                len(cells),
                len(headers),
            )
            cells = cells + [""] * (len(headers) - len(cells))
        rows.append(dict(zip(headers, cells)))

    if headers is None:
        raise RosterError("Roster is empty: no header line found")
    return rows


def _check_headers(headers: list[str], required: Iterable[str]) -> None:
    for col in required:
        if col not in headers:
            raise RosterError(f"Roster has no '{col}' column. Found: {headers}")
    reserved = RESERVED_COLUMNS.intersection(headers)
    if reserved:
        raise RosterError(
            f"Roster column name '{min(reserved)}' is reserved for the "
            "publication list"
        )


def load_roster(
    path: str | Path, required: Iterable[str] = ()
) -> list[dict[str, str]]:
    """Read and parse a roster file.

    Args:
        path: Path to the CSV roster.
        required: Column names the header line must contain.

    Returns:
        Parsed rows, see :func:`parse_roster`.

    Raises:
        RosterError: If the file cannot be read or parsed.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise RosterError(f"Cannot read roster {path}: {e}") from e

    rows = parse_roster(text, required)
    logger.info("Loaded %d roster rows from %s", len(rows), path)
    return rows


def to_author_records(
    rows: list[dict[str, str]], columns: RosterConfig
) -> tuple[list[AuthorRecord], int]:
    """Turn roster rows into AuthorRecords, dropping rows without an ID.

    Args:
        rows: Parsed roster rows.
        columns: Roster column names.

    Returns:
        Tuple of (author records in roster order, number of skipped rows).
    """
    records: list[AuthorRecord] = []
    skipped = 0
    for row in rows:
        identifier = row.get(columns.identifier_column, "").strip()
        if not identifier:
            skipped += 1
            logger.debug("Skipping roster row without identifier: %s", row)
            continue
        records.append(
            AuthorRecord(
                identifier=identifier,
                name=row.get(columns.name_column, ""),
                department=row.get(columns.department_column, ""),
                columns=dict(row),
            )
        )
    return records, skipped
