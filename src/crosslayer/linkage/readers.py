"""Read the exported snapshot: monthly JSON dumps and tracker CSV files."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any

from ..exceptions import MalformedInputError
from ..logging_config import get_logger
from .models import RawChange

logger = get_logger(__name__)

HEADER_MARKER = "Id"


def lower_keys(record: dict[str, Any]) -> dict[str, Any]:
    """Exporters disagree on key case ("modified" vs "Modified")."""
    return {str(k).lower(): v for k, v in record.items()}


def _raw_change(record: Any, path: Path) -> RawChange:
    if not isinstance(record, dict):
        raise MalformedInputError(path, f"change record is not an object: {record!r}")
    fields = lower_keys(record)
    # An empty author is valid; an empty time or identifier is not.
    missing = [k for k in ("author", "modified", "uuid") if fields.get(k) is None]
    missing += [k for k in ("modified", "uuid") if fields.get(k) == ""]
    if missing:
        raise MalformedInputError(path, f"change record lacks {', '.join(missing)}")
    return RawChange(
        author=str(fields["author"]),
        comment=str(fields.get("comment") or ""),
        modified=str(fields["modified"]),
        uuid=str(fields["uuid"]),
    )


def read_export(path: Path) -> list[RawChange]:
    """Parse one monthly dump: ``{"changes": [{author, comment, modified, uuid}, ...]}``."""
    try:
        with open(path, encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedInputError(path, str(e))
    if not isinstance(document, dict):
        raise MalformedInputError(path, "top-level JSON value is not an object")
    changes = lower_keys(document).get("changes") or []
    return [_raw_change(record, path) for record in changes]


def read_exports(directory: Path) -> list[tuple[str, list[RawChange]]]:
    """Read every ``*.json`` dump in ``directory`` ordered by file name."""
    batches = []
    for path in sorted(directory.glob("*.json")):
        batch = read_export(path)
        logger.debug("Read %d changes from %s", len(batch), path.name)
        batches.append((path.name, batch))
    if not batches:
        logger.warning("No monthly dumps (*.json) found in %s", directory)
    return batches


def read_rows(path: Path) -> list[list[str]]:
    """Read a tracker CSV positionally, dropping header and blank rows.

    A row whose second column is the literal "Id" is a header.
    """
    try:
        with open(path, encoding="utf-8", newline="") as f:
            rows = list(csv.reader(f))
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise MalformedInputError(path, str(e))
    return [row for row in rows if row and not (len(row) > 1 and row[1] == HEADER_MARKER)]
