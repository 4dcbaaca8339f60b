"""Input-related exceptions: malformed exports and unresolved cross-references."""

from pathlib import Path
from typing import Optional, Union

from .base import CrossLayerError


class InputError(CrossLayerError):
    """Base class for errors caused by the input snapshot."""
    pass


class MalformedInputError(InputError):
    """Raised when an export file cannot be read or decoded."""

    def __init__(self, filepath: Union[Path, str], reason: str):
        super().__init__(
            f"Malformed input file: {filepath}",
            details={"filepath": filepath, "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class MalformedTimestampError(InputError):
    """Raised when a modification timestamp matches none of the expected shapes."""

    def __init__(self, timestamp: str, source: Optional[str] = None):
        super().__init__(
            "Unrecognized timestamp format",
            details={"timestamp": repr(timestamp), "source": source},
        )
        self.timestamp = timestamp
        self.source = source


class UnresolvedReferenceError(InputError):
    """Raised in strict mode when a tracker row names a changeset that was never exported."""

    def __init__(self, key: str, source: str, row_id: str):
        super().__init__(
            f"Key not found: {key}",
            details={"source": source, "row": row_id},
        )
        self.key = key
        self.source = source
        self.row_id = row_id
