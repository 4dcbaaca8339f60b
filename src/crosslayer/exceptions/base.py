"""Base exception for crosslayer.

Errors carry a short message plus details naming the file, row, change or
command involved. The CLI prints ``str(error)`` as one line on stderr.
"""

from typing import Any, Mapping, Optional


class CrossLayerError(Exception):
    """Base exception for all crosslayer errors."""

    def __init__(self, message: str, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        # None means "not known here"; such details are left out.
        self.details = {k: str(v) for k, v in (details or {}).items() if v is not None}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        rendered = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({rendered})"
