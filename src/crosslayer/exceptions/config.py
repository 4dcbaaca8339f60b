"""Configuration exceptions: paths, settings, project selection."""

from pathlib import Path
from typing import Any, Iterable

from .base import CrossLayerError


class ConfigurationError(CrossLayerError):
    """Base class for configuration-related errors."""

    pass


class InvalidPathError(ConfigurationError):
    """Raised when a provided path is invalid."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": path, "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": value, "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class UnknownRepositoryError(ConfigurationError):
    """Raised when no project profile exists for the requested repository."""

    def __init__(self, repository: str, known: Iterable[str]):
        known = sorted(known)
        super().__init__(
            f"Unknown repository: {repository}",
            details={"repository": repository, "known": ", ".join(known)},
        )
        self.repository = repository
        self.known = known
