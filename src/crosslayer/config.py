"""Configuration loading and management for crosslayer.

Configuration sources are merged in priority order:
    1. Defaults (defined in PipelineConfig)
    2. Global config (~/.crosslayer.toml)
    3. Project config (./crosslayer.toml)
    4. Explicit config file
    5. Environment variables (CROSSLAYER_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(workers=8)
    >>> config.workers
    8
    >>> config.fail_on_unresolved
    False
"""

from __future__ import annotations

import os
import re
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

_VERBOSITIES = ("quiet", "normal", "verbose")


@dataclass(frozen=True)
class PipelineConfig:
    """Settings for one consolidation / statistics run.

    Attributes:
        Project selection:
            repository: Project profile name (siop, ofbiz, openmrs)

        Change listing (file resolution):
            lister_command: Executable of the change-listing client
            workers: Commits resolved concurrently
            service_timeout_seconds: Timeout for each external call

        Attribution:
            fail_on_unresolved: Abort when a tracker row names an unknown changeset
            ticket_pattern: Regex locating a ticket id in a commit comment

        Output control:
            verbosity: Logging verbosity level
    """

    repository: str = "siop"

    lister_command: str = "lscm"
    workers: int = 4
    service_timeout_seconds: float = 60.0

    fail_on_unresolved: bool = False
    ticket_pattern: str = r"#\d+"

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.service_timeout_seconds <= 0:
            raise InvalidConfigError(
                "service_timeout_seconds", self.service_timeout_seconds, "must be positive"
            )
        if not self.lister_command:
            raise InvalidConfigError("lister_command", self.lister_command, "must not be empty")
        if self.verbosity not in _VERBOSITIES:
            raise InvalidConfigError(
                "verbosity", self.verbosity, f"expected one of {', '.join(_VERBOSITIES)}"
            )
        try:
            re.compile(self.ticket_pattern)
        except re.error as e:
            raise InvalidConfigError("ticket_pattern", self.ticket_pattern, str(e))


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> PipelineConfig:
    """Load configuration with auto-discovery and merging.

    Overrides whose value is None are ignored so that unset CLI options fall
    through to files and environment.

    Raises:
        ConfigurationError: If a config file is missing or unreadable
        InvalidConfigError: If a value fails validation
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".crosslayer.toml"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / "crosslayer.toml"
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"
    merged.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(PipelineConfig)}
    unknown = sorted(set(merged) - known)
    if unknown:
        raise ConfigurationError(
            "Invalid configuration: unknown keys", details={"keys": ", ".join(unknown)}
        )

    return PipelineConfig(**merged)


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CROSSLAYER_* environment variables.

    Supported environment variables:
        CROSSLAYER_REPOSITORY: str
        CROSSLAYER_LISTER_COMMAND: str
        CROSSLAYER_WORKERS: int
        CROSSLAYER_SERVICE_TIMEOUT_SECONDS: float
        CROSSLAYER_FAIL_ON_UNRESOLVED: bool (true/false/1/0)
        CROSSLAYER_TICKET_PATTERN: str
        CROSSLAYER_VERBOSITY: quiet/normal/verbose
    """
    type_hints = get_type_hints(PipelineConfig)

    result: dict[str, Any] = {}
    for f in fields(PipelineConfig):
        env_key = f"CROSSLAYER_{f.name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue
        try:
            result[f.name] = _parse_env_value(env_value, type_hints[f.name])
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the annotated type."""
    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")
    if type_hint is int:
        return int(value)
    if type_hint is float:
        return float(value)
    return value


def _load_toml_file(path: Path) -> dict:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")
