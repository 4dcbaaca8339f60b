"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import PipelineConfig, load_config

# stdout carries the commit dump and reports; messages go to stderr.
console = Console(stderr=True)


def resolve_config(
    config: Optional[Path] = None,
    repository: Optional[str] = None,
    workers: Optional[int] = None,
    timeout: Optional[float] = None,
    strict: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> PipelineConfig:
    """Build the pipeline config from CLI options."""
    overrides = {
        "repository": repository,
        "workers": workers,
        "service_timeout_seconds": timeout,
        "verbose": verbose,
        "quiet": quiet,
    }
    if strict:
        overrides["fail_on_unresolved"] = True
    return load_config(config_file=config, **overrides)
