"""Consolidate command: export snapshot -> attributed commits as JSON."""

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..exceptions import CrossLayerError
from ..linkage import consolidate as run_consolidation
from ..linkage import dump_commits
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config


@app.command()
def consolidate(
    directory: Path = typer.Argument(
        ...,
        help="Export directory: monthly *.json dumps plus defects.csv, stories.csv, features.csv",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    repository: Optional[str] = typer.Option(
        None,
        "--repository",
        "-r",
        help="Repository name passed to the change lister (default: siop)",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Concurrent change-lister calls",
        min=1,
        max=64,
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds allowed for each change-lister call",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Fail when a tracker row names a changeset missing from the dumps",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log every change-lister call",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress logging",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also write debug logs to this file",
        dir_okay=False,
    ),
):
    """
    Link changesets to tracker defects and stories and list their files.

    Writes one JSON array of commits to stdout; progress and warnings go to
    stderr.

    [bold cyan]Examples:[/bold cyan]

      crosslayer consolidate exports/ > commits.json

      crosslayer consolidate exports/ --strict --workers 8

      crosslayer consolidate exports/ -q --log-file consolidate.log > commits.json
    """
    logger = setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    try:
        settings = resolve_config(
            config=config,
            repository=repository,
            workers=workers,
            timeout=timeout,
            strict=strict,
            verbose=verbose,
            quiet=quiet,
        )
        result = run_consolidation(directory, settings)
        dump_commits(result.commits, sys.stdout)

        if not quiet:
            resolution = result.resolution
            console.print(
                f"  [green]{len(resolution.attributed)}[/green] attributed, "
                f"[yellow]{len(resolution.unattributed)}[/yellow] unattributed, "
                f"{len(resolution.unresolved)} unresolved, "
                f"{len(resolution.conflicts)} conflicts"
            )

    except typer.Exit:
        raise
    except CrossLayerError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)
