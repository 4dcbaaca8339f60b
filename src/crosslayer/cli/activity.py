"""Activity command: commit size, cadence and per-author volume."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from ..activity import analyze_activity, format_activity
from ..exceptions import CrossLayerError
from ..logging_config import setup_logging
from ..sources import load_project_commits, project
from . import app
from ._common import console, resolve_config


@app.command()
def activity(
    paths: List[Path] = typer.Argument(
        ...,
        help="Commit JSON file(s) for siop; <git repository> <issues file> for ofbiz/openmrs",
        exists=True,
    ),
    repository: str = typer.Option(
        "siop",
        "--repository",
        "-r",
        help="Project profile: siop, ofbiz or openmrs",
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
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress logging"),
):
    """
    Print mean files per commit and mean hours between commits, then the
    number of commits of each author (fewest first).
    """
    logger = setup_logging(verbose=verbose, quiet=quiet)

    try:
        profile = project(repository)
        settings = resolve_config(
            config=config, repository=repository, verbose=verbose, quiet=quiet
        )
        commits = load_project_commits(profile, paths, settings)
        print(format_activity(analyze_activity(commits)))

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
