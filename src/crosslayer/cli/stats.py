"""Stats command: layer spread of features and issues."""

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from ..exceptions import CrossLayerError, InvalidConfigError
from ..layers import AggregationFilters, aggregate, format_report, stats_to_dict
from ..linkage import IssueKind
from ..logging_config import setup_logging
from ..sources import load_project_commits, project
from . import app
from ._common import console, resolve_config


def _issue_kind(kind: Optional[str]) -> Optional[IssueKind]:
    if not kind:
        return None
    try:
        return IssueKind(kind.lower())
    except ValueError:
        raise InvalidConfigError(
            "kind", kind, f"expected one of {', '.join(k.value for k in IssueKind)}"
        )


@app.command()
def stats(
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
    kind: Optional[str] = typer.Option(
        None,
        "--kind",
        "-k",
        help="Only count commits whose issue has this kind (bug, story, unknown)",
    ),
    min_files: int = typer.Option(
        0,
        "--min-files",
        "-n",
        help="Drop features and issues touching fewer classified files",
        min=0,
    ),
    with_issues: bool = typer.Option(
        False,
        "--with-issues",
        "-i",
        help="Only count commits linked to an issue",
    ),
    fmt: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: text or json",
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
    Aggregate commits into per-feature and per-issue layer statistics.

    [bold cyan]Examples:[/bold cyan]

      crosslayer stats commits.json -k bug -n 2

      crosslayer stats -r ofbiz ofbiz-checkout/ ofbiz-issues.csv --format json
    """
    logger = setup_logging(verbose=verbose, quiet=quiet)

    try:
        if fmt not in ("text", "json"):
            raise InvalidConfigError("format", fmt, "expected text or json")
        filters = AggregationFilters(
            issue_kind=_issue_kind(kind),
            with_issues_only=with_issues,
            min_files=min_files,
        )
        profile = project(repository)
        settings = resolve_config(
            config=config, repository=repository, verbose=verbose, quiet=quiet
        )
        commits = load_project_commits(profile, paths, settings)
        result = aggregate(commits, profile.rules, filters)

        if fmt == "json":
            print(json.dumps(stats_to_dict(result), indent=2))
        else:
            print(format_report(result))

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
