"""CLI entry point, registers all subcommands."""

from typing import Optional

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="crosslayer",
    help="crosslayer - attribute changesets to features and issues, then measure layer spread",
    add_completion=False,
    rich_markup_mode="rich",
)


def _show_version(value: bool) -> None:
    if value:
        console.print(f"[bold cyan]crosslayer[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        callback=_show_version,
        is_eager=True,
    ),
):
    """Cross-source change attribution and MVC layer statistics."""


# Import subcommands to register them
from .consolidate import consolidate as _consolidate  # noqa: F401, E402
from .stats import stats as _stats  # noqa: F401, E402
from .activity import activity as _activity  # noqa: F401, E402
