"""Main CLI entry point."""

import logging

import typer
from rich.console import Console

from .fields import fields
from .init import init_config
from .intake import intake
from .listing import list_items
from .move import move
from .triage import triage

app = typer.Typer(
    name="gh-pm",
    help="Triage GitHub issues on a Projects V2 board",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug logging"
    ),
) -> None:
    """Triage GitHub issues on a Projects V2 board."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT)


app.command(name="triage", context_settings={"help_option_names": ["-h", "--help"]})(
    triage
)
app.command(name="fields", context_settings={"help_option_names": ["-h", "--help"]})(
    fields
)
app.command(name="intake", context_settings={"help_option_names": ["-h", "--help"]})(
    intake
)
app.command(name="move", context_settings={"help_option_names": ["-h", "--help"]})(
    move
)
app.command(name="list", context_settings={"help_option_names": ["-h", "--help"]})(
    list_items
)
app.command(name="init", context_settings={"help_option_names": ["-h", "--help"]})(
    init_config
)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from gh_pm import __version__

    console.print(f"gh-pm v{__version__}")


if __name__ == "__main__":
    app()
