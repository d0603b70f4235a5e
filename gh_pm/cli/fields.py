"""CLI command showing the project's field schema."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ..config.loader import load_config
from ..errors import GhPmError
from ..project.models import FieldDataType
from .options import CONFIG_OPTION, TOKEN_OPTION
from .session import BoardSession

console = Console()


def fields(
    refresh: bool = typer.Option(
        False, "--refresh", "-r", help="Reload the schema from the project"
    ),
    config_path: Path | None = CONFIG_OPTION,
    token: str | None = TOKEN_OPTION,
) -> None:
    """Show project fields, their types and options.

    The schema is read from the cache in .gh-pm.yml when present; use
    --refresh after changing fields on the board.
    """
    try:
        config, resolved_path = load_config(config_path)
        session = BoardSession.open(
            config, resolved_path, token=token, refresh_fields=refresh
        )
    except (GhPmError, ValueError) as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)

    try:
        schema = session.context.schema.fields()
    except GhPmError as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)
    finally:
        session.save_metadata()
        session.close()

    if not schema:
        console.print("[yellow]No fields found in project[/yellow]")
        return

    aliases = session.context.aliases
    table = Table(title="Project Fields")
    table.add_column("Field", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Key", style="green")
    table.add_column("Options")

    for field in schema:
        key = aliases.key_for_board_field(field.name) or ""
        if field.data_type == FieldDataType.SINGLE_SELECT:
            labels = []
            for option in field.options:
                alias = aliases.alias_for_option(key, option.name) if key else None
                labels.append(f"{option.name} ({alias})" if alias else option.name)
            options = ", ".join(labels)
        else:
            options = ""
        table.add_row(field.name, field.data_type.value, key, options)

    console.print(table)
