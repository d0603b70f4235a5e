"""CLI command listing the open issues on the project board."""

from dataclasses import replace
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ..config.loader import load_config
from ..errors import ConfigError, GhPmError
from ..project.models import BoardItem, SingleSelectValue, display_value
from ..resolution.resolver import FieldValueResolver
from ..triage.fetcher import ItemFetcher
from ..triage.query import QueryCompiler
from .options import CONFIG_OPTION, REFRESH_FIELDS_OPTION, TOKEN_OPTION
from .session import BoardSession

console = Console()

DEFAULT_LIMIT = 30


def list_items(
    query: str | None = typer.Option(
        None,
        "--query",
        "-q",
        help="Filter with triage query syntax, e.g. '-has:estimate'",
    ),
    status: str | None = typer.Option(None, "--status", help="Filter by status"),
    priority: str | None = typer.Option(None, "--priority", help="Filter by priority"),
    limit: int = typer.Option(
        DEFAULT_LIMIT, "--limit", "-L", min=1, help="Maximum number of issues to list"
    ),
    config_path: Path | None = CONFIG_OPTION,
    token: str | None = TOKEN_OPTION,
    refresh_fields: bool = REFRESH_FIELDS_OPTION,
) -> None:
    """List open issues in the project with their mapped fields.

    Examples:
        gh-pm list --status in_progress

        gh-pm list --query "-has:estimate -label:blocked" --limit 100
    """
    try:
        config, resolved_path = load_config(config_path)
        session = BoardSession.open(
            config, resolved_path, token=token, refresh_fields=refresh_fields
        )
    except ConfigError as e:
        console.print(f"❌ [red]Error: failed to load configuration: {e}[/red]")
        raise typer.Exit(1)
    except (GhPmError, ValueError) as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)

    try:
        compiler = QueryCompiler(session.context)
        predicate = compiler.compile(query or "")
        filters = dict(predicate.field_filters)
        for key, value in (("status", status), ("priority", priority)):
            if not value:
                continue
            field_name = compiler.resolve_field_name(key)
            if field_name is None:
                console.print(
                    f"⚠️  [yellow]Warning: project has no {key} field; "
                    f"ignoring --{key}[/yellow]"
                )
                continue
            filters[field_name] = value
        predicate = replace(predicate, field_filters=filters)

        fetcher = ItemFetcher(
            session.context,
            project_client=session.project_client,
            project_id=session.project_id,
        )
        items = fetcher.fetch_from_board(predicate, limit=limit)
        columns = mapped_columns(compiler, list(config.fields))
    except GhPmError as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)
    finally:
        session.save_metadata()
        session.close()

    if not items:
        console.print("No issues found")
        return

    resolver = FieldValueResolver(session.context)
    table = Table(title=f"Project Issues ({len(items)})")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Title")
    for column in columns:
        table.add_column(column, style="magenta")
    table.add_column("Labels", style="green")

    for item in items:
        table.add_row(
            str(item.number),
            item.title,
            *(render_value(resolver, item, column) for column in columns),
            ", ".join(sorted(item.labels)) or "-",
        )

    console.print(table)


def mapped_columns(compiler: QueryCompiler, keys: list[str]) -> list[str]:
    """Board field names behind the configured keys, without duplicates."""
    columns: list[str] = []
    for key in keys:
        name = compiler.resolve_field_name(key)
        if name and name not in columns:
            columns.append(name)
    return columns


def render_value(resolver: FieldValueResolver, item: BoardItem, field_name: str) -> str:
    value = item.value_of(field_name)
    if isinstance(value, SingleSelectValue):
        return resolver.display_option(field_name, value.option_name)
    return display_value(value)
