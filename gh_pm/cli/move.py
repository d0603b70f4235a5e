"""CLI command updating the project fields of a single issue."""

from pathlib import Path

import typer
from rich.console import Console

from ..board.move import IssueMover
from ..config.loader import load_config
from ..errors import ConfigError, GhPmError
from ..triage.request import parse_apply_flags
from .options import CONFIG_OPTION, REFRESH_FIELDS_OPTION, TOKEN_OPTION
from .session import BoardSession

console = Console()


def move(
    number: int = typer.Argument(..., min=1, help="Issue number"),
    status: str | None = typer.Option(None, "--status", help="New status"),
    priority: str | None = typer.Option(None, "--priority", help="New priority"),
    apply: list[str] | None = typer.Option(
        None,
        "--apply",
        "-a",
        help="Other change, e.g. 'estimate:3' or 'label:bug' (repeatable)",
    ),
    repo: str | None = typer.Option(
        None, "--repo", "-r", help="Repository in owner/repo form"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only output essential information"
    ),
    config_path: Path | None = CONFIG_OPTION,
    token: str | None = TOKEN_OPTION,
    refresh_fields: bool = REFRESH_FIELDS_OPTION,
) -> None:
    """Move an issue by updating its project fields.

    The issue must already be in the configured project.

    Examples:
        gh-pm move 15 --status in_progress

        gh-pm move 42 --status done --priority p0 --apply estimate:3
    """
    try:
        labels, fields = parse_apply_flags(apply or [])
    except ValueError as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)

    updates: dict[str, str] = {}
    if status:
        updates["status"] = status
    if priority:
        updates["priority"] = priority
    updates.update(fields)

    if not updates and not labels:
        console.print(
            "❌ [red]Error: no field updates specified. "
            "Use --status, --priority or --apply[/red]"
        )
        raise typer.Exit(1)

    try:
        config, resolved_path = load_config(config_path)
    except ConfigError as e:
        console.print(f"❌ [red]Error: failed to load configuration: {e}[/red]")
        console.print("Run 'gh-pm init' to create a configuration file")
        raise typer.Exit(1)

    repository = repo or config.primary_repository
    try:
        session = BoardSession.open(
            config, resolved_path, token=token, refresh_fields=refresh_fields
        )
    except (GhPmError, ValueError) as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)

    mover = IssueMover(
        session.context,
        session.project_client,
        session.project_id,
        session.github_client,
        repository,
        console=Console(quiet=True) if quiet else console,
    )

    try:
        outcome = mover.move(number, updates, labels)
    except (GhPmError, ValueError) as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)
    finally:
        session.save_metadata()
        session.close()

    item = outcome.plan.item
    if quiet:
        for failure in outcome.failures:
            console.print(f"⚠️  [yellow]Warning: {failure}[/yellow]", highlight=False)
        if outcome.applied:
            console.print(f"Updated issue #{item.number}")
    elif outcome.applied:
        console.print(f"\n✓ Updated issue #{item.number}: {item.title}", markup=False)
        for key, value in updates.items():
            label = mover.field_label(key)
            if label in outcome.applied:
                console.print(f"  • {label} → {value}", markup=False)
        if labels and "labels" in outcome.applied:
            console.print(f"  • labels + {', '.join(labels)}", markup=False)
        console.print(f"🔗 {item.url}", markup=False)

    if not outcome.succeeded:
        raise typer.Exit(1)
