"""CLI command adding repository issues that are missing from the project."""

from pathlib import Path

import typer
from rich.console import Console
from rich.prompt import Confirm

from ..board.intake import IntakeFilters, IssueIntake
from ..config.loader import load_config
from ..errors import ConfigError, GhPmError
from ..github_client.client import DEFAULT_LIST_LIMIT
from ..triage.request import parse_apply_flags
from .options import CONFIG_OPTION, REFRESH_FIELDS_OPTION, TOKEN_OPTION
from .session import BoardSession

console = Console()


def intake(
    label: list[str] | None = typer.Option(
        None, "--label", "-l", help="Filter by label (repeatable)"
    ),
    assignee: str | None = typer.Option(None, "--assignee", help="Filter by assignee"),
    author: str | None = typer.Option(None, "--author", help="Filter by author"),
    state: str = typer.Option(
        "open", "--state", "-s", help="Filter by state: open, closed or all"
    ),
    milestone: str | None = typer.Option(
        None, "--milestone", "-m", help="Filter by milestone title"
    ),
    search: str | None = typer.Option(
        None, "--search", "-S", help="Search issues with a query"
    ),
    limit: int = typer.Option(
        DEFAULT_LIST_LIMIT, "--limit", "-L", min=1, help="Maximum issues to fetch"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show what would be added without making changes"
    ),
    apply: list[str] | None = typer.Option(
        None,
        "--apply",
        "-a",
        help="Change to apply when adding, e.g. 'status:backlog' (repeatable)",
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Add without confirming"),
    config_path: Path | None = CONFIG_OPTION,
    token: str | None = TOKEN_OPTION,
    refresh_fields: bool = REFRESH_FIELDS_OPTION,
) -> None:
    """List issues that are not in the project and optionally add them.

    Examples:
        # Preview open issues missing from the project
        gh-pm intake --dry-run

        # Add bugs and put them straight into the backlog
        gh-pm intake --label bug --apply status:backlog --apply priority:p2
    """
    if state not in ("open", "closed", "all"):
        console.print(
            f"❌ [red]Error: invalid state '{state}': use open, closed or all[/red]"
        )
        raise typer.Exit(1)

    try:
        apply_labels, apply_fields = parse_apply_flags(apply or [])
    except ValueError as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)

    try:
        config, resolved_path = load_config(config_path)
    except ConfigError as e:
        console.print(f"❌ [red]Error: failed to load configuration: {e}[/red]")
        console.print("Run 'gh-pm init' to create a configuration file")
        raise typer.Exit(1)

    try:
        session = BoardSession.open(
            config, resolved_path, token=token, refresh_fields=refresh_fields
        )
    except (GhPmError, ValueError) as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)

    command = IssueIntake(
        session.context,
        session.project_client,
        session.project_id,
        session.github_client,
        config.primary_repository,
        console=console,
    )
    filters = IntakeFilters(
        search=search,
        labels=list(label or []),
        assignee=assignee,
        author=author,
        state=state,
        milestone=milestone,
        limit=limit,
    )

    try:
        issues = command.search(filters)
        if not issues:
            console.print("No issues found matching the filters")
            return
        console.print(f"Found {len(issues)} issues from search")

        to_add = command.untracked(issues)
        if not to_add:
            console.print("All matching issues are already in the project")
            return

        console.print(f"\nFound {len(to_add)} issues not in project:")
        for issue in to_add:
            console.print(f"  #{issue.number}: {issue.title}", markup=False)

        if dry_run:
            console.print("\n[DRY RUN] Would add these issues to the project", markup=False)
            if apply_labels or apply_fields:
                console.print("Would apply the following changes:")
                for name in apply_labels:
                    console.print(f"  - label: {name}", markup=False)
                for key, value in apply_fields.items():
                    console.print(f"  - {key}: {value}", markup=False)
            return

        if not yes and not Confirm.ask(
            f"\nAdd {len(to_add)} issues to project?", default=False
        ):
            console.print("Cancelled")
            return

        summary = command.add(to_add, apply_labels, apply_fields)
    except KeyboardInterrupt:
        console.print("\n❌ [yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(1)
    except GhPmError as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)
    finally:
        session.save_metadata()
        session.close()

    added = sum(1 for outcome in summary.outcomes if "project" in outcome.applied)
    console.print(
        f"\nSuccessfully added {added}/{len(to_add)} issues to project"
    )
    if summary.has_failures:
        raise typer.Exit(1)
