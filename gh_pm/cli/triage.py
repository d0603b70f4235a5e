"""CLI command for bulk triage of project issues."""

from pathlib import Path

import typer
from rich.console import Console

from ..config.loader import load_config
from ..errors import CollectionAbortedError, ConfigError, GhPmError
from ..triage.applier import PlanApplier
from ..triage.collector import PlanCollector
from ..triage.fetcher import ItemFetcher
from ..triage.orchestrator import TriageOrchestrator
from ..triage.request import build_request
from .options import (
    APPLY_OPTION,
    CONFIG_OPTION,
    DRY_RUN_OPTION,
    INTERACTIVE_OPTION,
    LIMIT_OPTION,
    LIST_OPTION,
    QUERY_OPTION,
    REFRESH_FIELDS_OPTION,
    TOKEN_OPTION,
)
from .session import BoardSession

console = Console()


def triage(
    name: str | None = typer.Argument(
        None, help="Name of a triage configuration in .gh-pm.yml"
    ),
    list_only: bool = LIST_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    query: str | None = QUERY_OPTION,
    apply: list[str] | None = APPLY_OPTION,
    interactive: list[str] | None = INTERACTIVE_OPTION,
    limit: int | None = LIMIT_OPTION,
    config_path: Path | None = CONFIG_OPTION,
    token: str | None = TOKEN_OPTION,
    refresh_fields: bool = REFRESH_FIELDS_OPTION,
) -> None:
    """Match issues with a query and apply label and field changes to them.

    Interactive fields are asked for every issue before anything is written,
    so an aborted session leaves the project untouched.

    Examples:
        # Run the 'tracked' configuration from .gh-pm.yml
        gh-pm triage tracked

        # Preview which issues a configuration would touch
        gh-pm triage estimate --list

        # Ad-hoc triage without a configuration entry
        gh-pm triage --query "status:backlog -has:estimate" --interactive estimate

        gh-pm triage --query "-label:pm-tracked" --apply label:pm-tracked \\
            --apply priority:p2
    """
    try:
        config, resolved_path = load_config(config_path)
    except ConfigError as e:
        console.print(f"❌ [red]Error: failed to load configuration: {e}[/red]")
        raise typer.Exit(1)

    try:
        request = build_request(
            config,
            name=name,
            query=query,
            apply=apply,
            interactive=interactive,
            list_only=list_only or dry_run,
        )
    except ValueError as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)

    try:
        session = BoardSession.open(
            config, resolved_path, token=token, refresh_fields=refresh_fields
        )
    except (GhPmError, ValueError) as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)

    orchestrator = TriageOrchestrator(
        session.context,
        fetcher=ItemFetcher(
            session.context,
            project_client=session.project_client,
            project_id=session.project_id,
            github_client=session.github_client,
            repository=config.primary_repository,
        ),
        collector=PlanCollector(
            session.context,
            session.project_client,
            session.project_id,
            console=console,
        ),
        applier=PlanApplier(
            session.context,
            session.project_client,
            session.project_id,
            github_client=session.github_client,
            repository=config.primary_repository,
            console=console,
        ),
        url_builder=session.url_builder,
        console=console,
    )

    try:
        summary = orchestrator.run(request, limit=limit)
    except CollectionAbortedError as e:
        console.print(f"\n❌ [yellow]Triage aborted: {e}[/yellow]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n❌ [yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(1)
    except GhPmError as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)
    finally:
        session.save_metadata()
        session.close()

    if summary.has_failures:
        raise typer.Exit(1)
