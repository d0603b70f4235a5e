"""Shared CLI option definitions so flags stay consistent across commands."""

import typer

CONFIG_OPTION = typer.Option(
    None, "--config", "-c", help="Path to .gh-pm.yml (default: search upwards)"
)

TOKEN_OPTION = typer.Option(
    None,
    "--token",
    help="GitHub token (default: GITHUB_TOKEN environment variable)",
)

REFRESH_FIELDS_OPTION = typer.Option(
    False, "--refresh-fields", help="Reload the field schema from the project"
)

# Triage options
LIST_OPTION = typer.Option(
    False, "--list", "-l", help="List matching issues without applying changes"
)

DRY_RUN_OPTION = typer.Option(
    False, "--dry-run", help="Show what would be changed (alias for --list)"
)

QUERY_OPTION = typer.Option(
    None,
    "--query",
    "-q",
    help="Query to filter issues (required without a named configuration)",
)

APPLY_OPTION = typer.Option(
    None,
    "--apply",
    "-a",
    help="Change to apply, e.g. 'status:backlog' or 'label:bug' (repeatable)",
)

INTERACTIVE_OPTION = typer.Option(
    None,
    "--interactive",
    "-i",
    help="Field to prompt for per issue, e.g. 'status' (repeatable)",
)

LIMIT_OPTION = typer.Option(
    None, "--limit", min=1, help="Maximum number of matching issues to process"
)
