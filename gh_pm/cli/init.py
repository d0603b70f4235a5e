"""CLI command writing a starter ``.gh-pm.yml``."""

from pathlib import Path

import typer
from rich.console import Console
from rich.prompt import Confirm, Prompt

from ..config.loader import CONFIG_FILE_NAME, find_config_file, save_config
from ..config.models import ProjectConfig, default_config
from ..errors import GhPmError
from .options import TOKEN_OPTION
from .session import BoardSession

console = Console()


def split_repositories(entries: list[str]) -> list[str]:
    """Flatten repeated and comma separated ``--repo`` values."""
    repositories: list[str] = []
    for entry in entries:
        for repo in entry.split(","):
            repo = repo.strip()
            if repo and repo not in repositories:
                repositories.append(repo)
    return repositories


def init_config(
    project: str | None = typer.Option(None, "--project", "-p", help="Project title"),
    number: int = typer.Option(
        0, "--number", "-n", min=0, help="Project number from the board URL"
    ),
    org: str = typer.Option("", "--org", help="Organization owning the project"),
    owner: str = typer.Option(
        "", "--owner", help="User owning the project (user projects)"
    ),
    repo: list[str] | None = typer.Option(
        None, "--repo", "-r", help="Repository in owner/repo form (repeatable)"
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration"
    ),
    skip_fetch: bool = typer.Option(
        False, "--skip-fetch", help="Do not contact GitHub to cache the field schema"
    ),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help=f"Where to write (default: ./{CONFIG_FILE_NAME})"
    ),
    token: str | None = TOKEN_OPTION,
) -> None:
    """Create a .gh-pm.yml with default field aliases and triage presets.

    Missing project and repository details are asked for. Unless
    --skip-fetch is given the project is looked up and its field schema
    cached in the new file.

    Examples:
        gh-pm init --org octo --number 7 --repo octo/api

        gh-pm init --project "Roadmap" --owner me --repo me/app --force
    """
    path = config_path or Path.cwd() / CONFIG_FILE_NAME
    existing = path if path.exists() else None
    if existing is None and config_path is None:
        existing = find_config_file()

    if existing is not None and not force:
        console.print(f"Configuration file {existing} already exists.", markup=False)
        if not Confirm.ask("Do you want to overwrite it?", default=False):
            console.print("Initialization cancelled.")
            return

    if not project and not number:
        project = Prompt.ask("Enter project name").strip()

    repositories = split_repositories(repo or [])
    if not repositories:
        answer = Prompt.ask(
            "Enter repositories (comma-separated, e.g. owner/repo1,owner/repo2)"
        )
        repositories = split_repositories([answer])

    if not org and not owner and repositories:
        org = repositories[0].split("/")[0]

    config = default_config()
    config.project = ProjectConfig(
        name=project or "", number=number, org=org, owner=owner
    )
    config.repositories = repositories

    try:
        config.validate_config()
    except ValueError as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not skip_fetch:
        console.print("Fetching project details from GitHub...")
        try:
            session = BoardSession.open(config, path, token=token, refresh_fields=True)
        except (GhPmError, ValueError) as e:
            console.print(
                f"⚠️  [yellow]Warning: Could not fetch project details: {e}[/yellow]"
            )
        else:
            try:
                fields = session.context.schema.fields()
            finally:
                session.close()
            console.print(f"✓ Found project {session.project_id}")
            if fields:
                console.print("\nAvailable project fields:")
                for field in fields:
                    console.print(
                        f"  - {field.name} ({field.data_type.value})", markup=False
                    )

    try:
        save_config(config, path)
    except GhPmError as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n✓ Configuration saved to {path}", markup=False)
    console.print("\nNext steps:")
    console.print(
        f"  1. Review {CONFIG_FILE_NAME} and match the field aliases to your board"
    )
    console.print("  2. Run 'gh-pm fields' to see the cached project schema")
    console.print("  3. Run 'gh-pm intake --dry-run' to find issues not in the project")
