"""Fixtures for CLI tests."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from gh_pm.resolution.resolver import ResolutionContext

CONFIG_YAML = """\
project:
  name: Platform
  number: 7
  org: octo
repositories:
  - octo/api
fields:
  status:
    field: Status
    values:
      backlog: Backlog
      in_progress: In Progress
      done: Done
  priority:
    field: Priority
    values:
      p0: P0
      p1: P1
      p2: P2
triage:
  tracked:
    query: "-label:pm-tracked"
    apply:
      labels: [pm-tracked]
      fields:
        priority: p1
  estimate:
    query: "status:backlog"
    interactive:
      status: true
"""


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / ".gh-pm.yml"
    path.write_text(CONFIG_YAML)
    return path


@pytest.fixture(autouse=True)
def wide_consoles(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep rich from wrapping command output at the runner's default width."""
    for module in (
        "gh_pm.cli.triage",
        "gh_pm.cli.fields",
        "gh_pm.cli.intake",
        "gh_pm.cli.move",
        "gh_pm.cli.listing",
        "gh_pm.cli.init",
    ):
        monkeypatch.setattr(f"{module}.console", Console(width=200))


@pytest.fixture
def session(context: ResolutionContext) -> MagicMock:
    """Board session double backed by the fabricated schema."""
    session = MagicMock()
    session.context = context
    session.project_id = "PVT_1"
    session.url_builder.item_url.return_value = ""
    return session
