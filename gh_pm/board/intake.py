"""Intake: bring repository issues that are not on the board into the project."""

import logging
from dataclasses import dataclass, field

from github.GithubException import GithubException
from rich.console import Console

from ..errors import ConfigError, MutationError, PaginationError
from ..github_client.client import DEFAULT_LIST_LIMIT, GitHubClient
from ..github_client.models import GitHubIssue
from ..project.client import ProjectClient
from ..resolution.resolver import ResolutionContext
from ..triage.applier import PlanApplier
from ..triage.fetcher import ItemFetcher, issue_to_item
from ..triage.models import IssueUpdatePlan, ItemOutcome, TriageSummary

logger = logging.getLogger(__name__)


@dataclass
class IntakeFilters:
    """Repository issue filters, in the shape of ``gh issue list`` flags."""

    search: str | None = None
    labels: list[str] = field(default_factory=list)
    assignee: str | None = None
    author: str | None = None
    state: str = "open"
    milestone: str | None = None
    limit: int = DEFAULT_LIST_LIMIT


class IssueIntake:
    """Finds repository issues missing from the board and adds them.

    Fields and labels requested with ``--apply`` are written through the
    triage applier right after each issue is added, so one failed write
    never stops the remaining issues.
    """

    def __init__(
        self,
        context: ResolutionContext,
        project_client: ProjectClient,
        project_id: str,
        github_client: GitHubClient,
        repository: str | None,
        console: Console | None = None,
    ):
        self.project_client = project_client
        self.project_id = project_id
        self.github_client = github_client
        self.repository = repository
        self.console = console or Console()
        self.fetcher = ItemFetcher(
            context, project_client=project_client, project_id=project_id
        )
        self.applier = PlanApplier(
            context,
            project_client,
            project_id,
            github_client=github_client,
            repository=repository,
            console=self.console,
        )

    def search(self, filters: IntakeFilters) -> list[GitHubIssue]:
        """List repository issues matching the filters.

        Raises:
            ConfigError: If no repository is configured
            PaginationError: If the search fails
        """
        if not self.repository:
            raise ConfigError("no repository configured for issue search")

        try:
            return self.github_client.list_issues(
                self.repository,
                search=filters.search,
                state=filters.state,
                labels=filters.labels,
                assignee=filters.assignee,
                author=filters.author,
                milestone=filters.milestone,
                limit=filters.limit,
            )
        except (GithubException, ValueError) as e:
            raise PaginationError(f"failed to search issues: {e}") from e

    def tracked_numbers(self) -> set[int]:
        """Issue numbers already on the board.

        Raises:
            PaginationError: If the board cannot be listed
        """
        return {item.number for item in self.fetcher.iter_board_items()}

    def untracked(self, issues: list[GitHubIssue]) -> list[GitHubIssue]:
        tracked = self.tracked_numbers()
        logger.debug("%d issue(s) already in project", len(tracked))
        return [issue for issue in issues if issue.number not in tracked]

    def add(
        self,
        issues: list[GitHubIssue],
        apply_labels: list[str] | None = None,
        apply_fields: dict[str, str] | None = None,
    ) -> TriageSummary:
        """Add each issue to the project, then apply labels and fields to it."""
        outcomes = []
        for issue in issues:
            item = issue_to_item(issue)
            try:
                item_id, database_id = self.project_client.add_item(
                    self.project_id, issue.id
                )
            except MutationError as e:
                outcome = ItemOutcome(plan=IssueUpdatePlan(item=item))
                message = f"failed to add issue #{issue.number} to project: {e}"
                outcome.failures.append(message)
                self.console.print(
                    f"⚠️  [yellow]Warning: {message}[/yellow]", highlight=False
                )
                outcomes.append(outcome)
                continue

            self.console.print(
                f"✓ Added issue #{issue.number} to project", markup=False
            )
            item = item.model_copy(
                update={"item_id": item_id, "database_id": database_id}
            )
            plan = IssueUpdatePlan(
                item=item,
                project_item_id=item_id,
                static_field_updates=dict(apply_fields or {}),
                static_labels_to_add=list(apply_labels or []),
            )
            if plan.static_field_updates or plan.static_labels_to_add:
                outcome = self.applier.apply_plan(plan)
            else:
                outcome = ItemOutcome(plan=plan)
            outcome.applied.insert(0, "project")
            outcomes.append(outcome)

        return TriageSummary(outcomes=outcomes)
