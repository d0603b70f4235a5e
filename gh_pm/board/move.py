"""Move: update the project fields of one issue that is already on the board."""

import logging

from rich.console import Console

from ..errors import SchemaNotFoundError
from ..github_client.client import GitHubClient
from ..project.client import ProjectClient
from ..project.models import BoardItem
from ..resolution.resolver import ResolutionContext
from ..triage.applier import PlanApplier
from ..triage.models import IssueUpdatePlan, ItemOutcome

logger = logging.getLogger(__name__)


class IssueMover:
    """Writes field values (and labels) to a single board item."""

    def __init__(
        self,
        context: ResolutionContext,
        project_client: ProjectClient,
        project_id: str,
        github_client: GitHubClient,
        repository: str,
        console: Console | None = None,
    ):
        self.project_client = project_client
        self.project_id = project_id
        self.github_client = github_client
        self.repository = repository
        self.applier = PlanApplier(
            context,
            project_client,
            project_id,
            github_client=github_client,
            repository=repository,
            console=console,
        )

    def find_item(self, number: int) -> BoardItem:
        """Look up the issue and its item on the board.

        Raises:
            ValueError: If the issue does not exist or is not in the project
            GraphQLError: If the item lookup fails
        """
        issue = self.github_client.get_issue(self.repository, number)
        found = self.project_client.get_item_for_issue(self.project_id, issue.id)
        if found is None:
            raise ValueError(
                f"issue #{number} is not in the project; "
                "add it with 'gh-pm intake' first"
            )

        item_id, database_id = found
        logger.debug("Issue #%d is project item %s", number, item_id)
        return BoardItem(
            item_id=item_id,
            database_id=database_id,
            issue_id=issue.id,
            number=issue.number,
            title=issue.title,
            state=issue.state.upper(),
            url=issue.url,
            labels=set(issue.labels),
        )

    def move(
        self,
        number: int,
        fields: dict[str, str],
        labels: list[str] | None = None,
    ) -> ItemOutcome:
        """Apply field updates to an issue; each write succeeds or fails alone.

        Raises:
            ValueError: If the issue does not exist or is not in the project
            GraphQLError: If the item lookup fails
        """
        item = self.find_item(number)
        plan = IssueUpdatePlan(
            item=item,
            project_item_id=item.item_id,
            static_field_updates=dict(fields),
            static_labels_to_add=list(labels or []),
        )
        return self.applier.apply_plan(plan)

    def field_label(self, key: str) -> str:
        """Board field name for a key, or the key itself when unknown."""
        try:
            return self.applier.resolver.resolve_field(key).name
        except SchemaNotFoundError:
            return key
