"""Applying phase: write labels and field values, one isolated call at a time."""

import logging

from rich.console import Console

from ..errors import MutationError, ResolutionError
from ..github_client.client import GitHubClient
from ..project.client import ProjectClient
from ..resolution.resolver import (
    FieldValueResolver,
    ResolutionContext,
    ResolvedNumber,
    ResolvedOption,
    ResolvedText,
)
from .models import IssueUpdatePlan, ItemOutcome

logger = logging.getLogger(__name__)


class PlanApplier:
    """Executes update plans without prompting.

    Every label or field write is independent: a failure is recorded on the
    item's outcome and printed as a warning, and the remaining writes for
    this and later items still run.
    """

    def __init__(
        self,
        context: ResolutionContext,
        project_client: ProjectClient,
        project_id: str,
        github_client: GitHubClient | None = None,
        repository: str | None = None,
        console: Console | None = None,
    ):
        self.resolver = FieldValueResolver(context)
        self.project_client = project_client
        self.project_id = project_id
        self.github_client = github_client
        self.repository = repository
        self.console = console or Console()

    def apply(self, plans: list[IssueUpdatePlan]) -> list[ItemOutcome]:
        return [self.apply_plan(plan) for plan in plans]

    def _warn(self, outcome: ItemOutcome, message: str) -> None:
        outcome.failures.append(message)
        self.console.print(f"⚠️  [yellow]Warning: {message}[/yellow]", highlight=False)

    def apply_plan(self, plan: IssueUpdatePlan) -> ItemOutcome:
        """Labels first, then static field updates, then interactive choices."""
        item = plan.item
        outcome = ItemOutcome(plan=plan)
        self.console.print(
            f"Processing issue #{item.number}: {item.title}", markup=False
        )

        if plan.static_labels_to_add:
            self._apply_labels(plan, outcome)

        updates = list(plan.static_field_updates.items()) + [
            (key, value)
            for key, value in plan.interactive_choices.items()
            if value is not None
        ]
        if not updates:
            return outcome

        if not plan.project_item_id:
            try:
                item_id, _ = self.project_client.add_item(
                    self.project_id, item.issue_id
                )
            except MutationError as e:
                self._warn(
                    outcome, f"failed to add issue #{item.number} to project: {e}"
                )
                return outcome
            plan.project_item_id = item_id

        for field_key, value in updates:
            self._apply_field(plan, outcome, field_key, value)

        return outcome

    def _apply_labels(self, plan: IssueUpdatePlan, outcome: ItemOutcome) -> None:
        number = plan.item.number
        if self.github_client is None or not self.repository:
            self._warn(
                outcome,
                f"failed to apply labels to issue #{number}: no repository configured",
            )
            return

        try:
            self.github_client.add_labels(
                self.repository, number, plan.static_labels_to_add
            )
        except MutationError as e:
            self._warn(outcome, f"failed to apply labels to issue #{number}: {e}")
            return

        outcome.applied.append("labels")
        self.console.print(
            f"✓ Added labels {', '.join(plan.static_labels_to_add)} to issue #{number}",
            markup=False,
        )

    def _apply_field(
        self, plan: IssueUpdatePlan, outcome: ItemOutcome, field_key: str, value: str
    ) -> None:
        number = plan.item.number
        try:
            resolved = self.resolver.resolve_value(field_key, value)
            field_id = resolved.field.id
            if isinstance(resolved, ResolvedOption):
                self.project_client.update_single_select(
                    self.project_id, plan.project_item_id, field_id, resolved.option_id
                )
            elif isinstance(resolved, ResolvedText):
                self.project_client.update_text(
                    self.project_id, plan.project_item_id, field_id, resolved.text
                )
            elif isinstance(resolved, ResolvedNumber):
                self.project_client.update_number(
                    self.project_id, plan.project_item_id, field_id, resolved.number
                )
        except (ResolutionError, MutationError) as e:
            self._warn(
                outcome, f"failed to update {field_key} for issue #{number}: {e}"
            )
            return

        outcome.applied.append(resolved.field.name)
        logger.debug("Issue #%d: %s <- %r", number, resolved.field.name, value)
        self.console.print(
            f"✓ Updated {resolved.field.name} to '{value}' for issue #{number}",
            markup=False,
        )
