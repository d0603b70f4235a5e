"""Collecting phase: gather every interactive decision before any write."""

import logging
from collections.abc import Callable

from rich.console import Console

from ..errors import CollectionAbortedError, MutationError, SchemaNotFoundError
from ..project.client import ProjectClient
from ..project.models import (
    BoardItem,
    FieldDataType,
    FieldSchema,
    SingleSelectValue,
    display_value,
    is_empty,
)
from ..resolution.resolver import FieldValueResolver, ResolutionContext
from .models import IssueUpdatePlan

logger = logging.getLogger(__name__)

LineReader = Callable[[str], str]


class PlanCollector:
    """Adds items to the board and prompts for interactive fields.

    Input comes from ``reader``, a callable taking the prompt text and
    returning one line. EOFError or KeyboardInterrupt from the reader aborts
    collection with CollectionAbortedError.
    """

    def __init__(
        self,
        context: ResolutionContext,
        project_client: ProjectClient,
        project_id: str,
        reader: LineReader | None = None,
        console: Console | None = None,
    ):
        self.context = context
        self.resolver = FieldValueResolver(context)
        self.project_client = project_client
        self.project_id = project_id
        self.console = console or Console()
        self.reader = reader or self.console.input

    def ensure_project_item(self, plan: IssueUpdatePlan) -> None:
        """Make sure the plan's issue is on the board (add-or-get).

        Raises:
            MutationError: If the issue cannot be added
        """
        if plan.project_item_id:
            return
        item_id, database_id = self.project_client.add_item(
            self.project_id, plan.item.issue_id
        )
        plan.project_item_id = item_id
        plan.item.item_id = item_id
        if database_id:
            plan.item.database_id = database_id

    def collect(
        self, plans: list[IssueUpdatePlan], field_keys: list[str]
    ) -> tuple[list[IssueUpdatePlan], int]:
        """Record a choice (or None for skip) per plan and field key.

        Returns:
            Tuple of (plans ready to apply, number of items skipped because
            they could not be added to the board)

        Raises:
            CollectionAbortedError: If operator input cannot be read
        """
        collected = []
        skipped = 0
        for plan in plans:
            try:
                self.ensure_project_item(plan)
            except MutationError as e:
                self.console.print(
                    f"⚠️  [yellow]Warning: failed to add issue #{plan.item.number} "
                    f"to project: {e}[/yellow]"
                )
                skipped += 1
                continue

            for key in field_keys:
                plan.interactive_choices[key] = self.prompt(plan.item, key)
            collected.append(plan)

        return collected, skipped

    def _read(self, prompt: str) -> str:
        try:
            return self.reader(prompt)
        except (EOFError, KeyboardInterrupt) as e:
            raise CollectionAbortedError(
                "failed to read input; no changes have been applied"
            ) from e

    def prompt(self, item: BoardItem, field_key: str) -> str | None:
        """Ask for one field of one item. Returns None when skipped."""
        try:
            field = self.resolver.resolve_field(field_key)
        except SchemaNotFoundError:
            self.console.print(
                f"Field '{field_key}' not found in project for issue #{item.number}"
            )
            return None

        if field.data_type == FieldDataType.SINGLE_SELECT:
            return self._prompt_single_select(item, field_key, field)

        if field.data_type in (FieldDataType.TEXT, FieldDataType.NUMBER):
            return self._prompt_free_form(item, field)

        self.console.print(
            f"Field '{field.name}' has type '{field.data_type.value}' which is "
            "not supported for interactive mode"
        )
        return None

    def _choices(self, field_key: str, field: FieldSchema) -> list[tuple[str, str]]:
        """(value, label) pairs in board order."""
        key = self.resolver.alias_key(field_key)
        if key:
            return [
                (alias, f"{alias} ({option.name})")
                for alias, option in self.context.aliases.aliases_in_option_order(
                    key, field.options
                )
            ]
        return [(option.name, option.name) for option in field.options]

    def _print_current(self, item: BoardItem, field_key: str, field: FieldSchema) -> None:
        current = item.value_of(field.name)
        if is_empty(current):
            return
        if isinstance(current, SingleSelectValue):
            text = self.resolver.display_option(field_key, current.option_name)
        else:
            text = display_value(current)
        self.console.print(f"  Current: {text}", markup=False)

    def _prompt_single_select(
        self, item: BoardItem, field_key: str, field: FieldSchema
    ) -> str | None:
        self.console.print(
            f"\nSelect {field.name} for issue #{item.number}: {item.title}",
            markup=False,
        )
        self._print_current(item, field_key, field)

        choices = self._choices(field_key, field)
        for index, (_, label) in enumerate(choices, start=1):
            self.console.print(f"  {index}. {label}", markup=False)
        self.console.print("  0. Skip")

        answer = self._read(f"Enter your choice (0-{len(choices)}): ").strip()
        try:
            choice = int(answer)
        except ValueError:
            choice = -1

        if choice < 0 or choice > len(choices):
            self.console.print(
                f"Invalid choice, skipping {field.name} update for issue #{item.number}"
            )
            return None
        if choice == 0:
            self.console.print(f"Skipped {field.name} update for issue #{item.number}")
            return None

        value = choices[choice - 1][0]
        logger.debug("Issue #%d: chose %s=%s", item.number, field.name, value)
        return value

    def _prompt_free_form(self, item: BoardItem, field: FieldSchema) -> str | None:
        self.console.print(
            f"\nEnter {field.name} for issue #{item.number}: {item.title}",
            markup=False,
        )
        self._print_current(item, field.name, field)

        answer = self._read(f"Enter {field.name} value (or press Enter to skip): ")
        answer = answer.strip()
        if not answer:
            self.console.print(f"Skipped {field.name} for issue #{item.number}")
            return None
        return answer
