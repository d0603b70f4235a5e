"""Two-phase triage: collect every decision first, then apply the writes."""

import logging

from rich.console import Console

from ..errors import SchemaNotFoundError
from ..project.models import BoardItem, FieldDataType
from ..project.url import ProjectURLBuilder
from ..resolution.resolver import FieldValueResolver, ResolutionContext
from .applier import PlanApplier
from .collector import PlanCollector
from .fetcher import ItemFetcher
from .models import IssueUpdatePlan, TriagePhase, TriageSummary
from .query import QueryCompiler
from .request import TriageRequest

logger = logging.getLogger(__name__)

INTERACTIVE_TYPES = (
    FieldDataType.SINGLE_SELECT,
    FieldDataType.TEXT,
    FieldDataType.NUMBER,
)


def describe_plan(
    items: list[BoardItem],
    request: TriageRequest,
    resolver: FieldValueResolver,
    url_builder: ProjectURLBuilder | None = None,
    console: Console | None = None,
) -> None:
    """Print the matched items and the changes a real run would make."""
    console = console or Console()

    def field_label(key: str) -> str:
        try:
            return resolver.resolve_field(key).name
        except SchemaNotFoundError:
            return key[:1].upper() + key[1:]

    console.print(
        f"Found {len(items)} issues that would be affected by triage "
        f"'{request.query}':\n",
        markup=False,
    )
    if request.instruction:
        console.print(f"{request.instruction}\n", style="cyan", markup=False)

    for index, item in enumerate(items, start=1):
        console.print(f"{index}. #{item.number}: {item.title}", markup=False)
        url = url_builder.item_url(item.database_id) if url_builder else ""
        console.print(f"   URL: {url or item.url}", markup=False)

    console.print("\nWould apply the following changes:")
    if request.apply_labels:
        console.print(f"- Labels: {', '.join(request.apply_labels)}", markup=False)
    if request.apply_fields:
        console.print("- Fields:")
        for key, value in request.apply_fields.items():
            console.print(f"  - {field_label(key)}: {value}", markup=False)
    if request.interactive_fields:
        console.print("- Interactive fields:")
        for key in request.interactive_fields:
            console.print(
                f"  - {field_label(key)} (will prompt for each issue)", markup=False
            )
    if not request.has_changes:
        console.print("- No changes configured")

    console.print("\nTo execute these changes, run without --list or --dry-run flags.")


class TriageOrchestrator:
    """Runs a triage request through fetch, collect and apply.

    ``phase`` moves NOT_STARTED -> COLLECTING -> APPLYING -> DONE; COLLECTING
    is skipped when no interactive fields are requested and both write
    phases are skipped in list-only mode.
    """

    def __init__(
        self,
        context: ResolutionContext,
        fetcher: ItemFetcher,
        collector: PlanCollector,
        applier: PlanApplier,
        url_builder: ProjectURLBuilder | None = None,
        console: Console | None = None,
    ):
        self.context = context
        self.resolver = FieldValueResolver(context)
        self.compiler = QueryCompiler(context)
        self.fetcher = fetcher
        self.collector = collector
        self.applier = applier
        self.url_builder = url_builder
        self.console = console or Console()
        self.phase = TriagePhase.NOT_STARTED

    def build_plans(
        self, items: list[BoardItem], request: TriageRequest
    ) -> list[IssueUpdatePlan]:
        return [
            IssueUpdatePlan(
                item=item,
                project_item_id=item.item_id,
                static_field_updates=dict(request.apply_fields),
                static_labels_to_add=list(request.apply_labels),
            )
            for item in items
        ]

    def interactive_field_keys(self, request: TriageRequest) -> list[str]:
        """Return the interactive fields that can be prompted for.

        Unknown fields and fields of unsupported types are reported and left
        out.
        """
        usable = []
        problems = []
        for key in request.interactive_fields:
            try:
                field = self.resolver.resolve_field(key)
            except SchemaNotFoundError:
                problems.append(f"{key} (not found)")
                continue
            if field.data_type not in INTERACTIVE_TYPES:
                problems.append(f"{key} ({field.data_type.value})")
                continue
            usable.append(key)

        if problems:
            self.console.print(
                "\n⚠️  [yellow]Warning: The following fields cannot be used "
                "interactively:[/yellow]"
            )
            for problem in problems:
                self.console.print(f"  - {problem}", markup=False)
            self.console.print(
                "\nCurrently supported field types: SINGLE_SELECT, TEXT, NUMBER\n"
            )
        return usable

    def run(self, request: TriageRequest, limit: int | None = None) -> TriageSummary:
        """Execute a triage request.

        Raises:
            PaginationError: If the items cannot be listed
            CollectionAbortedError: If operator input fails while collecting;
                nothing has been written at that point
        """
        predicate = self.compiler.compile(request.query)
        items = self.fetcher.fetch(predicate, limit=limit)

        if not items:
            self.console.print(
                f"No issues found matching query: {request.query}", markup=False
            )
            self.phase = TriagePhase.DONE
            return TriageSummary()

        if request.list_only:
            describe_plan(
                items, request, self.resolver, self.url_builder, self.console
            )
            self.phase = TriagePhase.DONE
            return TriageSummary()

        self.console.print(f"Found {len(items)} issues to triage")
        if request.instruction:
            self.console.print(
                f"\n{request.instruction}\n", style="cyan", markup=False
            )

        plans = self.build_plans(items, request)
        skipped = 0

        field_keys = self.interactive_field_keys(request)
        if field_keys:
            self.phase = TriagePhase.COLLECTING
            self.console.print("\n[bold]=== Interactive Selection Phase ===[/bold]")
            plans, skipped = self.collector.collect(plans, field_keys)

        self.phase = TriagePhase.APPLYING
        self.console.print("\n[bold]=== Applying Updates ===[/bold]")
        outcomes = self.applier.apply(plans)

        self.phase = TriagePhase.DONE
        summary = TriageSummary(outcomes=outcomes, skipped=skipped)
        self.print_summary(summary)
        return summary

    def print_summary(self, summary: TriageSummary) -> None:
        if summary.has_failures:
            self.console.print(
                f"\n⚠️  [yellow]Triage completed: {summary.successes}/"
                f"{summary.total} issues updated successfully[/yellow]"
            )
            for outcome in summary.failures:
                self.console.print(
                    f"  - #{outcome.plan.item.number}: {len(outcome.failures)} "
                    "failed update(s)"
                )
        else:
            self.console.print(
                f"\n✅ [green]Triage completed for {summary.total} issues[/green]"
            )
