"""Data structures passed between the triage stages."""

from dataclasses import dataclass, field
from enum import Enum

from ..project.models import BoardItem


class TriagePhase(str, Enum):
    """Progress of a triage run."""

    NOT_STARTED = "not_started"
    COLLECTING = "collecting"
    APPLYING = "applying"
    DONE = "done"


@dataclass(frozen=True)
class QueryPredicate:
    """Structured form of a triage query."""

    label_excludes: tuple[str, ...] = ()
    field_filters: dict[str, str] = field(default_factory=dict)
    field_excludes: frozenset[str] = frozenset()
    raw_query: str = ""

    @property
    def has_field_predicates(self) -> bool:
        return bool(self.field_filters or self.field_excludes)


@dataclass
class IssueUpdatePlan:
    """Everything that will be written to one matched item."""

    item: BoardItem
    project_item_id: str = ""
    static_field_updates: dict[str, str] = field(default_factory=dict)
    static_labels_to_add: list[str] = field(default_factory=list)
    interactive_choices: dict[str, str | None] = field(default_factory=dict)


@dataclass
class ItemOutcome:
    """Result of applying one plan."""

    plan: IssueUpdatePlan
    applied: list[str] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failures


@dataclass
class TriageSummary:
    """Totals for a finished triage run."""

    outcomes: list[ItemOutcome] = field(default_factory=list)
    skipped: int = 0

    @property
    def total(self) -> int:
        return len(self.outcomes) + self.skipped

    @property
    def successes(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def failures(self) -> list[ItemOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]

    @property
    def has_failures(self) -> bool:
        return self.skipped > 0 or bool(self.failures)
