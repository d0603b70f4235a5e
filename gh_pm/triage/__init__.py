"""Query compilation, item fetching and two-phase triage."""

from .applier import PlanApplier
from .collector import PlanCollector
from .fetcher import ItemFetcher, decode_field_value
from .models import (
    IssueUpdatePlan,
    ItemOutcome,
    QueryPredicate,
    TriagePhase,
    TriageSummary,
)
from .orchestrator import TriageOrchestrator, describe_plan
from .query import QueryCompiler
from .request import (
    TriageRequest,
    build_request,
    parse_apply_flags,
    parse_interactive_flags,
)

__all__ = [
    "IssueUpdatePlan",
    "ItemFetcher",
    "ItemOutcome",
    "PlanApplier",
    "PlanCollector",
    "QueryCompiler",
    "QueryPredicate",
    "TriageOrchestrator",
    "TriagePhase",
    "TriageRequest",
    "TriageSummary",
    "build_request",
    "decode_field_value",
    "describe_plan",
    "parse_apply_flags",
    "parse_interactive_flags",
]
