"""Board maintenance outside of triage: intake of new issues and moves."""

from .intake import IntakeFilters, IssueIntake
from .move import IssueMover

__all__ = ["IntakeFilters", "IssueIntake", "IssueMover"]
