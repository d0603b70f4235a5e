"""Project board triage for GitHub issues."""

__version__ = "0.1.0"
