"""Compilation of triage query strings into structured predicates.

Supported tokens, checked in order:

- ``-label:<name>`` excludes items carrying the label
- ``-has:<field>`` keeps only items where the field is empty
- ``<field>:<value>`` keeps only items where the field equals the value
- anything else is free text, left to the issue search fallback

Field names are resolved against the board schema case-insensitively, then
through the configured alias keys. Unknown fields are dropped silently so a
typo broadens the match instead of failing the run.
"""

import logging

from ..resolution.resolver import ResolutionContext
from .models import QueryPredicate

logger = logging.getLogger(__name__)

LABEL_EXCLUDE_PREFIX = "-label:"
HAS_EXCLUDE_PREFIX = "-has:"


class QueryCompiler:
    """Parses triage queries against a resolution context."""

    def __init__(self, context: ResolutionContext):
        self.context = context

    def resolve_field_name(self, key: str) -> str | None:
        """Return the board field name for a query key, or None."""
        if not key:
            return None

        field = self.context.schema.find_field(key)
        if field is not None:
            return field.name

        board_name = self.context.aliases.board_field_name(key)
        if board_name:
            field = self.context.schema.find_field(board_name)
            if field is not None:
                return field.name

        return None

    def compile(self, query: str) -> QueryPredicate:
        label_excludes: list[str] = []
        field_filters: dict[str, str] = {}
        field_excludes: set[str] = set()

        for token in query.split():
            if token.startswith(LABEL_EXCLUDE_PREFIX):
                label = token[len(LABEL_EXCLUDE_PREFIX) :]
                if label and label not in label_excludes:
                    label_excludes.append(label)
                continue

            if token.startswith(HAS_EXCLUDE_PREFIX):
                key = token[len(HAS_EXCLUDE_PREFIX) :]
                field_name = self.resolve_field_name(key)
                if field_name is None:
                    logger.debug("Ignoring -has: on unknown field '%s'", key)
                else:
                    field_excludes.add(field_name)
                continue

            if ":" in token:
                key, value = token.split(":", 1)
                field_name = self.resolve_field_name(key)
                if field_name is None:
                    logger.debug("Ignoring filter on unknown field '%s'", key)
                elif value:
                    field_filters[field_name] = value
                continue

        predicate = QueryPredicate(
            label_excludes=tuple(label_excludes),
            field_filters=field_filters,
            field_excludes=frozenset(field_excludes),
            raw_query=query,
        )
        logger.debug("Compiled query %r into %s", query, predicate)
        return predicate
