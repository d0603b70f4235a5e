"""Collection of board items matching a compiled triage query."""

import logging
from collections.abc import Callable, Iterator
from typing import Any

from github.GithubException import GithubException
from rich.console import Console

from ..errors import ConfigError, GraphQLError, PaginationError, ResolutionError
from ..github_client.client import DEFAULT_LIST_LIMIT, GitHubClient
from ..github_client.models import GitHubIssue
from ..project.client import MAX_PAGE_SIZE, ProjectClient
from ..project.models import (
    ABSENT,
    BoardItem,
    FieldValue,
    NumberValue,
    SingleSelectValue,
    TextValue,
    is_empty,
)
from ..resolution.resolver import (
    FieldValueResolver,
    ResolutionContext,
    ResolvedNumber,
    ResolvedOption,
    ResolvedText,
    ResolvedValue,
)
from .models import QueryPredicate

console = Console()
logger = logging.getLogger(__name__)

OPEN_STATE = "OPEN"


def decode_field_value(node: dict[str, Any]) -> FieldValue:
    """Decode one ``fieldValues`` node into a typed value.

    The value type is not known up front: exactly one of an option
    (``optionId``/``name``), ``text`` or ``number`` payload must be present.
    Nodes with none or several of them decode to ABSENT.
    """
    has_option = node.get("optionId") is not None or node.get("name") is not None
    has_text = node.get("text") is not None
    has_number = node.get("number") is not None

    if sum((has_option, has_text, has_number)) != 1:
        return ABSENT

    if has_text:
        return TextValue(text=str(node["text"]))

    if has_number:
        number = node["number"]
        if isinstance(number, bool) or not isinstance(number, (int, float)):
            return ABSENT
        return NumberValue(number=float(number))

    return SingleSelectValue(
        option_id=node.get("optionId") or "",
        option_name=node.get("name") or "",
    )


def decode_item(node: dict[str, Any]) -> BoardItem | None:
    """Decode a board item node, or None for non-issue content."""
    content = node.get("content") or {}
    if not content.get("id") or content.get("number") is None:
        return None

    field_values: dict[str, FieldValue] = {}
    for value_node in (node.get("fieldValues") or {}).get("nodes") or []:
        if not value_node:
            continue
        field_name = (value_node.get("field") or {}).get("name")
        if not field_name:
            continue
        field_values[field_name] = decode_field_value(value_node)

    labels = {
        label["name"]
        for label in (content.get("labels") or {}).get("nodes") or []
        if label and label.get("name")
    }

    return BoardItem(
        item_id=node.get("id") or "",
        database_id=node.get("databaseId") or 0,
        issue_id=content["id"],
        number=content["number"],
        title=content.get("title") or "",
        state=(content.get("state") or "").upper(),
        url=content.get("url") or "",
        labels=labels,
        field_values=field_values,
    )


def issue_to_item(issue: GitHubIssue) -> BoardItem:
    return BoardItem(
        issue_id=issue.id,
        number=issue.number,
        title=issue.title,
        state=issue.state.upper(),
        url=issue.url,
        labels=set(issue.labels),
    )


def value_matches(value: FieldValue, resolved: ResolvedValue | None) -> bool:
    """Whether a decoded field value satisfies a resolved filter value."""
    if resolved is None:
        return False

    if isinstance(resolved, ResolvedOption):
        if not isinstance(value, SingleSelectValue):
            return False
        if value.option_id:
            return value.option_id == resolved.option_id
        return value.option_name == resolved.option_name

    if isinstance(resolved, ResolvedText):
        return (
            isinstance(value, TextValue)
            and value.text.lower() == resolved.text.lower()
        )

    if isinstance(resolved, ResolvedNumber):
        return isinstance(value, NumberValue) and value.number == resolved.number

    return False


class ItemFetcher:
    """Finds the open issues a triage query selects.

    With field predicates the board itself is paginated and every item is
    checked client side against the resolved filters. Without them, issues
    come from the repository search and only label excludes are applied.
    """

    def __init__(
        self,
        context: ResolutionContext,
        project_client: ProjectClient | None = None,
        project_id: str = "",
        github_client: GitHubClient | None = None,
        repository: str | None = None,
        page_size: int = MAX_PAGE_SIZE,
    ):
        self.context = context
        self.resolver = FieldValueResolver(context)
        self.project_client = project_client
        self.project_id = project_id
        self.github_client = github_client
        self.repository = repository
        self.page_size = max(1, min(page_size, MAX_PAGE_SIZE))

    def fetch(self, predicate: QueryPredicate, limit: int | None = None) -> list[BoardItem]:
        """Return matching open items, at most ``limit`` of them.

        Raises:
            PaginationError: If listing fails part way through
            ConfigError: If the strategy needed has no board or repository
        """
        if predicate.has_field_predicates:
            return self.fetch_from_board(predicate, limit)
        return self._fetch_from_repository(predicate, limit)

    def _resolve_filters(
        self, predicate: QueryPredicate
    ) -> dict[str, ResolvedValue | None]:
        resolved: dict[str, ResolvedValue | None] = {}
        for field_name, value in predicate.field_filters.items():
            try:
                resolved[field_name] = self.resolver.resolve_value(field_name, value)
            except ResolutionError as e:
                console.print(
                    f"⚠️  [yellow]Warning: {e}; no items will match "
                    f"{field_name}:{value}[/yellow]"
                )
                resolved[field_name] = None
        return resolved

    def _build_matcher(self, predicate: QueryPredicate) -> Callable[[BoardItem], bool]:
        filters = self._resolve_filters(predicate)

        def matches(item: BoardItem) -> bool:
            if item.state != OPEN_STATE:
                return False
            if any(item.has_label(label) for label in predicate.label_excludes):
                return False
            for field_name in predicate.field_excludes:
                if not is_empty(item.value_of(field_name)):
                    return False
            for field_name, resolved in filters.items():
                if not value_matches(item.value_of(field_name), resolved):
                    return False
            return True

        return matches

    def iter_board_items(self) -> Iterator[BoardItem]:
        """Yield every issue on the board, whatever its state or fields.

        Raises:
            ConfigError: If no project is configured
            PaginationError: If a page cannot be fetched
        """
        if self.project_client is None or not self.project_id:
            raise ConfigError("project id is required to list project items")

        cursor = None
        pages = 0
        while True:
            try:
                page = self.project_client.list_items_page(
                    self.project_id, self.page_size, cursor
                )
            except GraphQLError as e:
                raise PaginationError(f"failed to list project items: {e}") from e
            pages += 1

            for node in page.nodes:
                item = decode_item(node)
                if item is not None:
                    yield item

            if not page.has_next_page:
                break
            if not page.end_cursor:
                raise PaginationError(
                    "failed to list project items: next page has no cursor"
                )
            cursor = page.end_cursor

        logger.debug("Scanned %d page(s) of project items", pages)

    def fetch_from_board(
        self, predicate: QueryPredicate, limit: int | None = None
    ) -> list[BoardItem]:
        """Scan the board and keep the open items the predicate accepts."""
        matches = self._build_matcher(predicate)
        items: list[BoardItem] = []
        for item in self.iter_board_items():
            if not matches(item):
                continue
            items.append(item)
            if limit and len(items) >= limit:
                logger.debug("Reached limit of %d items", limit)
                break

        logger.debug("%d item(s) matched", len(items))
        return items

    def _fetch_from_repository(
        self, predicate: QueryPredicate, limit: int | None
    ) -> list[BoardItem]:
        if self.github_client is None or not self.repository:
            raise ConfigError("no repository configured for issue search")

        try:
            issues = self.github_client.list_issues(
                self.repository,
                search=predicate.raw_query,
                limit=max(limit or 0, DEFAULT_LIST_LIMIT),
            )
        except (GithubException, ValueError) as e:
            raise PaginationError(f"failed to search issues: {e}") from e

        items = []
        for issue in issues:
            item = issue_to_item(issue)
            if item.state != OPEN_STATE:
                continue
            if any(item.has_label(label) for label in predicate.label_excludes):
                continue
            items.append(item)
            if limit and len(items) >= limit:
                break
        return items
