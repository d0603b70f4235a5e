"""Tests for board item fetching."""

from unittest.mock import MagicMock

import pytest

from gh_pm.errors import ConfigError, GraphQLError, PaginationError
from gh_pm.github_client.models import GitHubIssue
from gh_pm.project.models import (
    ABSENT,
    ItemPage,
    NumberValue,
    SingleSelectValue,
    TextValue,
    is_empty,
)
from gh_pm.resolution.resolver import ResolutionContext
from gh_pm.triage.fetcher import ItemFetcher, decode_field_value, decode_item
from gh_pm.triage.models import QueryPredicate
from gh_pm.triage.query import QueryCompiler


def pages(*node_lists: list[dict]) -> list[ItemPage]:
    """Chain node lists into cursor-linked pages."""
    result = []
    for index, nodes in enumerate(node_lists):
        last = index == len(node_lists) - 1
        result.append(
            ItemPage(
                nodes=nodes,
                has_next_page=not last,
                end_cursor=None if last else f"cursor-{index}",
            )
        )
    return result


@pytest.fixture
def project_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def fetcher(context: ResolutionContext, project_client: MagicMock) -> ItemFetcher:
    return ItemFetcher(context, project_client=project_client, project_id="PVT_1")


class TestDecodeFieldValue:
    """Test decoding of field value nodes."""

    def test_single_select(self) -> None:
        """Test option payloads."""
        value = decode_field_value({"optionId": "OPT_done", "name": "Done"})
        assert value == SingleSelectValue(option_id="OPT_done", option_name="Done")

    def test_text(self) -> None:
        """Test text payloads."""
        assert decode_field_value({"text": "hello"}) == TextValue(text="hello")

    def test_number(self) -> None:
        """Test number payloads, including zero."""
        assert decode_field_value({"number": 0}) == NumberValue(number=0.0)
        assert decode_field_value({"number": 2.5}) == NumberValue(number=2.5)

    @pytest.mark.parametrize(
        "node",
        [
            {},
            {"field": {"name": "Status"}},
            {"text": "x", "number": 1},
            {"optionId": "O", "name": "Done", "text": "x"},
            {"number": "three"},
            {"number": True},
        ],
    )
    def test_ambiguous_or_empty_is_absent(self, node: dict) -> None:
        """Test that zero or several payloads decode to ABSENT."""
        assert decode_field_value(node) is ABSENT


class TestDecodeItem:
    """Test item node decoding."""

    def test_full_item(self, item_node) -> None:
        """Test content, labels and field values."""
        item = decode_item(
            item_node(7, labels=("bug",), status="Done", estimate=3, notes="n")
        )

        assert item is not None
        assert item.item_id == "PVTI_7"
        assert item.database_id == 1007
        assert item.issue_id == "I_7"
        assert item.labels == {"bug"}
        assert item.value_of("Status") == SingleSelectValue(
            option_id="OPT_done", option_name="Done"
        )
        assert item.value_of("Estimate") == NumberValue(number=3.0)
        assert item.value_of("Notes") == TextValue(text="n")

    def test_draft_items_skipped(self) -> None:
        """Test that items without issue content are ignored."""
        assert decode_item({"id": "PVTI_x", "content": {}}) is None
        assert decode_item({"id": "PVTI_y", "content": None}) is None


class TestSchemaAssistedFetch:
    """Test paginated fetching with field predicates."""

    def test_follows_all_pages(
        self, fetcher: ItemFetcher, project_client: MagicMock, item_node
    ) -> None:
        """Test that every page is read and cursors are passed along."""
        project_client.list_items_page.side_effect = pages(
            [item_node(1, status="Backlog"), item_node(2, status="Done")],
            [item_node(3, status="Backlog")],
            [item_node(4, status="Backlog")],
        )

        items = fetcher.fetch(QueryPredicate(field_filters={"Status": "backlog"}))

        assert [item.number for item in items] == [1, 3, 4]
        cursors = [call.args[2] for call in project_client.list_items_page.call_args_list]
        assert cursors == [None, "cursor-0", "cursor-1"]

    def test_only_open_items(
        self, fetcher: ItemFetcher, project_client: MagicMock, item_node
    ) -> None:
        """Test that closed items are never returned."""
        project_client.list_items_page.side_effect = pages(
            [
                item_node(1, state="OPEN"),
                item_node(2, state="CLOSED"),
                item_node(3, state="open"),
            ]
        )

        items = fetcher.fetch(QueryPredicate(field_excludes=frozenset({"Estimate"})))

        assert [item.number for item in items] == [1, 3]
        assert all(item.state == "OPEN" for item in items)

    def test_field_excludes(
        self, fetcher: ItemFetcher, project_client: MagicMock, item_node
    ) -> None:
        """Test that every returned item has excluded fields empty."""
        project_client.list_items_page.side_effect = pages(
            [item_node(1, estimate=3), item_node(2), item_node(3, notes="x")]
        )

        items = fetcher.fetch(QueryPredicate(field_excludes=frozenset({"Estimate"})))

        assert [item.number for item in items] == [2, 3]
        assert all(is_empty(item.value_of("Estimate")) for item in items)

    def test_label_excludes_case_insensitive(
        self, fetcher: ItemFetcher, project_client: MagicMock, item_node
    ) -> None:
        """Test label exclusion in the board strategy."""
        project_client.list_items_page.side_effect = pages(
            [item_node(1, labels=("PM-Tracked",)), item_node(2, labels=("bug",))]
        )

        items = fetcher.fetch(
            QueryPredicate(
                label_excludes=("pm-tracked",),
                field_excludes=frozenset({"Estimate"}),
            )
        )

        assert [item.number for item in items] == [2]

    def test_limit_counts_matches(
        self, fetcher: ItemFetcher, project_client: MagicMock, item_node
    ) -> None:
        """Test that the limit stops pagination once enough items matched."""
        project_client.list_items_page.side_effect = pages(
            [item_node(1, estimate=1), item_node(2)],
            [item_node(3), item_node(4)],
            [item_node(5)],
        )

        items = fetcher.fetch(
            QueryPredicate(field_excludes=frozenset({"Estimate"})), limit=2
        )

        assert [item.number for item in items] == [2, 3]
        assert project_client.list_items_page.call_count == 2

    def test_unresolvable_filter_matches_nothing(
        self, fetcher: ItemFetcher, project_client: MagicMock, item_node
    ) -> None:
        """Test that a bad filter value narrows the match to nothing."""
        project_client.list_items_page.side_effect = pages(
            [item_node(1, status="Backlog")]
        )

        items = fetcher.fetch(QueryPredicate(field_filters={"Status": "someday"}))

        assert items == []

    def test_number_and_text_filters(
        self, fetcher: ItemFetcher, project_client: MagicMock, item_node
    ) -> None:
        """Test numeric equality and case-insensitive text equality."""
        project_client.list_items_page.side_effect = pages(
            [
                item_node(1, estimate=3, notes="Needs Repro"),
                item_node(2, estimate=5, notes="needs repro"),
                item_node(3, estimate=3, notes="other"),
            ]
        )

        items = fetcher.fetch(
            QueryPredicate(field_filters={"Estimate": "3pts", "Notes": "needs repro"})
        )

        assert [item.number for item in items] == [1]

    def test_pagination_failure_is_fatal(
        self, fetcher: ItemFetcher, project_client: MagicMock, item_node
    ) -> None:
        """Test that an API error mid-way aborts the whole fetch."""
        project_client.list_items_page.side_effect = [
            ItemPage(nodes=[item_node(1)], has_next_page=True, end_cursor="c1"),
            GraphQLError("rate limited"),
        ]

        with pytest.raises(PaginationError, match="rate limited"):
            fetcher.fetch(QueryPredicate(field_excludes=frozenset({"Estimate"})))

    def test_missing_cursor_is_fatal(
        self, fetcher: ItemFetcher, project_client: MagicMock
    ) -> None:
        """Test that a page claiming more results without a cursor is an error."""
        project_client.list_items_page.return_value = ItemPage(
            nodes=[], has_next_page=True, end_cursor=None
        )

        with pytest.raises(PaginationError, match="no cursor"):
            fetcher.fetch(QueryPredicate(field_excludes=frozenset({"Estimate"})))

    def test_compiled_query_end_to_end(
        self,
        context: ResolutionContext,
        fetcher: ItemFetcher,
        project_client: MagicMock,
        item_node,
    ) -> None:
        """Test a compiled query against decoded items."""
        project_client.list_items_page.side_effect = pages(
            [
                item_node(1, status="Backlog"),
                item_node(2, status="Backlog", estimate=2),
                item_node(3, status="Done"),
                item_node(4, status="Backlog", state="CLOSED"),
            ]
        )
        predicate = QueryCompiler(context).compile("status:todo -has:estimate")

        items = fetcher.fetch(predicate)

        assert [item.number for item in items] == [1]

    def test_requires_project(self, context: ResolutionContext) -> None:
        """Test that field predicates need a board to page through."""
        with pytest.raises(ConfigError):
            ItemFetcher(context).fetch(
                QueryPredicate(field_excludes=frozenset({"Estimate"}))
            )


class TestRepositoryFallback:
    """Test the issue search path used without field predicates."""

    def test_lists_issues_and_filters_labels(self, context: ResolutionContext) -> None:
        """Test label excludes and open state on search results."""
        github_client = MagicMock()
        github_client.list_issues.return_value = [
            GitHubIssue(number=1, title="a", id="I_1", labels=["pm-tracked"]),
            GitHubIssue(number=2, title="b", id="I_2", labels=["bug"]),
            GitHubIssue(number=3, title="c", id="I_3", state="closed"),
            GitHubIssue(number=4, title="d", id="I_4"),
        ]
        fetcher = ItemFetcher(context, github_client=github_client, repository="octo/api")

        items = fetcher.fetch(
            QueryPredicate(
                label_excludes=("PM-TRACKED",),
                raw_query="is:issue -label:PM-TRACKED",
            ),
            limit=1,
        )

        assert [item.number for item in items] == [2]
        assert items[0].item_id == ""
        github_client.list_issues.assert_called_once_with(
            "octo/api", search="is:issue -label:PM-TRACKED", limit=100
        )

    def test_requires_repository(self, context: ResolutionContext) -> None:
        """Test that the fallback needs a repository."""
        with pytest.raises(ConfigError, match="no repository configured"):
            ItemFetcher(context).fetch(QueryPredicate(raw_query="is:open"))


class TestBoardListing:
    """Test the public board scans used by list and intake."""

    def test_iter_includes_closed_items(
        self, fetcher: ItemFetcher, project_client: MagicMock, item_node
    ) -> None:
        """Test that every issue item is yielded, open or closed."""
        project_client.list_items_page.side_effect = pages(
            [item_node(1), {"id": "PVTI_draft", "content": {}}],
            [item_node(2, state="CLOSED")],
        )

        assert [item.number for item in fetcher.iter_board_items()] == [1, 2]

    def test_fetch_from_board_without_field_predicates(
        self, fetcher: ItemFetcher, project_client: MagicMock, item_node
    ) -> None:
        """Test that an empty predicate lists the open board items."""
        project_client.list_items_page.side_effect = pages(
            [item_node(1), item_node(2, state="CLOSED"), item_node(3)]
        )

        items = fetcher.fetch_from_board(QueryPredicate(), limit=5)

        assert [item.number for item in items] == [1, 3]

    def test_limit_stops_paging(
        self, fetcher: ItemFetcher, project_client: MagicMock, item_node
    ) -> None:
        """Test that later pages are not requested once the limit is reached."""
        project_client.list_items_page.side_effect = pages(
            [item_node(1), item_node(2)], [item_node(3)]
        )

        items = fetcher.fetch_from_board(QueryPredicate(), limit=2)

        assert [item.number for item in items] == [1, 2]
        assert project_client.list_items_page.call_count == 1

    def test_iter_requires_project(self, context: ResolutionContext) -> None:
        with pytest.raises(ConfigError, match="project id is required"):
            list(ItemFetcher(context).iter_board_items())
