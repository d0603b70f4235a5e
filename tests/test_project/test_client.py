"""Tests for the Projects V2 client."""

from unittest.mock import MagicMock

import pytest

from gh_pm.errors import GraphQLError, MutationError
from gh_pm.project.client import MAX_PAGE_SIZE, ProjectClient
from gh_pm.project.models import FieldDataType


@pytest.fixture
def graphql() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(graphql: MagicMock) -> ProjectClient:
    return ProjectClient(graphql)


class TestGetProject:
    """Test project lookup by number and by title."""

    def test_org_project_by_number(self, client: ProjectClient, graphql: MagicMock) -> None:
        """Test that a numbered org project is fetched directly."""
        graphql.execute.return_value = {
            "organization": {
                "projectV2": {"id": "PVT_1", "number": 3, "title": "Roadmap", "url": "u"}
            }
        }

        project = client.get_project("octo", number=3)

        assert project.id == "PVT_1"
        assert graphql.execute.call_args[0][1] == {"owner": "octo", "number": 3}

    def test_org_project_missing(self, client: ProjectClient, graphql: MagicMock) -> None:
        """Test that a missing project raises ValueError."""
        graphql.execute.return_value = {"organization": {"projectV2": None}}
        with pytest.raises(ValueError, match="project #3 not found"):
            client.get_project("octo", number=3)

    def test_title_lookup_paginates(
        self, client: ProjectClient, graphql: MagicMock
    ) -> None:
        """Test that title lookup follows pages and ignores case."""
        graphql.execute.side_effect = [
            {
                "organization": {
                    "projectsV2": {
                        "nodes": [{"id": "PVT_a", "number": 1, "title": "Other"}],
                        "pageInfo": {"hasNextPage": True, "endCursor": "c1"},
                    }
                }
            },
            {
                "organization": {
                    "projectsV2": {
                        "nodes": [{"id": "PVT_b", "number": 2, "title": "Roadmap"}],
                        "pageInfo": {"hasNextPage": False, "endCursor": None},
                    }
                }
            },
        ]

        project = client.get_project("octo", name="roadmap")

        assert project.id == "PVT_b"
        assert graphql.execute.call_args_list[1][0][1] == {"owner": "octo", "cursor": "c1"}

    def test_viewer_project(self, client: ProjectClient, graphql: MagicMock) -> None:
        """Test that an empty owner queries the viewer."""
        graphql.execute.return_value = {
            "viewer": {"projectV2": {"id": "PVT_v", "number": 5, "title": "Mine"}}
        }

        project = client.get_user_project(number=5)

        assert project.id == "PVT_v"
        assert graphql.execute.call_args[0][1] == {"number": 5}

    def test_user_title_not_found(self, client: ProjectClient, graphql: MagicMock) -> None:
        """Test that an unknown title raises ValueError."""
        graphql.execute.return_value = {
            "user": {"projectsV2": {"nodes": [], "pageInfo": {"hasNextPage": False}}}
        }
        with pytest.raises(ValueError, match="project 'Roadmap' not found"):
            client.get_user_project("alice", name="Roadmap")


class TestGetFields:
    """Test field schema parsing."""

    def test_parses_fields(self, client: ProjectClient, graphql: MagicMock) -> None:
        """Test data types, options and skipped empty nodes."""
        graphql.execute.return_value = {
            "node": {
                "fields": {
                    "nodes": [
                        {"id": "F_title", "name": "Title", "dataType": "TITLE"},
                        {
                            "id": "F_status",
                            "name": "Status",
                            "dataType": "SINGLE_SELECT",
                            "options": [
                                {"id": "O1", "name": "Todo"},
                                {"id": "O2", "name": "Done"},
                            ],
                        },
                        {"id": "F_est", "name": "Estimate", "dataType": "NUMBER"},
                        {},
                    ]
                }
            }
        }

        fields = client.get_fields("PVT_1")

        assert [field.name for field in fields] == ["Title", "Status", "Estimate"]
        assert fields[0].data_type == FieldDataType.OTHER
        assert fields[1].data_type == FieldDataType.SINGLE_SELECT
        assert [option.name for option in fields[1].options] == ["Todo", "Done"]
        assert fields[2].data_type == FieldDataType.NUMBER


class TestListItemsPage:
    """Test item page fetching."""

    def test_page_size_clamped(self, client: ProjectClient, graphql: MagicMock) -> None:
        """Test that the page size stays within 1..100."""
        graphql.execute.return_value = {"node": {"items": {"nodes": []}}}

        client.list_items_page("PVT_1", page_size=500)
        assert graphql.execute.call_args[0][1]["first"] == MAX_PAGE_SIZE

        client.list_items_page("PVT_1", page_size=0)
        assert graphql.execute.call_args[0][1]["first"] == 1

    def test_page_info(self, client: ProjectClient, graphql: MagicMock) -> None:
        """Test that nodes and cursor information are returned."""
        graphql.execute.return_value = {
            "node": {
                "items": {
                    "nodes": [{"id": "PVTI_1"}, None],
                    "pageInfo": {"hasNextPage": True, "endCursor": "abc"},
                }
            }
        }

        page = client.list_items_page("PVT_1", cursor="prev")

        assert page.nodes == [{"id": "PVTI_1"}]
        assert page.has_next_page is True
        assert page.end_cursor == "abc"
        assert graphql.execute.call_args[0][1]["cursor"] == "prev"


class TestMutations:
    """Test add-item and field update mutations."""

    def test_add_item(self, client: ProjectClient, graphql: MagicMock) -> None:
        """Test that the item id and database id are returned."""
        graphql.execute.return_value = {
            "addProjectV2ItemById": {"item": {"id": "PVTI_9", "databaseId": 99}}
        }
        assert client.add_item("PVT_1", "I_9") == ("PVTI_9", 99)

    def test_add_item_failure(self, client: ProjectClient, graphql: MagicMock) -> None:
        """Test that GraphQL failures become MutationError."""
        graphql.execute.side_effect = GraphQLError("forbidden")
        with pytest.raises(MutationError, match="failed to add issue"):
            client.add_item("PVT_1", "I_9")

    def test_update_variants(self, client: ProjectClient, graphql: MagicMock) -> None:
        """Test the payload of each field update mutation."""
        client.update_single_select("PVT_1", "PVTI_1", "F_status", "O1")
        assert graphql.execute.call_args[0][1]["optionId"] == "O1"
        assert "singleSelectOptionId" in graphql.execute.call_args[0][0]

        client.update_text("PVT_1", "PVTI_1", "F_notes", "hello")
        assert graphql.execute.call_args[0][1]["text"] == "hello"

        client.update_number("PVT_1", "PVTI_1", "F_est", 3.5)
        assert graphql.execute.call_args[0][1]["number"] == 3.5
        assert "Float!" in graphql.execute.call_args[0][0]

    def test_update_failure(self, client: ProjectClient, graphql: MagicMock) -> None:
        """Test that update failures become MutationError."""
        graphql.execute.side_effect = GraphQLError("nope")
        with pytest.raises(MutationError, match="failed to update field F_status"):
            client.update_single_select("PVT_1", "PVTI_1", "F_status", "O1")


class TestGetItemForIssue:
    """Test finding an issue's item on a given project."""

    def test_matches_project(self, client: ProjectClient, graphql: MagicMock) -> None:
        """Test that items on other projects are ignored."""
        graphql.execute.return_value = {
            "node": {
                "projectItems": {
                    "nodes": [
                        {"id": "PVTI_other", "databaseId": 1, "project": {"id": "PVT_2"}},
                        {"id": "PVTI_15", "databaseId": 115, "project": {"id": "PVT_1"}},
                    ]
                }
            }
        }

        assert client.get_item_for_issue("PVT_1", "I_15") == ("PVTI_15", 115)
        assert graphql.execute.call_args[0][1] == {"issueId": "I_15"}

    def test_not_on_project(self, client: ProjectClient, graphql: MagicMock) -> None:
        graphql.execute.return_value = {"node": {"projectItems": {"nodes": []}}}
        assert client.get_item_for_issue("PVT_1", "I_15") is None
