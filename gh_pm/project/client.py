"""GitHub Projects V2 client built on the GraphQL API."""

import logging
from typing import Any

from ..errors import GraphQLError, MutationError
from ..github_client.graphql import GraphQLClient
from .models import FieldDataType, FieldOption, FieldSchema, ItemPage, ProjectInfo

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100

PROJECT_FIELDS = "id number title url"

GET_ORG_PROJECT = f"""
query($owner: String!, $number: Int!) {{
  organization(login: $owner) {{
    projectV2(number: $number) {{ {PROJECT_FIELDS} }}
  }}
}}
"""

GET_USER_PROJECT = f"""
query($owner: String!, $number: Int!) {{
  user(login: $owner) {{
    projectV2(number: $number) {{ {PROJECT_FIELDS} }}
  }}
}}
"""

GET_VIEWER_PROJECT = f"""
query($number: Int!) {{
  viewer {{
    projectV2(number: $number) {{ {PROJECT_FIELDS} }}
  }}
}}
"""

LIST_ORG_PROJECTS = f"""
query($owner: String!, $cursor: String) {{
  organization(login: $owner) {{
    projectsV2(first: 100, after: $cursor) {{
      nodes {{ {PROJECT_FIELDS} }}
      pageInfo {{ hasNextPage endCursor }}
    }}
  }}
}}
"""

LIST_USER_PROJECTS = f"""
query($owner: String!, $cursor: String) {{
  user(login: $owner) {{
    projectsV2(first: 100, after: $cursor) {{
      nodes {{ {PROJECT_FIELDS} }}
      pageInfo {{ hasNextPage endCursor }}
    }}
  }}
}}
"""

LIST_VIEWER_PROJECTS = f"""
query($cursor: String) {{
  viewer {{
    projectsV2(first: 100, after: $cursor) {{
      nodes {{ {PROJECT_FIELDS} }}
      pageInfo {{ hasNextPage endCursor }}
    }}
  }}
}}
"""

GET_PROJECT_FIELDS = """
query($projectId: ID!) {
  node(id: $projectId) {
    ... on ProjectV2 {
      fields(first: 100) {
        nodes {
          ... on ProjectV2Field { id name dataType }
          ... on ProjectV2IterationField { id name dataType }
          ... on ProjectV2SingleSelectField {
            id
            name
            dataType
            options { id name }
          }
        }
      }
    }
  }
}
"""

LIST_PROJECT_ITEMS = """
query($projectId: ID!, $first: Int!, $cursor: String) {
  node(id: $projectId) {
    ... on ProjectV2 {
      items(first: $first, after: $cursor) {
        pageInfo { hasNextPage endCursor }
        nodes {
          id
          databaseId
          fieldValues(first: 20) {
            nodes {
              ... on ProjectV2ItemFieldTextValue {
                field { ... on ProjectV2FieldCommon { name } }
                text
              }
              ... on ProjectV2ItemFieldNumberValue {
                field { ... on ProjectV2FieldCommon { name } }
                number
              }
              ... on ProjectV2ItemFieldSingleSelectValue {
                field { ... on ProjectV2FieldCommon { name } }
                optionId
                name
              }
            }
          }
          content {
            ... on Issue {
              id
              number
              title
              state
              url
              labels(first: 20) { nodes { name } }
            }
          }
        }
      }
    }
  }
}
"""

ADD_PROJECT_ITEM = """
mutation($projectId: ID!, $contentId: ID!) {
  addProjectV2ItemById(input: {projectId: $projectId, contentId: $contentId}) {
    item { id databaseId }
  }
}
"""

GET_ISSUE_PROJECT_ITEMS = """
query($issueId: ID!) {
  node(id: $issueId) {
    ... on Issue {
      projectItems(first: 10) {
        nodes {
          id
          databaseId
          project { id }
        }
      }
    }
  }
}
"""

UPDATE_SINGLE_SELECT = """
mutation($projectId: ID!, $itemId: ID!, $fieldId: ID!, $optionId: String!) {
  updateProjectV2ItemFieldValue(input: {
    projectId: $projectId
    itemId: $itemId
    fieldId: $fieldId
    value: { singleSelectOptionId: $optionId }
  }) { projectV2Item { id } }
}
"""

UPDATE_TEXT = """
mutation($projectId: ID!, $itemId: ID!, $fieldId: ID!, $text: String!) {
  updateProjectV2ItemFieldValue(input: {
    projectId: $projectId
    itemId: $itemId
    fieldId: $fieldId
    value: { text: $text }
  }) { projectV2Item { id } }
}
"""

UPDATE_NUMBER = """
mutation($projectId: ID!, $itemId: ID!, $fieldId: ID!, $number: Float!) {
  updateProjectV2ItemFieldValue(input: {
    projectId: $projectId
    itemId: $itemId
    fieldId: $fieldId
    value: { number: $number }
  }) { projectV2Item { id } }
}
"""


def parse_field_node(node: dict[str, Any]) -> FieldSchema | None:
    """Convert a ``fields`` connection node into a FieldSchema.

    Returns None for empty nodes (field kinds not covered by the fragments).
    """
    if not node.get("id") or not node.get("name"):
        return None
    return FieldSchema(
        id=node["id"],
        name=node["name"],
        data_type=FieldDataType.parse(node.get("dataType")),
        options=tuple(
            FieldOption(id=option["id"], name=option["name"])
            for option in node.get("options") or []
        ),
    )


class ProjectClient:
    """Queries and mutations for a GitHub Projects V2 board."""

    def __init__(self, graphql: GraphQLClient):
        self.graphql = graphql

    def get_project(self, org: str, number: int = 0, name: str = "") -> ProjectInfo:
        """Fetch an organization project by number, or by title when number is 0.

        Raises:
            ValueError: If the project does not exist
        """
        if number:
            data = self.graphql.execute(GET_ORG_PROJECT, {"owner": org, "number": number})
            project = (data.get("organization") or {}).get("projectV2")
            if not project:
                raise ValueError(f"project #{number} not found in organization '{org}'")
            return ProjectInfo.model_validate(project)

        return self._find_by_title(
            LIST_ORG_PROJECTS, {"owner": org}, "organization", name, org
        )

    def get_user_project(
        self, owner: str = "", number: int = 0, name: str = ""
    ) -> ProjectInfo:
        """Fetch a user project; the authenticated viewer when owner is empty.

        Raises:
            ValueError: If the project does not exist
        """
        owner_key = "user" if owner else "viewer"
        if number:
            query = GET_USER_PROJECT if owner else GET_VIEWER_PROJECT
            variables: dict[str, Any] = {"number": number}
            if owner:
                variables["owner"] = owner
            data = self.graphql.execute(query, variables)
            project = (data.get(owner_key) or {}).get("projectV2")
            if not project:
                raise ValueError(
                    f"project #{number} not found for user {owner or '(viewer)'}"
                )
            return ProjectInfo.model_validate(project)

        query = LIST_USER_PROJECTS if owner else LIST_VIEWER_PROJECTS
        variables = {"owner": owner} if owner else {}
        return self._find_by_title(query, variables, owner_key, name, owner or "viewer")

    def _find_by_title(
        self,
        query: str,
        variables: dict[str, Any],
        owner_key: str,
        name: str,
        owner_label: str,
    ) -> ProjectInfo:
        cursor = None
        while True:
            data = self.graphql.execute(query, {**variables, "cursor": cursor})
            connection = (data.get(owner_key) or {}).get("projectsV2") or {}
            for project in connection.get("nodes") or []:
                if project and project.get("title", "").lower() == name.lower():
                    return ProjectInfo.model_validate(project)

            page_info = connection.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            cursor = page_info.get("endCursor")

        raise ValueError(f"project '{name}' not found for '{owner_label}'")

    def get_fields(self, project_id: str) -> list[FieldSchema]:
        """Fetch the field schema of a project, options included."""
        data = self.graphql.execute(GET_PROJECT_FIELDS, {"projectId": project_id})
        nodes = ((data.get("node") or {}).get("fields") or {}).get("nodes") or []

        fields = []
        for node in nodes:
            field = parse_field_node(node or {})
            if field is not None:
                fields.append(field)

        logger.debug("Fetched %d fields for project %s", len(fields), project_id)
        return fields

    def list_items_page(
        self, project_id: str, page_size: int = MAX_PAGE_SIZE, cursor: str | None = None
    ) -> ItemPage:
        """Fetch one page of project items with content and field values."""
        first = max(1, min(page_size, MAX_PAGE_SIZE))
        data = self.graphql.execute(
            LIST_PROJECT_ITEMS,
            {"projectId": project_id, "first": first, "cursor": cursor},
        )
        items = ((data.get("node") or {}).get("items")) or {}
        page_info = items.get("pageInfo") or {}
        return ItemPage(
            nodes=[node for node in items.get("nodes") or [] if node],
            has_next_page=bool(page_info.get("hasNextPage")),
            end_cursor=page_info.get("endCursor"),
        )

    def add_item(self, project_id: str, content_id: str) -> tuple[str, int]:
        """Add an issue to the project, or return its existing item.

        Returns:
            Tuple of (project item id, project item database id)

        Raises:
            MutationError: If the mutation fails
        """
        try:
            data = self.graphql.execute(
                ADD_PROJECT_ITEM, {"projectId": project_id, "contentId": content_id}
            )
        except GraphQLError as e:
            raise MutationError(f"failed to add issue to project: {e}") from e

        item = (data.get("addProjectV2ItemById") or {}).get("item") or {}
        if not item.get("id"):
            raise MutationError("failed to add issue to project: no item returned")
        return item["id"], item.get("databaseId") or 0

    def get_item_for_issue(
        self, project_id: str, issue_id: str
    ) -> tuple[str, int] | None:
        """Find the item an issue already has on the project.

        Returns:
            Tuple of (project item id, project item database id), or None
            when the issue is not on the project
        """
        data = self.graphql.execute(GET_ISSUE_PROJECT_ITEMS, {"issueId": issue_id})
        nodes = ((data.get("node") or {}).get("projectItems") or {}).get("nodes") or []
        for node in nodes:
            if node and (node.get("project") or {}).get("id") == project_id:
                return node["id"], node.get("databaseId") or 0
        return None

    def _update_field(self, mutation: str, variables: dict[str, Any]) -> None:
        try:
            self.graphql.execute(mutation, variables)
        except GraphQLError as e:
            raise MutationError(f"failed to update field {variables['fieldId']}: {e}") from e

    def update_single_select(
        self, project_id: str, item_id: str, field_id: str, option_id: str
    ) -> None:
        self._update_field(
            UPDATE_SINGLE_SELECT,
            {
                "projectId": project_id,
                "itemId": item_id,
                "fieldId": field_id,
                "optionId": option_id,
            },
        )

    def update_text(self, project_id: str, item_id: str, field_id: str, text: str) -> None:
        self._update_field(
            UPDATE_TEXT,
            {"projectId": project_id, "itemId": item_id, "fieldId": field_id, "text": text},
        )

    def update_number(
        self, project_id: str, item_id: str, field_id: str, number: float
    ) -> None:
        self._update_field(
            UPDATE_NUMBER,
            {
                "projectId": project_id,
                "itemId": item_id,
                "fieldId": field_id,
                "number": number,
            },
        )
