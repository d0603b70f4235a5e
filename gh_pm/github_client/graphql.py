"""Minimal GitHub GraphQL client used for Projects V2 operations."""

import logging
import os
from typing import Any

import httpx

from ..errors import GraphQLError

logger = logging.getLogger(__name__)

GRAPHQL_URL = "https://api.github.com/graphql"
DEFAULT_TIMEOUT_SECONDS = 30.0


class GraphQLClient:
    """Executes GraphQL queries and mutations against the GitHub API."""

    def __init__(
        self,
        token: str | None = None,
        http_client: httpx.Client | None = None,
        url: str = GRAPHQL_URL,
    ):
        """Initialize the GraphQL client.

        Args:
            token: GitHub personal access token. If None, reads from
                GITHUB_TOKEN env var.
            http_client: Preconfigured httpx client (mainly for tests)
            url: GraphQL endpoint
        """
        self.token = token or os.getenv("GITHUB_TOKEN")
        if not self.token:
            raise ValueError(
                "GitHub token is required. Set GITHUB_TOKEN environment variable."
            )

        self.url = url
        self.http = http_client or httpx.Client(timeout=DEFAULT_TIMEOUT_SECONDS)
        self.headers = {
            "Authorization": f"Bearer {self.token}",
            "User-Agent": "gh-pm/0.1.0",
            "Content-Type": "application/json",
        }

    def execute(
        self, query: str, variables: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Run a query or mutation and return its ``data`` payload.

        Raises:
            GraphQLError: On network failures, HTTP errors or GraphQL errors
        """
        payload = {"query": query, "variables": variables or {}}
        try:
            response = self.http.post(self.url, json=payload, headers=self.headers)
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPStatusError as e:
            raise GraphQLError(
                f"GraphQL request failed: {e.response.status_code} "
                f"{e.response.reason_phrase}"
            ) from e
        except httpx.HTTPError as e:
            raise GraphQLError(f"Network error during GraphQL request: {e}") from e
        except ValueError as e:
            raise GraphQLError(f"Invalid JSON response from GraphQL API: {e}") from e

        errors = result.get("errors")
        if errors:
            messages = [error.get("message", str(error)) for error in errors]
            raise GraphQLError(f"GraphQL query failed: {'; '.join(messages)}")

        logger.debug("GraphQL request succeeded (variables=%s)", variables)
        return result.get("data") or {}

    def close(self) -> None:
        self.http.close()
