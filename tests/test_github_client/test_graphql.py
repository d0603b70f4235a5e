"""Tests for the GraphQL client."""

import json
from unittest.mock import patch

import httpx
import pytest

from gh_pm.errors import GraphQLError
from gh_pm.github_client.graphql import GRAPHQL_URL, GraphQLClient


def make_client(handler) -> GraphQLClient:
    return GraphQLClient(
        token="fake-token", http_client=httpx.Client(transport=httpx.MockTransport(handler))
    )


class TestGraphQLClient:
    """Test query execution and error mapping."""

    def test_requires_token(self) -> None:
        """Test that a missing token is rejected."""
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ValueError, match="GitHub token is required"):
                GraphQLClient()

    def test_token_from_environment(self) -> None:
        """Test that GITHUB_TOKEN is used when no token is passed."""
        with patch.dict("os.environ", {"GITHUB_TOKEN": "env-token"}):
            client = GraphQLClient()
        assert client.headers["Authorization"] == "Bearer env-token"

    def test_execute_returns_data(self) -> None:
        """Test that the data payload is returned and the request is well formed."""
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": {"viewer": {"login": "me"}}})

        client = make_client(handler)
        data = client.execute("query { viewer { login } }", {"a": 1})

        assert data == {"viewer": {"login": "me"}}
        assert seen["url"] == GRAPHQL_URL
        assert seen["auth"] == "Bearer fake-token"
        assert seen["body"]["variables"] == {"a": 1}

    def test_graphql_errors_raise(self) -> None:
        """Test that a non-empty errors array raises GraphQLError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={
                    "data": None,
                    "errors": [{"message": "bad field"}, {"message": "also bad"}],
                },
            )

        with pytest.raises(GraphQLError, match="bad field; also bad"):
            make_client(handler).execute("query { x }")

    def test_http_status_error(self) -> None:
        """Test that non-2xx responses raise GraphQLError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="bad gateway")

        with pytest.raises(GraphQLError, match="GraphQL request failed: 502"):
            make_client(handler).execute("query { x }")

    def test_network_error(self) -> None:
        """Test that transport failures raise GraphQLError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(GraphQLError, match="Network error"):
            make_client(handler).execute("query { x }")

    def test_invalid_json(self) -> None:
        """Test that a non-JSON body raises GraphQLError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>")

        with pytest.raises(GraphQLError, match="Invalid JSON"):
            make_client(handler).execute("query { x }")

    def test_missing_data_is_empty(self) -> None:
        """Test that a response without data yields an empty dict."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={})

        assert make_client(handler).execute("query { x }") == {}
