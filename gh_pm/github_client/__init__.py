"""GitHub client package for API interaction."""

from .client import GitHubClient, build_issue_query
from .graphql import GraphQLClient
from .models import GitHubIssue

__all__ = [
    "GitHubClient",
    "GitHubIssue",
    "GraphQLClient",
    "build_issue_query",
]
