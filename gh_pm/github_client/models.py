"""Pydantic models for GitHub repository data.

These models map onto the subset of the GitHub REST API Issue object that the
triage fallback path needs.
API Reference: https://docs.github.com/en/rest/issues/issues
"""

from pydantic import BaseModel, Field


class GitHubIssue(BaseModel):
    """Repository issue as returned by the issue listing collaborator."""

    number: int = Field(..., description="Issue number within the repository")
    title: str = Field(..., description="Issue title")
    id: str = Field(..., description="GraphQL node id of the issue")
    url: str = Field("", description="HTML URL of the issue")
    state: str = Field("open", description="Current state: 'open' or 'closed'")
    labels: list[str] = Field(
        default_factory=list, description="Names of the labels on the issue"
    )
