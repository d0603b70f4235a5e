"""GitHub REST API client using PyGitHub."""

import logging
import os

from github import Github
from github.GithubException import GithubException, UnknownObjectException
from github.Issue import Issue
from github.Repository import Repository
from rich.console import Console

from ..errors import MutationError
from ..utils.date_converter import convert_search_query
from .models import GitHubIssue

console = Console()
logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 100


def build_issue_query(
    repository: str,
    search: str | None = None,
    state: str = "open",
    labels: list[str] | None = None,
    assignee: str | None = None,
    author: str | None = None,
    milestone: str | None = None,
) -> str:
    """Build a GitHub issue search query scoped to one repository.

    Example:
        >>> build_issue_query("octo/repo", "-label:triaged", labels=["bug"])
        'repo:octo/repo is:issue state:open label:"bug" -label:triaged'
    """
    query_parts = [f"repo:{repository}", "is:issue"]

    if state != "all":
        query_parts.append(f"state:{state}")

    for label in labels or []:
        query_parts.append(f'label:"{label}"')

    if assignee:
        query_parts.append(f"assignee:{assignee}")

    if author:
        query_parts.append(f"author:{author}")

    if milestone:
        query_parts.append(f'milestone:"{milestone}"')

    if search:
        query_parts.append(search)

    return " ".join(query_parts)


class GitHubClient:
    """GitHub API client for issue listing and label updates."""

    def __init__(self, token: str | None = None):
        """Initialize GitHub client with authentication.

        Args:
            token: GitHub personal access token. If None, reads from
                GITHUB_TOKEN env var.
        """
        self.token = token or os.getenv("GITHUB_TOKEN")
        if not self.token:
            raise ValueError(
                "GitHub token is required. Set GITHUB_TOKEN environment variable."
            )

        self.github = Github(self.token)

    def _check_rate_limit(self) -> None:
        """Warn when few API requests remain in the rate limit window."""
        try:
            rate_limit = self.github.get_rate_limit()
            remaining = rate_limit.rate.remaining
            logger.debug("GitHub API rate limit: %s requests remaining", remaining)

            if remaining < 10:
                console.print(
                    f"⚠️  [yellow]GitHub API rate limit low: {remaining} "
                    "requests remaining[/yellow]"
                )

        except Exception:
            # Rate limit introspection is informational only
            pass

    def _convert_issue(self, github_issue: Issue) -> GitHubIssue:
        """Convert PyGitHub issue to our model."""
        return GitHubIssue(
            number=github_issue.number,
            title=github_issue.title,
            id=github_issue.node_id,
            url=github_issue.html_url,
            state=github_issue.state,
            labels=[label.name for label in github_issue.labels],
        )

    def get_repository(self, repository: str) -> Repository:
        """Get repository object for an ``owner/repo`` string."""
        try:
            return self.github.get_repo(repository)
        except UnknownObjectException:
            raise ValueError(f"Repository {repository} not found")

    def get_issue(self, repository: str, number: int) -> GitHubIssue:
        """Get a single issue by number.

        Raises:
            ValueError: If the repository or the issue does not exist
        """
        self._check_rate_limit()

        repo = self.get_repository(repository)
        try:
            github_issue = repo.get_issue(number)
        except UnknownObjectException:
            raise ValueError(f"Issue #{number} not found in {repository}")

        if github_issue.pull_request is not None:
            raise ValueError(f"#{number} in {repository} is a pull request")
        return self._convert_issue(github_issue)

    def list_issues(
        self,
        repository: str,
        search: str | None = None,
        state: str = "open",
        labels: list[str] | None = None,
        assignee: str | None = None,
        author: str | None = None,
        milestone: str | None = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> list[GitHubIssue]:
        """List repository issues matching the given filters.

        Args:
            repository: Repository in ``owner/repo`` form
            search: Free-form search query; date expressions such as
                ``created:>@today-1w`` are converted to ISO dates
            state: Issue state (open, closed, all)
            labels: Label names the issues must carry
            assignee: Assignee login
            author: Author login
            milestone: Milestone title
            limit: Maximum number of issues to return

        Returns:
            List of GitHubIssue objects
        """
        self._check_rate_limit()

        if search:
            try:
                search = convert_search_query(search)
            except ValueError as e:
                console.print(
                    "⚠️  [yellow]Warning: Failed to convert date expressions "
                    f"in search query: {e}[/yellow]"
                )

        query = build_issue_query(
            repository,
            search=search,
            state=state,
            labels=labels,
            assignee=assignee,
            author=author,
            milestone=milestone,
        )
        logger.debug("Searching issues with query: %s", query)

        result_issues: list[GitHubIssue] = []
        for github_issue in self.github.search_issues(query):
            if len(result_issues) >= limit:
                break
            result_issues.append(self._convert_issue(github_issue))

        return result_issues

    def add_labels(self, repository: str, issue_number: int, labels: list[str]) -> None:
        """Add labels to an issue, keeping the labels already present.

        Raises:
            MutationError: If the issue cannot be found or updated
        """
        self._check_rate_limit()

        try:
            github_issue = self.get_repository(repository).get_issue(issue_number)
            github_issue.add_to_labels(*labels)
        except UnknownObjectException as e:
            raise MutationError(
                f"Issue #{issue_number} not found in {repository}"
            ) from e
        except (GithubException, ValueError) as e:
            raise MutationError(f"failed to apply labels: {e}") from e

        logger.debug("Added labels %s to issue #%s", labels, issue_number)
