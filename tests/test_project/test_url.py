"""Tests for project URL building."""

from gh_pm.config.models import PMConfig, ProjectConfig
from gh_pm.project.url import ProjectURLBuilder


def builder(**project: object) -> ProjectURLBuilder:
    return ProjectURLBuilder(PMConfig(project=ProjectConfig(**project)))


class TestProjectURLBuilder:
    """Test board and item URLs."""

    def test_org_project(self) -> None:
        """Test organization project URLs."""
        urls = builder(org="octo", number=3)
        assert urls.project_url() == "https://github.com/orgs/octo/projects/3"
        assert (
            urls.item_url(42)
            == "https://github.com/orgs/octo/projects/3?pane=issue&itemId=42"
        )

    def test_user_project(self) -> None:
        """Test user project URLs."""
        assert (
            builder(owner="alice", number=1).project_url()
            == "https://github.com/users/alice/projects/1"
        )

    def test_unknown_owner_or_number(self) -> None:
        """Test that incomplete configuration yields empty URLs."""
        assert builder(number=3).project_url() == ""
        assert builder(org="octo").project_url() == ""
        assert builder(org="octo", number=3).item_url(0) == ""
