"""Browser URLs for project boards and their items."""

from ..config.models import PMConfig

GITHUB_URL = "https://github.com"


class ProjectURLBuilder:
    """Builds project and item URLs from the configured project owner."""

    def __init__(self, config: PMConfig):
        self.config = config

    def project_url(self) -> str:
        """Return the board URL, or an empty string when it cannot be built."""
        project = self.config.project
        if not project.number:
            return ""
        if project.org:
            return f"{GITHUB_URL}/orgs/{project.org}/projects/{project.number}"
        if project.owner:
            return f"{GITHUB_URL}/users/{project.owner}/projects/{project.number}"
        return ""

    def item_url(self, database_id: int) -> str:
        """Return the URL opening an item's side pane on the board."""
        base = self.project_url()
        if not base or not database_id:
            return ""
        return f"{base}?pane=issue&itemId={database_id}"
