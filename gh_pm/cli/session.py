"""Wiring of API clients, schema cache and resolution context for commands."""

import logging
from dataclasses import dataclass
from pathlib import Path

from ..config.loader import save_config
from ..config.models import ConfigMetadata, PMConfig
from ..github_client.client import GitHubClient
from ..github_client.graphql import GraphQLClient
from ..project.client import ProjectClient
from ..project.url import ProjectURLBuilder
from ..resolution.aliases import FieldAliasMap
from ..resolution.resolver import ResolutionContext
from ..resolution.schema_cache import SchemaCache

logger = logging.getLogger(__name__)


def resolve_project_id(config: PMConfig, client: ProjectClient) -> str:
    """Return the cached project id, looking the project up when unknown.

    Raises:
        ValueError: If the project cannot be found
    """
    if config.project_id:
        return config.project_id

    project = config.project
    if project.org:
        info = client.get_project(project.org, project.number, project.name)
    else:
        info = client.get_user_project(project.owner, project.number, project.name)

    config.set_project_id(info.id)
    logger.debug("Resolved project '%s' to %s", info.title, info.id)
    return info.id


@dataclass
class BoardSession:
    """Everything a command needs to talk to one project board."""

    config: PMConfig
    config_path: Path
    graphql: GraphQLClient
    project_client: ProjectClient
    github_client: GitHubClient
    project_id: str
    context: ResolutionContext
    url_builder: ProjectURLBuilder
    project_id_changed: bool = False

    @classmethod
    def open(
        cls,
        config: PMConfig,
        config_path: Path,
        token: str | None = None,
        refresh_fields: bool = False,
    ) -> "BoardSession":
        """Connect to GitHub and prepare the schema cache.

        Raises:
            ValueError: If the configuration is invalid, no token is available
                or the project is unknown
            GraphQLError: If the project or schema query fails
        """
        config.validate_config()
        graphql = GraphQLClient(token=token)
        project_client = ProjectClient(graphql)
        github_client = GitHubClient(token=graphql.token)

        had_project_id = bool(config.project_id)
        project_id = resolve_project_id(config, project_client)

        if config.metadata is None:
            config.metadata = ConfigMetadata()
        schema = SchemaCache(
            client=project_client,
            project_id=project_id,
            persisted=config.metadata,
        )
        if refresh_fields:
            schema.refresh()
        elif config.has_cached_fields():
            logger.debug("Using cached field schema from %s", config_path)

        context = ResolutionContext(
            schema=schema, aliases=FieldAliasMap.from_config(config.fields)
        )
        return cls(
            config=config,
            config_path=config_path,
            graphql=graphql,
            project_client=project_client,
            github_client=github_client,
            project_id=project_id,
            context=context,
            url_builder=ProjectURLBuilder(config),
            project_id_changed=not had_project_id,
        )

    def save_metadata(self) -> bool:
        """Write the configuration back if the project id or schema changed."""
        if not (self.project_id_changed or self.context.schema.dirty):
            return False
        save_config(self.config, self.config_path)
        self.context.schema.dirty = False
        self.project_id_changed = False
        logger.debug("Saved project metadata to %s", self.config_path)
        return True

    def close(self) -> None:
        self.graphql.close()
