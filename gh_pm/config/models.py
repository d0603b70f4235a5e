"""Pydantic models for the ``.gh-pm.yml`` configuration file."""

from pydantic import BaseModel, Field


class ProjectConfig(BaseModel):
    """Project board the tool operates on."""

    name: str = Field("", description="Project title, used when number is unset")
    number: int = Field(0, description="Project number from the board URL")
    org: str = Field("", description="Owning organization login (org projects)")
    owner: str = Field("", description="Owning user login (user projects)")


class DefaultsConfig(BaseModel):
    """Default values applied when creating issues."""

    priority: str = ""
    status: str = ""
    labels: list[str] = Field(default_factory=list)


class FieldMapping(BaseModel):
    """Alias table for one logical field key.

    ``values`` maps short aliases (``p1``) onto board option names (``P1``).
    Several aliases may point at the same option name.
    """

    field: str = Field(..., description="Board field name, e.g. 'Status'")
    values: dict[str, str] = Field(
        default_factory=dict, description="Alias -> board option name"
    )


class TriageApply(BaseModel):
    """Static changes applied to every matched issue."""

    labels: list[str] = Field(default_factory=list)
    fields: dict[str, str] = Field(default_factory=dict)


class TriageInteractive(BaseModel):
    """Fields the operator is prompted for, once per matched issue."""

    status: bool = False
    estimate: bool = False
    fields: list[str] = Field(
        default_factory=list, description="Additional field keys to prompt for"
    )

    def field_keys(self) -> list[str]:
        """Return the interactive field keys in prompt order."""
        keys = []
        if self.status:
            keys.append("status")
        if self.estimate:
            keys.append("estimate")
        for key in self.fields:
            key = key.strip().lower()
            if key and key not in keys:
                keys.append(key)
        return keys


class TriageConfig(BaseModel):
    """Named triage configuration."""

    query: str = Field(..., description="Issue query selecting the items")
    apply: TriageApply = Field(default_factory=TriageApply)
    interactive: TriageInteractive = Field(default_factory=TriageInteractive)
    instruction: str = Field("", description="Text shown before triage starts")


class ProjectMetadata(BaseModel):
    """Cached project node id."""

    id: str = ""


class FieldMetadata(BaseModel):
    """Cached board field schema."""

    id: str
    name: str = ""
    data_type: str = ""
    options: dict[str, str] = Field(
        default_factory=dict, description="Option name -> option id, board order"
    )


class ConfigMetadata(BaseModel):
    """Schema cache persisted alongside the user configuration."""

    project: ProjectMetadata = Field(default_factory=ProjectMetadata)
    fields: dict[str, FieldMetadata] = Field(default_factory=dict)


class PMConfig(BaseModel):
    """Complete ``.gh-pm.yml`` document."""

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    repositories: list[str] = Field(default_factory=list)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    fields: dict[str, FieldMapping] = Field(default_factory=dict)
    triage: dict[str, TriageConfig] = Field(default_factory=dict)
    metadata: ConfigMetadata | None = None

    @property
    def project_id(self) -> str:
        """Cached project node id, or an empty string."""
        if self.metadata is None:
            return ""
        return self.metadata.project.id

    def set_project_id(self, project_id: str) -> None:
        if self.metadata is None:
            self.metadata = ConfigMetadata()
        self.metadata.project.id = project_id

    def has_cached_fields(self) -> bool:
        return self.metadata is not None and bool(self.metadata.fields)

    @property
    def primary_repository(self) -> str | None:
        return self.repositories[0] if self.repositories else None

    def validate_config(self) -> None:
        """Check the configuration for structural problems.

        Raises:
            ValueError: Describing the first problem found
        """
        if not self.project.name and not self.project.number:
            raise ValueError("project name or number is required")

        if not self.repositories:
            raise ValueError("at least one repository must be configured")

        for repo in self.repositories:
            parts = repo.split("/")
            if len(parts) != 2 or not parts[0] or not parts[1]:
                raise ValueError(
                    f"invalid repository format '{repo}': must be 'owner/repo'"
                )

        for key, mapping in self.fields.items():
            if not mapping.field:
                raise ValueError(f"field name is required for '{key}'")
            if not mapping.values:
                raise ValueError(
                    f"at least one value mapping is required for field '{key}'"
                )

        for key, default in (
            ("priority", self.defaults.priority),
            ("status", self.defaults.status),
        ):
            mapping = self.fields.get(key)
            if default and mapping and default not in mapping.values:
                raise ValueError(
                    f"default {key} '{default}' is not defined in field mappings"
                )


def default_config() -> PMConfig:
    """Return the configuration written for a freshly initialised project."""
    return PMConfig(
        defaults=DefaultsConfig(priority="medium", status="todo", labels=["pm-tracked"]),
        fields={
            "priority": FieldMapping(
                field="Priority",
                values={
                    "low": "Low",
                    "medium": "Medium",
                    "high": "High",
                    "critical": "Critical",
                },
            ),
            "status": FieldMapping(
                field="Status",
                values={
                    "todo": "Todo",
                    "in_progress": "In Progress",
                    "in_review": "In Review",
                    "done": "Done",
                },
            ),
        },
        triage={
            "tracked": TriageConfig(
                query="is:issue is:open -label:pm-tracked",
                apply=TriageApply(
                    labels=["pm-tracked"],
                    fields={"status": "todo", "priority": "medium"},
                ),
                interactive=TriageInteractive(status=True),
            ),
            "estimate": TriageConfig(
                query="is:issue is:open -has:estimate",
                interactive=TriageInteractive(estimate=True),
            ),
        },
    )
