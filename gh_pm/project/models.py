"""Pydantic models for GitHub Projects V2 board data.

API Reference: https://docs.github.com/en/issues/planning-and-tracking-with-projects/automating-your-project/using-the-api-to-manage-projects
"""

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class FieldDataType(str, Enum):
    """Board field data types the tool distinguishes between."""

    SINGLE_SELECT = "SINGLE_SELECT"
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: str | None) -> "FieldDataType":
        """Map a raw ``dataType`` string onto the enum, defaulting to OTHER."""
        try:
            return cls((value or "").upper())
        except ValueError:
            return cls.OTHER


class FieldOption(BaseModel):
    """One selectable value of a single-select field."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque option id issued by the board")
    name: str = Field(..., description="Display name of the option")


class FieldSchema(BaseModel):
    """Authoritative definition of a board field."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque field id issued by the board")
    name: str = Field(..., description="Field display name, e.g. 'Status'")
    data_type: FieldDataType = Field(..., description="Field data type")
    options: tuple[FieldOption, ...] = Field(
        default=(), description="Single-select options in board order"
    )

    def option_by_name(self, name: str) -> FieldOption | None:
        for option in self.options:
            if option.name == name:
                return option
        return None

    def option_by_id(self, option_id: str) -> FieldOption | None:
        for option in self.options:
            if option.id == option_id:
                return option
        return None


class ProjectInfo(BaseModel):
    """Identity of a project board."""

    id: str
    number: int = 0
    title: str = ""
    url: str = ""


class TextValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


class NumberValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["number"] = "number"
    number: float


class SingleSelectValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["single_select"] = "single_select"
    option_id: str = ""
    option_name: str


class AbsentValue(BaseModel):
    """The field has never been set on the item, or could not be decoded."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["absent"] = "absent"


FieldValue = Annotated[
    TextValue | NumberValue | SingleSelectValue | AbsentValue,
    Field(discriminator="kind"),
]

ABSENT = AbsentValue()


def is_empty(value: FieldValue) -> bool:
    """Whether a field value counts as unset for ``-has:`` filtering."""
    if isinstance(value, AbsentValue):
        return True
    if isinstance(value, TextValue):
        return not value.text.strip()
    if isinstance(value, SingleSelectValue):
        return not (value.option_id or value.option_name)
    return False


def display_value(value: FieldValue) -> str:
    """Human readable rendering of a field value."""
    if isinstance(value, TextValue):
        return value.text
    if isinstance(value, NumberValue):
        return f"{value.number:g}"
    if isinstance(value, SingleSelectValue):
        return value.option_name
    return ""


class BoardItem(BaseModel):
    """An issue as seen through the project board, with its field values."""

    item_id: str = Field("", description="Project item node id ('' if not on board)")
    database_id: int = Field(0, description="Project item database id")
    issue_id: str = Field(..., description="Issue node id")
    number: int = Field(..., description="Issue number")
    title: str = Field(..., description="Issue title")
    state: str = Field("OPEN", description="Issue state: OPEN or CLOSED")
    url: str = Field("", description="Issue HTML URL")
    labels: set[str] = Field(default_factory=set, description="Label names")
    field_values: dict[str, FieldValue] = Field(
        default_factory=dict, description="Board field name -> decoded value"
    )

    def value_of(self, field_name: str) -> FieldValue:
        """Return the value of a field, matching the name case-insensitively."""
        if field_name in self.field_values:
            return self.field_values[field_name]
        lowered = field_name.lower()
        for name, value in self.field_values.items():
            if name.lower() == lowered:
                return value
        return ABSENT

    def has_label(self, label: str) -> bool:
        lowered = label.lower()
        return any(existing.lower() == lowered for existing in self.labels)


class ItemPage(BaseModel):
    """One page of the board's item connection."""

    nodes: list[dict[str, Any]] = Field(default_factory=list)
    has_next_page: bool = False
    end_cursor: str | None = None
