"""GitHub Projects V2 board access."""

from .client import ProjectClient
from .models import (
    ABSENT,
    AbsentValue,
    BoardItem,
    FieldDataType,
    FieldOption,
    FieldSchema,
    FieldValue,
    ItemPage,
    NumberValue,
    ProjectInfo,
    SingleSelectValue,
    TextValue,
)
from .url import ProjectURLBuilder

__all__ = [
    "ABSENT",
    "AbsentValue",
    "BoardItem",
    "FieldDataType",
    "FieldOption",
    "FieldSchema",
    "FieldValue",
    "ItemPage",
    "NumberValue",
    "ProjectClient",
    "ProjectInfo",
    "ProjectURLBuilder",
    "SingleSelectValue",
    "TextValue",
]
