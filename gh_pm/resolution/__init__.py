"""Field schema lookup and value resolution."""

from .aliases import FieldAliasMap
from .resolver import (
    FieldValueResolver,
    ResolutionContext,
    ResolvedNumber,
    ResolvedOption,
    ResolvedText,
    ResolvedValue,
    parse_number,
)
from .schema_cache import SchemaCache

__all__ = [
    "FieldAliasMap",
    "FieldValueResolver",
    "ResolutionContext",
    "ResolvedNumber",
    "ResolvedOption",
    "ResolvedText",
    "ResolvedValue",
    "SchemaCache",
    "parse_number",
]
