"""Resolution of user-supplied field values onto board identifiers."""

import logging
import re
from dataclasses import dataclass

from ..errors import (
    InvalidNumberError,
    OptionNotFoundError,
    SchemaNotFoundError,
    UnsupportedFieldTypeError,
)
from ..project.models import FieldDataType, FieldOption, FieldSchema
from .aliases import FieldAliasMap
from .schema_cache import SchemaCache

logger = logging.getLogger(__name__)

NUMERIC_PREFIX = re.compile(r"^[0-9.]+")


@dataclass(frozen=True)
class ResolutionContext:
    """Schema and aliases every resolver, compiler and fetcher works against."""

    schema: SchemaCache
    aliases: FieldAliasMap


@dataclass(frozen=True)
class ResolvedOption:
    field: FieldSchema
    option_id: str
    option_name: str


@dataclass(frozen=True)
class ResolvedText:
    field: FieldSchema
    text: str


@dataclass(frozen=True)
class ResolvedNumber:
    field: FieldSchema
    number: float


ResolvedValue = ResolvedOption | ResolvedText | ResolvedNumber


def parse_number(field_name: str, value: str) -> float:
    """Parse the leading numeric part of a value, e.g. ``"3pts"`` -> 3.0.

    Raises:
        InvalidNumberError: If the value has no usable numeric prefix
    """
    match = NUMERIC_PREFIX.match(value.strip())
    if not match:
        raise InvalidNumberError(field_name, value)
    try:
        return float(match.group())
    except ValueError as e:
        raise InvalidNumberError(field_name, value) from e


class FieldValueResolver:
    """Turns field names and values into board field schemas and payloads."""

    def __init__(self, context: ResolutionContext):
        self.context = context

    def resolve_field(self, field_name: str) -> FieldSchema:
        """Find the board field for a field name or a logical field key.

        Raises:
            SchemaNotFoundError: If neither the name nor its alias mapping
                matches a board field
        """
        field = self.context.schema.find_field(field_name)
        if field is not None:
            return field

        board_name = self.context.aliases.board_field_name(field_name)
        if board_name:
            field = self.context.schema.find_field(board_name)
            if field is not None:
                return field

        raise SchemaNotFoundError(field_name)

    def resolve_value(self, field_name: str, value: str) -> ResolvedValue:
        """Resolve a user value against the field's data type.

        Single-select values go through three tiers: an option named exactly
        ``value``, then the alias table of ``lowercase(field_name)`` (or of
        the key mapped to the board field), then a case-insensitive scan of
        the option names.

        Raises:
            SchemaNotFoundError: If the field does not exist
            OptionNotFoundError: If no option matches
            InvalidNumberError: If a NUMBER value has no numeric prefix
            UnsupportedFieldTypeError: For any other field type
        """
        field = self.resolve_field(field_name)

        if field.data_type == FieldDataType.TEXT:
            return ResolvedText(field=field, text=value)

        if field.data_type == FieldDataType.NUMBER:
            return ResolvedNumber(field=field, number=parse_number(field.name, value))

        if field.data_type == FieldDataType.SINGLE_SELECT:
            option = self._resolve_option(field_name, field, value)
            return ResolvedOption(
                field=field, option_id=option.id, option_name=option.name
            )

        raise UnsupportedFieldTypeError(field.name, field.data_type.value)

    def _resolve_option(
        self, field_name: str, field: FieldSchema, value: str
    ) -> FieldOption:
        option = field.option_by_name(value)
        if option is not None:
            return option

        aliases = self.context.aliases
        keys = [field_name.lower()]
        mapped_key = aliases.key_for_board_field(field.name)
        if mapped_key and mapped_key not in keys:
            keys.append(mapped_key)

        for key in keys:
            option_name = aliases.option_for_alias(key, value)
            if option_name is None:
                continue
            option = field.option_by_name(option_name)
            if option is not None:
                logger.debug("Resolved alias '%s' to option '%s'", value, option_name)
                return option

        lowered = value.lower()
        for option in field.options:
            if option.name.lower() == lowered:
                return option

        raise OptionNotFoundError(field.name, value)

    def option_name(self, field_name: str, option_id: str) -> str | None:
        """Look up an option name by id, the inverse of ``resolve_value``."""
        option = self.resolve_field(field_name).option_by_id(option_id)
        return option.name if option else None

    def display_option(self, field_name: str, option_name: str) -> str:
        """Render an option as ``alias (Option Name)`` when an alias exists."""
        key = self.alias_key(field_name)
        alias = self.context.aliases.alias_for_option(key, option_name) if key else None
        return f"{alias} ({option_name})" if alias else option_name

    def alias_key(self, field_name: str) -> str | None:
        """Return the alias table key used to label options of a field.

        The field name itself when it has aliases configured, otherwise the
        key whose mapping targets the resolved board field.
        """
        aliases = self.context.aliases
        if aliases.values(field_name):
            return field_name.lower()
        try:
            field = self.resolve_field(field_name)
        except SchemaNotFoundError:
            return None
        return aliases.key_for_board_field(field.name)
