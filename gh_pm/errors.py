"""Exception types shared across gh-pm.

Fetch-time errors (``ConfigError``, ``PaginationError``) abort a command.
Resolution and mutation errors are scoped to a single field update on a single
item and are reported as warnings by the triage applier.
"""


class GhPmError(Exception):
    """Base class for all gh-pm errors."""


class ConfigError(GhPmError):
    """Configuration file is missing or invalid."""


class GraphQLError(GhPmError):
    """A GraphQL request failed at the transport, HTTP or GraphQL level."""


class ResolutionError(GhPmError):
    """A field or value could not be mapped onto the board schema."""

    def __init__(self, field_name: str, message: str):
        super().__init__(message)
        self.field_name = field_name


class SchemaNotFoundError(ResolutionError):
    """The board has no field with the requested name."""

    def __init__(self, field_name: str):
        super().__init__(field_name, f"field '{field_name}' not found in project")


class OptionNotFoundError(ResolutionError):
    """A value does not correspond to any option of the field."""

    def __init__(self, field_name: str, value: str, message: str | None = None):
        super().__init__(
            field_name,
            message or f"option '{value}' not found for field '{field_name}'",
        )
        self.value = value


class InvalidNumberError(OptionNotFoundError):
    """A NUMBER field value has no leading numeric part."""

    def __init__(self, field_name: str, value: str):
        super().__init__(
            field_name,
            value,
            f"invalid numeric value '{value}' for field '{field_name}'",
        )


class UnsupportedFieldTypeError(ResolutionError):
    """The field exists but its data type cannot be written."""

    def __init__(self, field_name: str, data_type: str):
        super().__init__(
            field_name,
            f"unsupported field type '{data_type}' for field '{field_name}'",
        )
        self.data_type = data_type


class PaginationError(GhPmError):
    """Listing board items failed part way through."""


class MutationError(GhPmError):
    """Writing to the board or the repository failed."""


class CollectionAbortedError(GhPmError):
    """Operator input could not be read during interactive collection."""
