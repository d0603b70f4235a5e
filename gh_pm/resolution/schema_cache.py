"""Board field schema cache.

Fields are looked up in three places, in order: the in-memory cache for this
run, the schema persisted in the configuration ``metadata`` block, and a live
query to the board, which writes its result back into both. The live query only
runs when nothing usable is persisted or a refresh is requested.
"""

import logging

from ..config.models import ConfigMetadata, FieldMetadata
from ..errors import SchemaNotFoundError
from ..project.client import ProjectClient
from ..project.models import FieldDataType, FieldOption, FieldSchema

logger = logging.getLogger(__name__)


def schema_from_metadata(name: str, metadata: FieldMetadata) -> FieldSchema | None:
    """Rebuild a FieldSchema from its persisted form.

    Entries written before data types were persisted carry no ``data_type``;
    those with options are single-select fields, the rest cannot be trusted
    and yield None.
    """
    options = tuple(
        FieldOption(id=option_id, name=option_name)
        for option_name, option_id in metadata.options.items()
    )
    if metadata.data_type:
        data_type = FieldDataType.parse(metadata.data_type)
    elif options:
        data_type = FieldDataType.SINGLE_SELECT
    else:
        return None

    return FieldSchema(
        id=metadata.id,
        name=metadata.name or name,
        data_type=data_type,
        options=options,
    )


def metadata_from_schema(field: FieldSchema) -> FieldMetadata:
    return FieldMetadata(
        id=field.id,
        name=field.name,
        data_type=field.data_type.value,
        options={option.name: option.id for option in field.options},
    )


class SchemaCache:
    """Holds the board's field and option identifiers, keyed by field name."""

    def __init__(
        self,
        client: ProjectClient | None = None,
        project_id: str | None = None,
        persisted: ConfigMetadata | None = None,
        fields: list[FieldSchema] | None = None,
    ):
        """Initialize the cache.

        Args:
            client: Board client used for live schema queries
            project_id: Node id of the board
            persisted: Schema cache stored in the configuration, updated in
                place after a live load
            fields: Known schema; when given, no other source is consulted
        """
        self.client = client
        self.project_id = project_id
        self.persisted = persisted
        self.dirty = False
        self._fields: dict[str, FieldSchema] = {}
        self._loaded = False

        if fields is not None:
            self._store(fields)
            self._loaded = True

    def _store(self, fields: list[FieldSchema]) -> None:
        self._fields = {field.name: field for field in fields}

    def _load_persisted(self) -> bool:
        if self.persisted is None or not self.persisted.fields:
            return False

        fields = []
        for name, metadata in self.persisted.fields.items():
            field = schema_from_metadata(name, metadata)
            if field is None:
                logger.debug("Persisted schema for '%s' is incomplete", name)
                return False
            fields.append(field)

        self._store(fields)
        logger.debug("Loaded %d fields from persisted schema", len(fields))
        return True

    def _load_live(self) -> bool:
        if self.client is None or not self.project_id:
            return False

        fields = self.client.get_fields(self.project_id)
        self._store(fields)

        if self.persisted is not None:
            self.persisted.fields = {
                field.name: metadata_from_schema(field) for field in fields
            }
            self.persisted.project.id = self.project_id
            self.dirty = True

        logger.debug("Loaded %d fields from the board", len(fields))
        return True

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        if not self._load_persisted():
            self._load_live()
        self._loaded = True

    def _lookup(self, name: str) -> FieldSchema | None:
        if name in self._fields:
            return self._fields[name]
        lowered = name.lower()
        for field_name, field in self._fields.items():
            if field_name.lower() == lowered:
                return field
        return None

    def refresh(self) -> bool:
        """Force a live schema load. Returns False when no board is reachable."""
        refreshed = self._load_live()
        self._loaded = self._loaded or refreshed
        return refreshed

    def find_field(self, name: str) -> FieldSchema | None:
        """Return the field named ``name`` or None.

        A miss never queries the board: fields added after the persisted
        schema was written need ``refresh()`` (``--refresh-fields``).
        """
        self._ensure_loaded()
        return self._lookup(name)

    def get_field(self, name: str, refresh: bool = False) -> FieldSchema:
        """Return the field named ``name``.

        Raises:
            SchemaNotFoundError: If the board has no such field
        """
        if refresh:
            self.refresh()
        field = self.find_field(name)
        if field is None:
            raise SchemaNotFoundError(name)
        return field

    def fields(self) -> list[FieldSchema]:
        self._ensure_loaded()
        return list(self._fields.values())

    def field_names(self) -> list[str]:
        return [field.name for field in self.fields()]
