"""User-configured aliases for board field options."""

from ..config.models import FieldMapping
from ..project.models import FieldOption


class FieldAliasMap:
    """Maps logical field keys and short aliases onto board names.

    Keys are matched case-insensitively. Several aliases may point at the same
    option name; reverse lookups pick the lexicographically smallest alias.
    """

    def __init__(self, mappings: dict[str, FieldMapping] | None = None):
        self._mappings = {
            key.lower(): mapping for key, mapping in (mappings or {}).items()
        }

    @classmethod
    def from_config(cls, fields: dict[str, FieldMapping]) -> "FieldAliasMap":
        return cls(fields)

    def keys(self) -> list[str]:
        return list(self._mappings)

    def has_key(self, key: str) -> bool:
        return key.lower() in self._mappings

    def values(self, key: str) -> dict[str, str]:
        """Alias -> option name table for a field key (empty if unmapped)."""
        mapping = self._mappings.get(key.lower())
        return dict(mapping.values) if mapping else {}

    def board_field_name(self, key: str) -> str | None:
        mapping = self._mappings.get(key.lower())
        return mapping.field if mapping else None

    def option_for_alias(self, key: str, alias: str) -> str | None:
        """Return the option name an alias stands for."""
        values = self.values(key)
        if alias in values:
            return values[alias]
        lowered = alias.lower()
        for candidate in sorted(values):
            if candidate.lower() == lowered:
                return values[candidate]
        return None

    def key_for_board_field(self, field_name: str) -> str | None:
        """Return the field key whose mapping targets a board field.

        Keys with aliases configured win over empty mappings; ties go to the
        smallest key.
        """
        lowered = field_name.lower()
        matches = sorted(
            (not mapping.values, key)
            for key, mapping in self._mappings.items()
            if mapping.field.lower() == lowered
        )
        return matches[0][1] if matches else None

    def alias_for_option(self, key: str, option_name: str) -> str | None:
        """Reverse lookup: the smallest alias mapped to ``option_name``."""
        aliases = sorted(
            alias for alias, name in self.values(key).items() if name == option_name
        )
        return aliases[0] if aliases else None

    def aliases_in_option_order(
        self, key: str, options: tuple[FieldOption, ...] | list[FieldOption]
    ) -> list[tuple[str, FieldOption]]:
        """Pair board options with their alias, in board order.

        Options without an alias are left out.
        """
        pairs = []
        for option in options:
            alias = self.alias_for_option(key, option.name)
            if alias is not None:
                pairs.append((alias, option))
        return pairs
