"""Triage requests built from named configurations or command-line flags."""

from dataclasses import dataclass, field

from ..config.models import PMConfig, TriageConfig


@dataclass
class TriageRequest:
    """What to match and what to change in one triage run."""

    query: str
    apply_labels: list[str] = field(default_factory=list)
    apply_fields: dict[str, str] = field(default_factory=dict)
    interactive_fields: list[str] = field(default_factory=list)
    list_only: bool = False
    instruction: str = ""

    @property
    def has_changes(self) -> bool:
        return bool(self.apply_labels or self.apply_fields or self.interactive_fields)

    @classmethod
    def from_config(
        cls, triage: TriageConfig, list_only: bool = False
    ) -> "TriageRequest":
        return cls(
            query=triage.query,
            apply_labels=list(triage.apply.labels),
            apply_fields=dict(triage.apply.fields),
            interactive_fields=triage.interactive.field_keys(),
            list_only=list_only,
            instruction=triage.instruction,
        )


def _split_entries(entries: list[str]) -> list[str]:
    """Flatten repeated and comma separated flag values."""
    values = []
    for entry in entries:
        values.extend(part.strip() for part in entry.split(",") if part.strip())
    return values


def parse_apply_flags(entries: list[str]) -> tuple[list[str], dict[str, str]]:
    """Split ``--apply`` entries into labels and field updates.

    Example:
        >>> parse_apply_flags(["label:bug", "status:backlog"])
        (['bug'], {'status': 'backlog'})

    Raises:
        ValueError: If an entry is not of the form ``field:value``
    """
    labels: list[str] = []
    fields: dict[str, str] = {}
    for entry in _split_entries(entries):
        if ":" not in entry:
            raise ValueError(f"invalid apply format: {entry} (expected 'field:value')")
        key, value = (part.strip() for part in entry.split(":", 1))
        if key == "label":
            labels.append(value)
        else:
            fields[key] = value
    return labels, fields


def parse_interactive_flags(entries: list[str]) -> list[str]:
    """Normalise ``--interactive`` entries into lowercase field keys."""
    keys: list[str] = []
    for entry in _split_entries(entries):
        key = entry.lower()
        if key not in keys:
            keys.append(key)
    return keys


def build_request(
    config: PMConfig,
    name: str | None = None,
    query: str | None = None,
    apply: list[str] | None = None,
    interactive: list[str] | None = None,
    list_only: bool = False,
) -> TriageRequest:
    """Build a request from ad-hoc flags, or from a named configuration.

    Raises:
        ValueError: If the flags are inconsistent or the name is unknown
    """
    if query:
        apply = apply or []
        interactive = interactive or []
        if not apply and not interactive and not list_only:
            raise ValueError(
                "--query requires either --apply or --interactive flag "
                "(or use --list to preview)"
            )
        labels, fields = parse_apply_flags(apply)
        return TriageRequest(
            query=query,
            apply_labels=labels,
            apply_fields=fields,
            interactive_fields=parse_interactive_flags(interactive),
            list_only=list_only,
        )

    if name:
        triage = config.triage.get(name)
        if triage is None:
            raise ValueError(f"triage configuration '{name}' not found in .gh-pm.yml")
        return TriageRequest.from_config(triage, list_only=list_only)

    raise ValueError(
        "either provide a triage name or use --query with --apply/--interactive"
    )
