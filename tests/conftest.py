"""Test configuration and fixtures."""

from collections.abc import Callable
from io import StringIO
from typing import Any

import pytest
from rich.console import Console

from gh_pm.config.models import FieldMapping
from gh_pm.project.models import (
    BoardItem,
    FieldDataType,
    FieldOption,
    FieldSchema,
    NumberValue,
    SingleSelectValue,
)
from gh_pm.resolution.aliases import FieldAliasMap
from gh_pm.resolution.resolver import ResolutionContext
from gh_pm.resolution.schema_cache import SchemaCache

ItemNodeFactory = Callable[..., dict[str, Any]]


@pytest.fixture
def schema_fields() -> list[FieldSchema]:
    """Board schema with single-select, number, text and iteration fields."""
    return [
        FieldSchema(
            id="F_status",
            name="Status",
            data_type=FieldDataType.SINGLE_SELECT,
            options=(
                FieldOption(id="OPT_backlog", name="Backlog"),
                FieldOption(id="OPT_progress", name="In Progress"),
                FieldOption(id="OPT_done", name="Done"),
            ),
        ),
        FieldSchema(
            id="F_priority",
            name="Priority",
            data_type=FieldDataType.SINGLE_SELECT,
            options=(
                FieldOption(id="OPT_p0", name="P0"),
                FieldOption(id="OPT_p1", name="P1"),
                FieldOption(id="OPT_p2", name="P2"),
            ),
        ),
        FieldSchema(id="F_estimate", name="Estimate", data_type=FieldDataType.NUMBER),
        FieldSchema(id="F_notes", name="Notes", data_type=FieldDataType.TEXT),
        FieldSchema(id="F_sprint", name="Sprint", data_type=FieldDataType.OTHER),
    ]


@pytest.fixture
def field_mappings() -> dict[str, FieldMapping]:
    """Alias configuration; 'todo' and 'backlog' both map onto Backlog."""
    return {
        "status": FieldMapping(
            field="Status",
            values={
                "todo": "Backlog",
                "backlog": "Backlog",
                "in_progress": "In Progress",
                "done": "Done",
            },
        ),
        "priority": FieldMapping(
            field="Priority",
            values={"p0": "P0", "p1": "P1", "p2": "P2"},
        ),
    }


@pytest.fixture
def aliases(field_mappings: dict[str, FieldMapping]) -> FieldAliasMap:
    return FieldAliasMap.from_config(field_mappings)


@pytest.fixture
def context(
    schema_fields: list[FieldSchema], aliases: FieldAliasMap
) -> ResolutionContext:
    """Resolution context over the fabricated schema."""
    return ResolutionContext(schema=SchemaCache(fields=schema_fields), aliases=aliases)


@pytest.fixture
def item_node() -> ItemNodeFactory:
    """Factory for raw board item nodes as returned by the items query."""

    def build(
        number: int,
        state: str = "OPEN",
        labels: tuple[str, ...] = (),
        status: str | None = None,
        estimate: float | None = None,
        notes: str | None = None,
    ) -> dict[str, Any]:
        values: list[dict[str, Any]] = []
        if status is not None:
            values.append(
                {
                    "field": {"name": "Status"},
                    "optionId": f"OPT_{status.lower()}",
                    "name": status,
                }
            )
        if estimate is not None:
            values.append({"field": {"name": "Estimate"}, "number": estimate})
        if notes is not None:
            values.append({"field": {"name": "Notes"}, "text": notes})

        return {
            "id": f"PVTI_{number}",
            "databaseId": 1000 + number,
            "fieldValues": {"nodes": values},
            "content": {
                "id": f"I_{number}",
                "number": number,
                "title": f"Issue {number}",
                "state": state,
                "url": f"https://github.com/octo/repo/issues/{number}",
                "labels": {"nodes": [{"name": label} for label in labels]},
            },
        }

    return build


@pytest.fixture
def board_items() -> list[BoardItem]:
    """Three open items already on the board."""
    return [
        BoardItem(
            item_id=f"PVTI_{number}",
            database_id=1000 + number,
            issue_id=f"I_{number}",
            number=number,
            title=f"Issue {number}",
            field_values={
                "Status": SingleSelectValue(option_id="OPT_backlog", option_name="Backlog"),
                "Estimate": NumberValue(number=float(number)),
            },
        )
        for number in (1, 2, 3)
    ]


@pytest.fixture
def console() -> Console:
    """Console writing plain text into a buffer; read it with ``console.file``."""
    return Console(file=StringIO(), width=200, color_system=None)


@pytest.fixture
def scripted_reader() -> Callable[..., Callable[[str], str]]:
    """Factory for line readers that replay canned answers.

    Running out of answers behaves like end of input. Prompts are recorded on
    the reader's ``prompts`` attribute.
    """

    def build(*answers: str) -> Callable[[str], str]:
        queue = list(answers)
        prompts: list[str] = []

        def reader(prompt: str) -> str:
            prompts.append(prompt)
            if not queue:
                raise EOFError
            return queue.pop(0)

        reader.prompts = prompts  # type: ignore[attr-defined]
        return reader

    return build
