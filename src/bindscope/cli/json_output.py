"""JSON output for the binding inventory."""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict

from bindscope.cli.output import machine_output
from bindscope.core.bindings.types import ClassifiedBindings, DisplayEntry


class EntryResponse(BaseModel):
    """One displayed binding.

    Attributes:
        key: Binding name (or fixed key such as "Name" for singletons)
        value: Display value, including any status suffix
        connection: "connected" or "not_connected" when a verdict was shown
    """

    model_config = ConfigDict(strict=True)

    key: str
    value: str
    connection: str | None = None


class GroupResponse(BaseModel):
    model_config = ConfigDict(strict=True)

    name: str
    entries: list[EntryResponse]


class BindingsInventoryResponse(BaseModel):
    """Pydantic model for `bindscope bindings --json` output."""

    model_config = ConfigDict(strict=True)

    worker: str | None
    groups: list[GroupResponse]
    tail_consumers: list[EntryResponse]
    has_connection_status: bool


def _entry_response(entry: DisplayEntry) -> EntryResponse:
    return EntryResponse(
        key=entry.key,
        value=entry.value,
        connection=entry.verdict.value if entry.verdict is not None else None,
    )


def bindings_to_response(
    classified: ClassifiedBindings, worker_name: str | None
) -> BindingsInventoryResponse:
    """Convert classifier output to its JSON response model."""
    return BindingsInventoryResponse(
        worker=worker_name,
        groups=[
            GroupResponse(
                name=group.name,
                entries=[_entry_response(entry) for entry in group.entries],
            )
            for group in classified.groups
        ],
        tail_consumers=[_entry_response(entry) for entry in classified.tail_consumers],
        has_connection_status=classified.has_connection_status,
    )


def emit_json(data: dict[str, Any]) -> None:
    """Output JSON data to stdout for machine consumption.

    For Pydantic models, call model.model_dump(mode='json') before
    passing to this function.
    """
    machine_output(json.dumps(data, indent=2))
