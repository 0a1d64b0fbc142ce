"""Value normalization, truncation and local-dev suffixes for binding values.

Suffixes are a local-dev affordance: outside local dev, and while
provisioning, values are shown unchanged.
"""

import json
from datetime import date, time
from typing import Any

from bindscope.core.bindings.types import ConnectivityVerdict, PendingProvision, RenderContext

MAX_VALUE_LENGTH = 40
ELLIPSIS = "..."

CONNECTED_MARKER = "[connected]"
NOT_CONNECTED_MARKER = "[not connected]"
SIMULATED_LOCALLY_SUFFIX = " [simulated locally]"
REMOTE_RESOURCE_SUFFIX = " [connected to remote resource]"


def _json_default(value: Any) -> str:
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


def to_json(value: Any, *, indent: int | None = None) -> str:
    """Encode a config value as JSON text for display.

    Output is compact unless an indent is given. Dates and times, which TOML
    produces natively, are written as ISO 8601 strings.
    """
    separators = None if indent is not None else (",", ":")
    return json.dumps(value, indent=indent, separators=separators, default=_json_default)


def normalize_value(value: str | PendingProvision | None) -> str:
    """Map missing and pending values to an empty string."""
    if not value or isinstance(value, PendingProvision):
        return ""
    return value


def truncate(item: str | dict[str, Any] | list[Any]) -> str:
    """Shorten a value to the display budget.

    Non-string items are JSON encoded first. Values shorter than the budget
    are returned unchanged; longer ones are cut and end in an ellipsis so the
    result is exactly MAX_VALUE_LENGTH characters.
    """
    text = item if isinstance(item, str) else to_json(item)
    if len(text) < MAX_VALUE_LENGTH:
        return text
    return text[: MAX_VALUE_LENGTH - len(ELLIPSIS)] + ELLIPSIS


def connectivity_marker(verdict: ConnectivityVerdict) -> str | None:
    """Marker text for a verdict, or None when nothing should be shown."""
    if verdict is ConnectivityVerdict.CONNECTED:
        return CONNECTED_MARKER
    if verdict is ConnectivityVerdict.NOT_CONNECTED:
        return NOT_CONNECTED_MARKER
    return None


def decorate(
    value: str | PendingProvision | None,
    *,
    context: RenderContext,
    verdict: ConnectivityVerdict | None = None,
    simulated_locally: bool = False,
) -> str:
    """Append the status suffix for a binding value.

    A connectivity verdict takes precedence over the resource-identity
    suffix; the two never appear together.

    Args:
        value: Raw display value (None and pending ids become "")
        context: Render flags
        verdict: Connectivity verdict for peer-worker bindings
        simulated_locally: Whether local dev emulates the resource in-process

    Returns:
        Decorated display value
    """
    normalized = normalize_value(value)

    if verdict is not None:
        marker = connectivity_marker(verdict)
        if marker is None:
            return normalized
        return f"{normalized} {marker}"

    if context.is_provisioning or not context.is_local_dev:
        return normalized

    if simulated_locally:
        return normalized + SIMULATED_LOCALLY_SUFFIX
    return normalized + REMOTE_RESOURCE_SUFFIX
