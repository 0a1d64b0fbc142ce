"""Print a worker's classified bindings for humans.

The classifier decides what each entry says; this module decides how the
inventory is laid out, colored and titled, and which one-time notices go
with it.
"""

import click

from bindscope.core.bindings.suffix import connectivity_marker
from bindscope.core.bindings.types import (
    ClassifiedBindings,
    ConnectivityVerdict,
    DisplayEntry,
    RenderContext,
)
from bindscope.core.once import OnceNotifier
from bindscope.core.user_feedback import UserFeedback

LOCAL_SIMULATION_NOTICE = (
    "Your Worker and resources are simulated locally. Bindings marked "
    "[connected to remote resource] talk to real resources.\n"
)

CONNECTION_STATUS_FOOTNOTE = (
    "\nService bindings, Durable Object bindings, and Tail consumers connect to other "
    "dev sessions running locally, with their connection status indicated by "
    f"{click.style('[connected]', fg='green')} or {click.style('[not connected]', fg='red')}. "
    "Start the referenced Worker locally to connect it.\n"
)


def _style_marker(value: str, verdict: ConnectivityVerdict | None) -> str:
    """Color the connectivity marker inside a display value."""
    if verdict is None:
        return value
    marker = connectivity_marker(verdict)
    if marker is None:
        return value
    index = value.rfind(marker)
    if index == -1:
        return value
    color = "green" if verdict is ConnectivityVerdict.CONNECTED else "red"
    return value[:index] + click.style(marker, fg=color) + value[index + len(marker) :]


def format_entry(entry: DisplayEntry) -> str:
    """Format one entry line; value-less entries have no colon."""
    value = _style_marker(entry.value, entry.verdict)
    separator = ":" if entry.value else ""
    return f"  - {entry.key}{separator} {value}"


def _named_worker(context: RenderContext) -> str | None:
    if context.worker_name and context.is_multi_worker_display:
        return click.style(context.worker_name, fg="blue")
    return None


def bindings_title(context: RenderContext) -> str:
    """Title line above the binding groups."""
    if context.is_provisioning:
        return "The following bindings need to be provisioned:"
    worker = _named_worker(context)
    if worker is not None:
        return f"{worker} has access to the following bindings:"
    return "Your Worker has access to the following bindings:"


def tail_consumers_title(context: RenderContext) -> str:
    worker = _named_worker(context)
    if worker is not None:
        return f"{worker} is sending Tail events to the following Workers:"
    return "Your Worker is sending Tail events to the following Workers:"


def format_bindings(classified: ClassifiedBindings, context: RenderContext) -> str | None:
    """Lay out binding groups as a single message, or None if there are none."""
    if not classified.groups:
        return None

    lines = [bindings_title(context)]
    for group in classified.groups:
        lines.append(f"- {group.name}:")
        lines.extend(format_entry(entry) for entry in group.entries)
    return "\n".join(lines)


def format_tail_consumers(classified: ClassifiedBindings, context: RenderContext) -> str | None:
    if not classified.tail_consumers:
        return None

    lines = [tail_consumers_title(context)]
    lines.extend(
        f"- {_style_marker(entry.value, entry.verdict)}" for entry in classified.tail_consumers
    )
    return "\n".join(lines)


def print_bindings(
    classified: ClassifiedBindings,
    context: RenderContext,
    feedback: UserFeedback,
    notifier: OnceNotifier,
) -> None:
    """Print the binding inventory, tail consumers and one-time notices.

    Args:
        classified: Output of classify()
        context: The same render flags passed to classify()
        feedback: Destination for user-facing text
        notifier: Once-notifier for notices shown once per process
    """
    message = format_bindings(classified, context)
    if message is None:
        worker = _named_worker(context)
        if worker is not None:
            feedback.info(f"No bindings found for {worker}")
        else:
            feedback.info("No bindings found.")
    else:
        if context.is_local_dev:
            notifier.emit(LOCAL_SIMULATION_NOTICE, feedback.info)
        feedback.info(message)

    tail_message = format_tail_consumers(classified, context)
    if tail_message is not None:
        feedback.info(tail_message)

    if classified.has_connection_status:
        notifier.emit(CONNECTION_STATUS_FOOTNOTE, feedback.info)
