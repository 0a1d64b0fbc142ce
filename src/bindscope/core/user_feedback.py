"""User-facing diagnostic output."""

from abc import ABC, abstractmethod

import click

from bindscope.cli.output import user_output


class UserFeedback(ABC):
    """Provides user-facing diagnostic output.

    Functions call ctx.feedback methods instead of writing to stderr
    directly, so tests can capture messages with a fake.

    Usage:
        ctx.feedback.info("Your Worker has access to the following bindings:")

        # Errors always appear
        if not valid:
            ctx.feedback.error("Error: Invalid configuration")
            raise SystemExit(1)
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Show informational message."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Show error message."""


class InteractiveFeedback(UserFeedback):
    """Feedback written to stderr for interactive use."""

    def info(self, message: str) -> None:
        user_output(message)

    def error(self, message: str) -> None:
        user_output(click.style(message, fg="red"))
