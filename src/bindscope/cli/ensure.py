"""CLI error handling utilities with styled output.

This module provides the Ensure class for asserting invariants in CLI commands
with consistent, user-friendly error messages. All errors use red "Error:" prefix
for visual consistency.
"""

from pathlib import Path
from typing import TypeVar

import click

from bindscope.cli.output import user_output

T = TypeVar("T")


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Args:
            condition: Boolean condition to check
            error_message: Error message to display if condition is false.
                          "Error: " prefix will be added automatically in red.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            user_output(click.style("Error: ", fg="red") + error_message)
            raise SystemExit(1)

    @staticmethod
    def path_is_file(path: Path, error_message: str | None = None) -> None:
        """Ensure path exists and is a regular file.

        Args:
            path: Path to check
            error_message: Optional custom error message. If not provided,
                          uses default "Config file not found: {path}".

        Raises:
            SystemExit: If path is not a file (with exit code 1)
        """
        if not path.is_file():
            if error_message is None:
                error_message = f"Config file not found: {path}"
            user_output(click.style("Error: ", fg="red") + error_message)
            raise SystemExit(1)

    @staticmethod
    def not_none(value: T | None, error_message: str) -> T:
        """Ensure value is not None, otherwise output styled error and exit.

        This method provides type narrowing: it takes `T | None` and returns `T`.

        Args:
            value: Value to check for None
            error_message: Error message to display if value is None.
                          "Error: " prefix will be added automatically in red.

        Returns:
            The value unchanged if not None (with narrowed type T)

        Raises:
            SystemExit: If value is None (with exit code 1)
        """
        if value is None:
            user_output(click.style("Error: ", fg="red") + error_message)
            raise SystemExit(1)
        return value
