"""Output utilities for CLI commands with clear intent.

Human-readable messages go to stderr so stdout stays clean for machine
output such as JSON.
"""

import click


def user_output(message: str = "") -> None:
    """Output an informational message for the user (stderr)."""
    click.echo(message, err=True)


def machine_output(message: str = "") -> None:
    """Output structured data for scripts and pipelines (stdout)."""
    click.echo(message)
