import logging

import click

from bindscope.cli.commands.bindings import bindings_cmd
from bindscope.core.context import create_context
from bindscope.core.env_vars.variables import get_debug_from_env

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="bindscope")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Inspect the bindings declared for a Worker."""
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context()


cli.add_command(bindings_cmd)


def main() -> None:
    """CLI entry point used by the `bindscope` console script."""
    # Enable debug logging if BINDSCOPE_DEBUG environment variable is set
    if get_debug_from_env():
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")
    cli()
