"""Bindings command implementation - shows the bindings a worker has access to."""

import logging
from pathlib import Path

import click

from bindscope.cli.ensure import Ensure
from bindscope.cli.json_output import bindings_to_response, emit_json
from bindscope.cli.print_bindings import print_bindings
from bindscope.core.bindings.classifier import classify
from bindscope.core.bindings.parsing import BindingConfigError, load_binding_config
from bindscope.core.bindings.types import (
    REGISTRY_NOT_LOADED,
    RegistryNotLoaded,
    RegistrySnapshot,
    RenderContext,
)
from bindscope.core.context import BindscopeContext
from bindscope.core.dev_registry.abc import DevRegistry
from bindscope.core.dev_registry.real import FileDevRegistry

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "bindscope.toml"


def _read_registry(
    registry: DevRegistry, local: bool, use_registry: bool
) -> RegistrySnapshot | RegistryNotLoaded | None:
    """Read a fresh registry snapshot when connectivity should be shown."""
    if not use_registry:
        return None
    if not local:
        return REGISTRY_NOT_LOADED
    return registry.read_snapshot()


@click.command("bindings")
@click.argument(
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    required=False,
)
@click.option("--local", is_flag=True, help="Show bindings as seen by a local dev session")
@click.option(
    "--provisioning",
    is_flag=True,
    help="List bindings that still need to be provisioned (no status suffixes)",
)
@click.option(
    "--registry/--no-registry",
    "use_registry",
    default=True,
    help="Check connectivity of bindings to other locally running Workers",
)
@click.option(
    "--registry-path",
    type=click.Path(file_okay=False, path_type=Path),
    help="Dev registry directory (defaults to BINDSCOPE_REGISTRY_PATH)",
)
@click.option(
    "--images-local/--images-remote",
    "images_local_mode",
    default=None,
    help="Whether the Images binding runs in local mode (adds a status suffix)",
)
@click.option("--name", "worker_name", help="Worker name (defaults to `name` in the config)")
@click.option("--json", "output_json", is_flag=True, help="Output JSON format")
@click.pass_obj
def bindings_cmd(
    ctx: BindscopeContext,
    config_path: Path | None,
    local: bool,
    provisioning: bool,
    use_registry: bool,
    registry_path: Path | None,
    images_local_mode: bool | None,
    worker_name: str | None,
    output_json: bool,
) -> None:
    """Show the bindings a Worker has access to.

    CONFIG_PATH defaults to bindscope.toml in the current directory.
    """
    if config_path is None:
        config_path = ctx.cwd / DEFAULT_CONFIG_NAME
    elif not config_path.is_absolute():
        config_path = ctx.cwd / config_path

    Ensure.invariant(
        registry_path is None or use_registry,
        "--registry-path cannot be combined with --no-registry",
    )
    Ensure.path_is_file(config_path)
    try:
        worker = load_binding_config(config_path)
    except BindingConfigError as e:
        logger.debug("Exception caught: %s: %s", type(e).__name__, str(e))
        ctx.feedback.error(f"Error: Invalid config {config_path}: {e}")
        raise SystemExit(1) from None

    registry_source = ctx.dev_registry
    if registry_path is not None:
        registry_source = FileDevRegistry(registry_path)

    registry = _read_registry(registry_source, local=local, use_registry=use_registry)

    context = RenderContext(
        is_local_dev=local,
        is_provisioning=provisioning,
        is_multi_worker_display=ctx.multiworker,
        worker_name=worker_name or worker.name,
        images_local_mode=images_local_mode,
    )
    logger.debug("Rendering bindings: config=%s, context=%s", config_path, context)

    classified = classify(worker.bindings, worker.tail_consumers, context, registry)

    if output_json:
        response = bindings_to_response(classified, context.worker_name)
        emit_json(response.model_dump(mode="json"))
        return

    print_bindings(classified, context, ctx.feedback, ctx.notifier)
