"""Environment variables recognized by bindscope."""

from pathlib import Path

from bindscope.cli.ensure import Ensure
from bindscope.core.env_vars.factory import (
    get_boolean_environment_variable_factory,
    get_environment_variable_factory,
)

# `BINDSCOPE_CONFIG_DIR` overrides the global config directory (~/.bindscope).
get_global_config_dir_from_env = get_environment_variable_factory(
    "BINDSCOPE_CONFIG_DIR",
    default_value=lambda: str(Path.home() / ".bindscope"),
)


def global_config_dir() -> Path:
    """Directory holding bindscope's per-user state."""
    value = Ensure.not_none(
        get_global_config_dir_from_env(), "Could not determine the global config directory"
    )
    return Path(value).expanduser()


# `BINDSCOPE_REGISTRY_PATH` specifies the file-based dev registry folder that
# locally running workers write their definitions into.
get_registry_path = get_environment_variable_factory(
    "BINDSCOPE_REGISTRY_PATH",
    deprecated_name="BINDSCOPE_DEV_REGISTRY_PATH",
    default_value=lambda: str(global_config_dir() / "registry"),
)

# `BINDSCOPE_MULTIWORKER` labels output with the worker name, for sessions
# that run several workers at once.
get_multiworker_from_env = get_boolean_environment_variable_factory(
    "BINDSCOPE_MULTIWORKER",
    default_value=False,
)

# `BINDSCOPE_DEBUG` turns on debug logging when set to any non-empty value.
get_debug_from_env = get_environment_variable_factory("BINDSCOPE_DEBUG")
