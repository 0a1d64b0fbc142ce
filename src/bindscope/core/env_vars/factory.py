"""Factory for getters that read configuration from environment variables.

Resolution order for a variable:
1. The canonical variable, if set
2. The deprecated alias, if set (a deprecation warning is shown once)
3. The computed default, if a supplier was given
4. None
"""

import logging
import os
from collections.abc import Callable, Mapping

import click

from bindscope.cli.output import user_output
from bindscope.core.once import OnceNotifier, once

logger = logging.getLogger(__name__)


def _warn(message: str) -> None:
    user_output(click.style("Warning: ", fg="yellow") + message)


def get_environment_variable_factory(
    variable_name: str,
    deprecated_name: str | None = None,
    default_value: Callable[[], str] | None = None,
    environ: Mapping[str, str] | None = None,
    notifier: OnceNotifier | None = None,
) -> Callable[[], str | None]:
    """Create a getter for a configuration environment variable.

    The environment is read each time the getter is called, never at
    creation time.

    Args:
        variable_name: Canonical variable name
        deprecated_name: Older name still honored with a warning
        default_value: Supplier of the value used when neither name is set
        environ: Environment to read (defaults to os.environ)
        notifier: Once-notifier for the deprecation warning (defaults to the
            process-wide one)

    Returns:
        Zero-argument function returning the resolved value or None

    Example:
        >>> get_registry_path = get_environment_variable_factory(
        ...     "BINDSCOPE_REGISTRY_PATH",
        ...     deprecated_name="BINDSCOPE_DEV_REGISTRY_PATH",
        ...     default_value=lambda: "/home/me/.bindscope/registry",
        ... )
        >>> get_registry_path()
        '/home/me/.bindscope/registry'
    """

    def get_value() -> str | None:
        env = environ if environ is not None else os.environ

        value = env.get(variable_name)
        if value:
            return value

        if deprecated_name is not None:
            deprecated_value = env.get(deprecated_name)
            if deprecated_value:
                (notifier or once).emit(
                    f"Using \"{deprecated_name}\" environment variable. This is deprecated. "
                    f"Please use \"{variable_name}\", instead.",
                    _warn,
                )
                return deprecated_value

        if default_value is not None:
            value = default_value()
            logger.debug("%s not set, using default %r", variable_name, value)
            return value

        return None

    return get_value


def get_boolean_environment_variable_factory(
    variable_name: str,
    default_value: bool,
    environ: Mapping[str, str] | None = None,
) -> Callable[[], bool]:
    """Create a getter for a true/false environment variable.

    Args:
        variable_name: Canonical variable name
        default_value: Value used when the variable is unset
        environ: Environment to read (defaults to os.environ)

    Returns:
        Zero-argument function returning the boolean value

    Raises:
        ValueError: (from the getter) if the variable is set to something
            other than "true" or "false"
    """
    get_raw = get_environment_variable_factory(variable_name, environ=environ)

    def get_value() -> bool:
        raw = get_raw()
        if raw is None:
            return default_value
        if raw.lower() == "true":
            return True
        if raw.lower() == "false":
            return False
        raise ValueError(
            f"Expected {variable_name} to be \"true\" or \"false\", but got {raw!r}"
        )

    return get_value
