"""Connectivity resolution against a snapshot of locally running workers.

Pure decision table: the verdict depends only on the arguments.
"""

from bindscope.core.bindings.types import (
    ConnectivityVerdict,
    RegistryNotLoaded,
    RegistrySnapshot,
)


def resolve_connectivity(
    service_name: str,
    registry: RegistrySnapshot | RegistryNotLoaded | None,
    required_class_name: str | None = None,
    required_entrypoint: str | None = None,
) -> ConnectivityVerdict:
    """Decide whether a peer worker exposes what a binding requires.

    Args:
        service_name: Name of the referenced worker
        registry: Registry snapshot, REGISTRY_NOT_LOADED, or None (disabled)
        required_class_name: Durable Object class the binding needs, if any
        required_entrypoint: Named entrypoint the binding needs, if any

    Returns:
        UNKNOWN when there is no registry, NOT_CONNECTED when the worker or
        the required capability is missing, CONNECTED otherwise
    """
    if registry is None or isinstance(registry, RegistryNotLoaded):
        return ConnectivityVerdict.UNKNOWN

    entry = registry.get(service_name)
    if entry is None:
        return ConnectivityVerdict.NOT_CONNECTED

    if required_class_name is not None:
        if any(d.class_name == required_class_name for d in entry.durable_objects):
            return ConnectivityVerdict.CONNECTED
        return ConnectivityVerdict.NOT_CONNECTED

    if required_entrypoint is not None:
        if required_entrypoint in entry.entrypoint_addresses:
            return ConnectivityVerdict.CONNECTED
        return ConnectivityVerdict.NOT_CONNECTED

    return ConnectivityVerdict.CONNECTED
