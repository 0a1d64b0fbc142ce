"""File-based dev registry.

Each locally running worker writes a JSON definition file into the registry
directory, named after the worker:

    <registry>/auth-worker
    {
      "host": "127.0.0.1",
      "port": 8787,
      "durableObjects": [{"name": "COUNTER", "className": "Counter"}],
      "entrypointAddresses": {"AuthEntrypoint": {"host": "127.0.0.1", "port": 8788}}
    }
"""

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bindscope.core.bindings.types import (
    RegistryAddress,
    RegistryDurableObject,
    RegistryEntry,
    RegistrySnapshot,
)
from bindscope.core.dev_registry.abc import DevRegistry

logger = logging.getLogger(__name__)


class _DurableObjectDefinition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    class_name: str = Field(alias="className")
    name: str | None = None


class _AddressDefinition(BaseModel):
    host: str
    port: int


class WorkerDefinition(BaseModel):
    """Pydantic model for a registry definition file.

    Only the fields needed for connectivity checks are modeled; anything
    else in the file is ignored.
    """

    model_config = ConfigDict(populate_by_name=True)

    durable_objects: list[_DurableObjectDefinition] = Field(
        default_factory=list, alias="durableObjects"
    )
    entrypoint_addresses: dict[str, _AddressDefinition] = Field(
        default_factory=dict, alias="entrypointAddresses"
    )

    def to_entry(self) -> RegistryEntry:
        return RegistryEntry(
            durable_objects=tuple(
                RegistryDurableObject(class_name=d.class_name, name=d.name)
                for d in self.durable_objects
            ),
            entrypoint_addresses={
                name: RegistryAddress(host=address.host, port=address.port)
                for name, address in self.entrypoint_addresses.items()
            },
        )


class FileDevRegistry(DevRegistry):
    """Production implementation reading definition files from a directory."""

    def __init__(self, registry_path: Path) -> None:
        self._registry_path = registry_path

    @property
    def registry_path(self) -> Path:
        return self._registry_path

    def read_snapshot(self) -> RegistrySnapshot:
        """Read every worker definition currently in the registry directory.

        A missing directory means no workers are running. Files that can't
        be read or parsed are skipped; another process may be mid-write.

        Returns:
            Mapping from worker name to its registry entry
        """
        if not self._registry_path.is_dir():
            logger.debug("Registry directory %s does not exist", self._registry_path)
            return {}

        snapshot: dict[str, RegistryEntry] = {}
        for definition_path in sorted(self._registry_path.iterdir()):
            if not definition_path.is_file() or definition_path.name.startswith("."):
                continue
            try:
                content = definition_path.read_bytes()
            except OSError as e:
                logger.debug("Skipping unreadable registry file %s: %s", definition_path, e)
                continue
            try:
                definition = WorkerDefinition.model_validate_json(content)
            except ValidationError as e:
                logger.debug("Skipping invalid registry file %s: %s", definition_path, e)
                continue
            snapshot[definition_path.name] = definition.to_entry()

        logger.debug("Read %d worker(s) from registry %s", len(snapshot), self._registry_path)
        return snapshot
