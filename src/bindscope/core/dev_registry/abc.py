"""Dev registry abstraction.

The dev registry is where locally running workers advertise what they
expose (Durable Object classes, entrypoint addresses). Other processes
populate it; bindscope only reads snapshots of it.
"""

from abc import ABC, abstractmethod

from bindscope.core.bindings.types import RegistrySnapshot


class DevRegistry(ABC):
    """Read-only view of locally running workers."""

    @abstractmethod
    def read_snapshot(self) -> RegistrySnapshot:
        """Read the current set of running workers.

        Called before every render; implementations must not cache since
        workers come and go during a dev session.

        Returns:
            Mapping from worker name to its registry entry
        """
        ...
