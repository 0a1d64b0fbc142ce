"""Fake dev registry for testing.

FakeDevRegistry returns a fixed snapshot and counts reads.
"""

from bindscope.core.bindings.types import RegistryEntry, RegistrySnapshot
from bindscope.core.dev_registry.abc import DevRegistry


class FakeDevRegistry(DevRegistry):
    """In-memory registry holding a snapshot supplied at construction.

    This class has NO public setup methods. All state is provided via constructor.
    """

    def __init__(self, workers: dict[str, RegistryEntry] | None = None) -> None:
        self._workers = workers if workers is not None else {}
        self._read_count = 0

    @property
    def read_count(self) -> int:
        """Number of read_snapshot() calls, for test assertions."""
        return self._read_count

    def read_snapshot(self) -> RegistrySnapshot:
        self._read_count += 1
        return dict(self._workers)
