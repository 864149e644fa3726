"""Client-side accumulation of bulk index actions."""

from typing import Any, Dict, Iterator, List


class BulkBatch:
    """Pending bulk actions bound to the client that created them.

    Appends are plain list mutations with no locking, so a batch must not be
    shared between threads without external coordination.
    """

    def __init__(self, owner: Any):
        self.owner = owner
        self._actions: List[Dict[str, Any]] = []

    def add(self, action: Dict[str, Any]) -> None:
        self._actions.append(action)

    @property
    def actions(self) -> List[Dict[str, Any]]:
        """Snapshot of the pending actions in insertion order."""
        return list(self._actions)

    def clear(self) -> None:
        self._actions.clear()

    def __len__(self) -> int:
        return len(self._actions)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(list(self._actions))

    def __repr__(self) -> str:
        return f"BulkBatch(pending={len(self._actions)})"
