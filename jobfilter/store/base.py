"""Abstract rule store."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List

from jobfilter.logging import get_logger

logger = get_logger(__name__, component="store")

ChangeCallback = Callable[[Dict[str, Any]], None]


class RuleStore(ABC):
    """Key/value settings store shared by every site.

    Values are JSON-compatible (lists of strings, bools). Subscribers get a
    mapping of every changed key to its new value; they decide themselves
    whether any of those keys concern them.
    """

    def __init__(self) -> None:
        self._listeners: List[ChangeCallback] = []

    @abstractmethod
    async def load(self, keys: Iterable[str]) -> Dict[str, Any]:
        """Load the given keys.

        Args:
            keys: Storage keys to read

        Returns:
            Mapping of key to stored value; missing keys are left out

        Raises:
            StoreUnavailableError: If the backing storage cannot be read
        """
        pass

    @abstractmethod
    async def set(self, values: Dict[str, Any]) -> None:
        """Write values and notify subscribers with the keys that changed.

        Raises:
            StoreUnavailableError: If the backing storage cannot be written
        """
        pass

    def on_change(self, callback: ChangeCallback) -> Callable[[], None]:
        """Subscribe to changes.

        Returns:
            Callable that unsubscribes ``callback``
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def close(self) -> None:
        """Release backend resources."""
        pass

    def _notify(self, changes: Dict[str, Any]) -> None:
        if not changes:
            return

        logger.debug(
            "Settings changed",
            extra={"event": "store.changed", "changed_keys": sorted(changes)},
        )
        for listener in list(self._listeners):
            try:
                listener(dict(changes))
            except Exception as e:
                logger.error(
                    f"Settings change listener failed: {e}",
                    extra={"event": "store.listener.failed"},
                    exc_info=True,
                )

    @staticmethod
    def _diff(old: Dict[str, Any], new: Dict[str, Any]) -> Dict[str, Any]:
        """Keys whose value differs between two snapshots (removed keys map to None)."""
        changes = {key: value for key, value in new.items() if old.get(key, object()) != value}
        for key in old:
            if key not in new:
                changes[key] = None
        return changes
