"""Dict-backed rule store, used by tests and as the CLI default."""

from typing import Any, Dict, Iterable, Optional

from .base import RuleStore


class MemoryRuleStore(RuleStore):
    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        super().__init__()
        self._data: Dict[str, Any] = dict(initial or {})

    async def load(self, keys: Iterable[str]) -> Dict[str, Any]:
        return {key: self._data[key] for key in keys if key in self._data}

    async def set(self, values: Dict[str, Any]) -> None:
        changes = self._diff(
            {key: self._data[key] for key in values if key in self._data},
            values,
        )
        self._data.update(values)
        self._notify(changes)

    def snapshot(self) -> Dict[str, Any]:
        return dict(self._data)
