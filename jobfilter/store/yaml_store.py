"""Rule store backed by a flat YAML mapping on disk.

Example file::

    naukri_blacklistedKeywords: [sales, intern]
    naukri_blacklistedCompanies: [Acme]
    naukri_hideSaved: true
"""

from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

import yaml

from jobfilter.logging import get_logger

from .base import RuleStore
from .exceptions import StoreUnavailableError

logger = get_logger(__name__, component="store")


class YamlRuleStore(RuleStore):
    """Settings stored in a YAML file.

    A missing file reads as empty settings. The last snapshot read is kept so
    check_for_changes() can report which keys an outside edit touched.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__()
        self.path = Path(path)
        self._snapshot: Optional[Dict[str, Any]] = None

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise StoreUnavailableError(f"Invalid YAML in settings file {self.path}: {e}") from e
        except OSError as e:
            raise StoreUnavailableError(f"Failed to read settings file {self.path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise StoreUnavailableError(
                f"Settings file {self.path} must contain a mapping, got {type(data).__name__}"
            )
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, sort_keys=True, allow_unicode=True)
        except OSError as e:
            raise StoreUnavailableError(f"Failed to write settings file {self.path}: {e}") from e

    async def load(self, keys: Iterable[str]) -> Dict[str, Any]:
        data = self._read()
        self._snapshot = data
        return {key: data[key] for key in keys if key in data}

    async def set(self, values: Dict[str, Any]) -> None:
        data = self._read()
        changes = self._diff({key: data[key] for key in values if key in data}, values)
        data.update(values)
        self._write(data)
        self._snapshot = data
        self._notify(changes)

    def check_for_changes(self) -> Dict[str, Any]:
        """Re-read the file and notify subscribers of keys edited outside the store.

        Returns:
            Mapping of changed keys to their new values (empty when unchanged)
        """
        try:
            data = self._read()
        except StoreUnavailableError as e:
            logger.warning(
                f"Settings file unreadable, keeping previous settings: {e}",
                extra={"event": "store.check.failed", "path": str(self.path)},
            )
            return {}

        previous = self._snapshot
        self._snapshot = data
        if previous is None:
            return {}

        changes = self._diff(previous, data)
        if changes:
            logger.info(
                "Settings file changed",
                extra={
                    "event": "store.file.changed",
                    "path": str(self.path),
                    "changed_keys": sorted(changes),
                },
            )
            self._notify(changes)
        return changes
