"""Factory function for rule store backends."""

from typing import Optional

from .base import RuleStore
from .exceptions import StoreError
from .memory import MemoryRuleStore
from .sql_store import SqlRuleStore
from .yaml_store import YamlRuleStore


def create_store(
    backend: str,
    path: Optional[str] = None,
    database_url: Optional[str] = None,
) -> RuleStore:
    """Create the rule store for a backend name.

    Args:
        backend: "yaml", "sqlite" or "memory"
        path: Settings file (yaml backend)
        database_url: SQLAlchemy URL (sqlite backend)

    Raises:
        StoreError: If the backend is unknown or its location is missing
    """
    if backend == "memory":
        return MemoryRuleStore()
    if backend == "yaml":
        if not path:
            raise StoreError("The yaml settings backend requires a path")
        return YamlRuleStore(path)
    if backend == "sqlite":
        if not database_url:
            raise StoreError("The sqlite settings backend requires a database_url")
        return SqlRuleStore(database_url)
    raise StoreError(f"Unknown settings backend: {backend}. Supported: memory, sqlite, yaml")
