"""Rule store backed by a SQL database through SQLAlchemy.

Settings live in a single ``settings`` table; each value is stored as JSON
text so lists and booleans round-trip unchanged.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import Column, String, Text, create_engine, event, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from jobfilter.logging import get_logger

from .base import RuleStore
from .exceptions import StoreUnavailableError

logger = get_logger(__name__, component="store")

Base = declarative_base()


class SettingRow(Base):
    __tablename__ = "settings"

    key = Column(String(255), primary_key=True, nullable=False)
    value_json = Column(Text, nullable=False)


class SqlRuleStore(RuleStore):
    """Settings stored in a database table.

    Args:
        database_url: SQLAlchemy URL (e.g. "sqlite:///./data/settings.db")

    Raises:
        StoreUnavailableError: If the database cannot be opened or initialized
    """

    def __init__(self, database_url: str) -> None:
        super().__init__()
        if not isinstance(database_url, str) or not database_url.strip():
            raise StoreUnavailableError("Database URL must be a non-empty string")

        self.database_url = database_url
        try:
            self._engine = _open_engine(database_url)
            _ping(self._engine)
            Base.metadata.create_all(self._engine, checkfirst=True)
        except Exception as e:
            raise StoreUnavailableError(f"Cannot open settings database {database_url}: {e}") from e

        self._sessions = sessionmaker(bind=self._engine, expire_on_commit=False)

        logger.info(
            "Settings database ready",
            extra={"event": "store.database.ready", "database_url": database_url},
        )

    async def load(self, keys: Iterable[str]) -> Dict[str, Any]:
        wanted = list(keys)
        if not wanted:
            return {}

        loop = asyncio.get_running_loop()
        try:
            stored = await loop.run_in_executor(None, self._read_rows, wanted)
        except Exception as e:
            raise StoreUnavailableError(f"Failed to load settings: {e}") from e

        try:
            return {key: json.loads(raw) for key, raw in stored.items()}
        except ValueError as e:
            raise StoreUnavailableError(f"Stored setting is not valid JSON: {e}") from e

    async def set(self, values: Dict[str, Any]) -> None:
        loop = asyncio.get_running_loop()
        try:
            changes = await loop.run_in_executor(None, self._write_rows, dict(values))
        except Exception as e:
            raise StoreUnavailableError(f"Failed to save settings: {e}") from e

        self._notify(changes)

    # Blocking database work, run on the default executor

    def _read_rows(self, wanted: List[str]) -> Dict[str, str]:
        with self._sessions() as session:
            rows = session.scalars(select(SettingRow).where(SettingRow.key.in_(wanted))).all()
            return {row.key: row.value_json for row in rows}

    def _write_rows(self, values: Dict[str, Any]) -> Dict[str, Any]:
        changes: Dict[str, Any] = {}
        # begin() commits on exit and rolls back if the block raises
        with self._sessions.begin() as session:
            for key, value in values.items():
                encoded = json.dumps(value)
                row = session.get(SettingRow, key)
                if row is None:
                    session.add(SettingRow(key=key, value_json=encoded))
                elif row.value_json != encoded:
                    row.value_json = encoded
                else:
                    continue
                changes[key] = value
        return changes

    def close(self) -> None:
        self._engine.dispose()


def _sqlite_file(database_url: str) -> Optional[Path]:
    if not database_url.startswith("sqlite:///"):
        return None
    location = database_url[len("sqlite:///"):]
    if not location or location == ":memory:":
        return None
    return Path(location)


def _open_engine(database_url: str) -> Engine:
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)

    db_file = _sqlite_file(database_url)
    options: Dict[str, Any] = {}
    if db_file is not None:
        db_file.parent.mkdir(parents=True, exist_ok=True)
    else:
        # executor threads share the one in-memory connection
        options["poolclass"] = StaticPool

    engine = create_engine(
        database_url,
        connect_args={"check_same_thread": False, "timeout": 30},
        **options,
    )

    @event.listens_for(engine, "connect")
    def _use_wal(dbapi_conn, _record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def _ping(engine: Engine) -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
