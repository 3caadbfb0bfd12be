"""
Key/value storage backends for the progress record.

Every backend offers the same three calls (get_item / set_item / remove_item)
over string values addressed by a string key. Native I/O and database errors
are wrapped in PersistenceError so callers only handle one exception type.

Backends:
- MemoryStorage: process-local dict, nothing survives exit
- FileStorage: one JSON file per key under a directory (~/.biaslab by default)
- SqlStorage: SQLAlchemy table, SQLite by default
"""

from __future__ import annotations

import os
import re
import tempfile
from collections.abc import Generator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol, runtime_checkable

from loguru import logger
from sqlalchemy import DateTime, String, Text, create_engine, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from biaslab.config import Settings
from biaslab.core.errors import PersistenceError


@runtime_checkable
class StorageBackend(Protocol):
    """Minimal key/value interface the progress store persists through."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


# =============================================================================
# Memory
# =============================================================================


class MemoryStorage:
    """Dict-backed storage for tests and throwaway runs."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


# =============================================================================
# File
# =============================================================================


_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class FileStorage:
    """
    JSON-file storage.

    Each key maps to `<directory>/<sanitized key>.json`. Writes go to a
    temporary file in the same directory and are moved into place, so a
    reader never observes a half-written record.
    """

    def __init__(self, directory: Path | str):
        self.directory = Path(directory).expanduser()

    def path_for(self, key: str) -> Path:
        """File path holding the value for `key`."""
        return self.directory / f"{_UNSAFE_CHARS.sub('_', key)}.json"

    def get_item(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Could not read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp_name = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.directory, suffix=".tmp", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(value)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"Could not write {path}: {e}") from e

    def remove_item(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Could not remove {path}: {e}") from e


# =============================================================================
# SQL
# =============================================================================


class Base(DeclarativeBase):
    pass


class StoredRecord(Base):
    """One persisted value addressed by its key."""

    __tablename__ = "stored_records"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class SqlStorage:
    """SQLAlchemy-backed storage; any SQLAlchemy URL works, SQLite is the default."""

    def __init__(self, url: str):
        self.url = url
        try:
            self.engine = create_engine(url, pool_pre_ping=True)
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not open database {url}: {e}") from e
        self._session_factory = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Provide a transactional scope around a series of operations."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Database operation failed: {e}") from e
        finally:
            session.close()

    def get_item(self, key: str) -> str | None:
        with self.session_scope() as session:
            record = session.get(StoredRecord, key)
            return record.value if record is not None else None

    def set_item(self, key: str, value: str) -> None:
        with self.session_scope() as session:
            session.merge(StoredRecord(key=key, value=value, updated_at=datetime.now(timezone.utc)))

    def remove_item(self, key: str) -> None:
        with self.session_scope() as session:
            session.execute(delete(StoredRecord).where(StoredRecord.key == key))

    def close(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()


# =============================================================================
# Factory
# =============================================================================


def create_backend(settings: Settings) -> StorageBackend:
    """
    Build the backend named by settings.storage_backend.

    A backend that cannot be opened degrades to MemoryStorage so the running
    app keeps working; progress then lasts only for this process.
    """
    if settings.storage_backend == "memory":
        return MemoryStorage()

    if settings.storage_backend == "sql":
        url = settings.resolved_database_url()
        try:
            if settings.database_url is None:
                settings.data_dir.expanduser().mkdir(parents=True, exist_ok=True)
            return SqlStorage(url)
        except (OSError, PersistenceError) as e:
            logger.warning(f"{e}; progress will not be saved this run")
            return MemoryStorage()

    return FileStorage(settings.data_dir)
