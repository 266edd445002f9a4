"""Per-tip preference flags such as favourites and implemented tips.

Two backends share the :class:`PreferenceStore` surface:
  - :class:`InMemoryPreferenceStore` for development and tests
  - :class:`SQLitePreferenceStore` when ``ECOHARMONY_PREFERENCES_DB`` is set

Design notes
------------
- One ``preferences`` table holds every kind, keyed by ``(kind, tip_id)``.
  A row exists only while the flag is set.
- WAL mode is enabled. Suitable for single-writer, multi-reader local use.
- The search engine never reads these stores; only the web layer does.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
import os
from pathlib import Path
import sqlite3
from threading import Lock
from typing import Final, Literal, Protocol

logger = logging.getLogger(__name__)

PreferenceKind = Literal["favorites", "implemented"]
PREFERENCE_KINDS: Final[tuple[str, ...]] = ("favorites", "implemented")
PREFERENCES_DB_ENV: Final[str] = "ECOHARMONY_PREFERENCES_DB"
DEFAULT_PREFERENCES_TABLE: Final[str] = "preferences"


class PreferenceStore(Protocol):
    """Key-value store of boolean flags keyed by tip id."""

    def get(self, tip_id: int) -> bool:
        """Return whether the flag is set for ``tip_id``."""

    def set(self, tip_id: int, value: bool) -> None:
        """Set or clear the flag for ``tip_id``."""

    def ids(self) -> list[int]:
        """Return flagged tip ids in the order they were set."""


@dataclass(slots=True)
class InMemoryPreferenceStore:
    """Process-local store used when no database is configured."""

    _ids: dict[int, None] = field(default_factory=dict)
    _lock: Lock = field(default_factory=Lock)

    def get(self, tip_id: int) -> bool:
        return tip_id in self._ids

    def set(self, tip_id: int, value: bool) -> None:
        with self._lock:
            if value:
                self._ids.setdefault(tip_id, None)
            else:
                self._ids.pop(tip_id, None)

    def ids(self) -> list[int]:
        return list(self._ids)


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class SQLitePreferenceStore:
    """SQLite-backed store for a single preference kind."""

    def __init__(
        self,
        db_path: str | Path,
        kind: str,
        *,
        table: str = DEFAULT_PREFERENCES_TABLE,
    ) -> None:
        self._db_path = Path(db_path)
        self._kind = kind
        self._table = table

        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
        with self._conn:
            self._conn.execute("PRAGMA journal_mode = WAL;")
        self._bootstrap()

    def _bootstrap(self) -> None:
        with self._conn:
            self._conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self._table} (
                    kind TEXT NOT NULL,
                    tip_id INTEGER NOT NULL,
                    created_at TEXT NOT NULL,
                    PRIMARY KEY (kind, tip_id)
                );
                """
            )

    @property
    def kind(self) -> str:
        return self._kind

    def get(self, tip_id: int) -> bool:
        row = self._conn.execute(
            f"SELECT 1 FROM {self._table} WHERE kind = ? AND tip_id = ?;",
            (self._kind, int(tip_id)),
        ).fetchone()
        return row is not None

    def set(self, tip_id: int, value: bool) -> None:
        with self._conn:
            if value:
                self._conn.execute(
                    f"""
                    INSERT OR IGNORE INTO {self._table}(kind, tip_id, created_at)
                    VALUES (?, ?, ?);
                    """,
                    (self._kind, int(tip_id), _iso_now()),
                )
            else:
                self._conn.execute(
                    f"DELETE FROM {self._table} WHERE kind = ? AND tip_id = ?;",
                    (self._kind, int(tip_id)),
                )

    def ids(self) -> list[int]:
        rows = self._conn.execute(
            f"SELECT tip_id FROM {self._table} WHERE kind = ? ORDER BY created_at, rowid;",
            (self._kind,),
        ).fetchall()
        return [int(row[0]) for row in rows]

    def close(self) -> None:
        self._conn.close()


def toggle(store: PreferenceStore, tip_id: int) -> bool:
    """Flip the flag for ``tip_id`` and return the new value."""

    value = not store.get(tip_id)
    store.set(tip_id, value)
    return value


def create_preference_store(kind: str, *, db_path: str | Path | None = None) -> PreferenceStore:
    """Return a store for ``kind``, SQLite when configured and memory otherwise."""

    if kind not in PREFERENCE_KINDS:
        raise ValueError(f"Unknown preference kind: {kind!r}")

    path = db_path or os.getenv(PREFERENCES_DB_ENV)
    if not path:
        return InMemoryPreferenceStore()

    try:
        return SQLitePreferenceStore(path, kind)
    except (OSError, sqlite3.Error):
        logger.exception(
            "SQLite preference store init failed; falling back to in-memory.",
            extra={"event": "preferences.store_init", "kind": kind},
        )
        return InMemoryPreferenceStore()


__all__ = [
    "InMemoryPreferenceStore",
    "PREFERENCE_KINDS",
    "PreferenceKind",
    "PreferenceStore",
    "SQLitePreferenceStore",
    "create_preference_store",
    "toggle",
]
