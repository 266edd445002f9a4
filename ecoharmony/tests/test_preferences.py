"""Tests for the favourites / implemented preference stores."""

from __future__ import annotations

from pathlib import Path

import pytest

from ecoharmony.services import preferences as preferences_module
from ecoharmony.services.preferences import (
    InMemoryPreferenceStore,
    SQLitePreferenceStore,
    create_preference_store,
    toggle,
)


def test_in_memory_store_sets_and_clears_flags() -> None:
    store = InMemoryPreferenceStore()

    assert store.get(1) is False
    store.set(1, True)
    store.set(3, True)
    store.set(1, True)

    assert store.get(1) is True
    assert store.ids() == [1, 3]

    store.set(1, False)
    store.set(2, False)
    assert store.ids() == [3]


def test_toggle_flips_and_returns_new_value() -> None:
    store = InMemoryPreferenceStore()

    assert toggle(store, 5) is True
    assert store.get(5) is True
    assert toggle(store, 5) is False
    assert store.ids() == []


def test_sqlite_store_persists_between_instances(tmp_path: Path) -> None:
    db_path = tmp_path / "prefs" / "preferences.db"
    store = SQLitePreferenceStore(db_path, "favorites")
    store.set(2, True)
    store.set(4, True)
    store.set(2, True)
    store.close()

    reopened = SQLitePreferenceStore(db_path, "favorites")
    try:
        assert reopened.get(2) is True
        assert reopened.get(3) is False
        assert reopened.ids() == [2, 4]
    finally:
        reopened.close()


def test_sqlite_store_keeps_kinds_separate(tmp_path: Path) -> None:
    db_path = tmp_path / "preferences.db"
    favorites = SQLitePreferenceStore(db_path, "favorites")
    implemented = SQLitePreferenceStore(db_path, "implemented")
    try:
        favorites.set(1, True)
        implemented.set(2, True)

        assert favorites.ids() == [1]
        assert implemented.ids() == [2]

        favorites.set(1, False)
        assert favorites.get(1) is False
        assert implemented.get(2) is True
    finally:
        favorites.close()
        implemented.close()


def test_create_preference_store_defaults_to_memory(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ECOHARMONY_PREFERENCES_DB", raising=False)

    assert isinstance(create_preference_store("favorites"), InMemoryPreferenceStore)


def test_create_preference_store_uses_configured_database(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("ECOHARMONY_PREFERENCES_DB", str(tmp_path / "prefs.db"))

    store = create_preference_store("implemented")
    try:
        assert isinstance(store, SQLitePreferenceStore)
        assert store.kind == "implemented"
    finally:
        store.close()


def test_create_preference_store_falls_back_when_sqlite_fails(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _raise(*_: object, **__: object) -> None:
        raise OSError("read-only filesystem")

    monkeypatch.setattr(preferences_module, "SQLitePreferenceStore", _raise)

    store = create_preference_store("favorites", db_path=tmp_path / "prefs.db")

    assert isinstance(store, InMemoryPreferenceStore)


def test_create_preference_store_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError, match="Unknown preference kind"):
        create_preference_store("bookmarks")
