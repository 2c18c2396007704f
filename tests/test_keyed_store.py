"""In-memory keyed store semantics."""

from __future__ import annotations

import pytest

from app.services.keyed_store import (
    InMemoryKeyedStore,
    KeyedStoreConflictError,
    SqlAlchemyKeyedStore,
    build_keyed_store,
)


def test_get_missing_cell_returns_none(run):
    assert run(InMemoryKeyedStore().get("blog", "nope")) is None


def test_namespaces_are_independent(run):
    store = InMemoryKeyedStore()
    run(store.set("blog", "id-1", {"title": "A"}))

    assert run(store.get("blog", "id-1")) == {"title": "A"}
    assert run(store.get("tts", "id-1")) is None


def test_cells_are_write_once(run):
    store = InMemoryKeyedStore()
    run(store.set("blog", "id-1", {"v": 1}))

    with pytest.raises(KeyedStoreConflictError):
        run(store.set("blog", "id-1", {"v": 2}))

    assert run(store.get("blog", "id-1")) == {"v": 1}


def test_values_are_copied_in_and_out(run):
    store = InMemoryKeyedStore()
    original = {"sections": [{"heading": "H"}]}
    run(store.set("blog", "id-1", original))
    original["sections"].append({"heading": "mutated"})

    first = run(store.get("blog", "id-1"))
    first["sections"].clear()
    second = run(store.get("blog", "id-1"))

    assert second == {"sections": [{"heading": "H"}]}


def test_build_keyed_store_selects_backend():
    assert isinstance(build_keyed_store("memory"), InMemoryKeyedStore)
    assert isinstance(build_keyed_store("database"), SqlAlchemyKeyedStore)
