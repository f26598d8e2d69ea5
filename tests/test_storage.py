"""Tests for picross.browser.storage – saved progress."""

from __future__ import annotations

import logging

import pytest

from picross.browser.storage import (
    BrowserStorage,
    LocalStore,
    MemoryStorage,
    SavedState,
    default_store,
    load_state,
    save_state,
)


class _JsStorage:
    """Stand-in for window.localStorage."""

    def __init__(self):
        self.items = {}

    def getItem(self, key):
        return self.items.get(key)

    def setItem(self, key, value):
        self.items[key] = value


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------

class TestStores:
    def test_memory_storage(self):
        s = MemoryStorage({"a": "1"})
        assert s.get_item("a") == "1"
        assert s.get_item("b") is None
        s.set_item("b", "2")
        assert s.get_item("b") == "2"

    def test_browser_storage_wraps_js_api(self):
        js = _JsStorage()
        s = BrowserStorage(js)
        s.set_item("k", "v")
        assert js.items == {"k": "v"}
        assert s.get_item("k") == "v"
        assert s.get_item("missing") is None

    def test_default_store_outside_browser(self):
        assert isinstance(default_store(), MemoryStorage)

    def test_local_store_is_abstract(self):
        with pytest.raises(TypeError):
            LocalStore()


# ---------------------------------------------------------------------------
# load_state / save_state
# ---------------------------------------------------------------------------

class TestLoadState:
    def test_missing_key(self):
        assert load_state(MemoryStorage()) == SavedState()

    def test_round_trip(self):
        store = MemoryStorage()
        save_state(store, [["1", "4"], "extra"])
        assert load_state(store).done_levels == ["1", "4"]

    def test_malformed_json(self, caplog):
        store = MemoryStorage({"picross-elm": "not json"})
        with caplog.at_level(logging.WARNING, logger="picross"):
            state = load_state(store)
        assert state.done_levels == []
        assert "Could not load saved state" in caplog.text

    @pytest.mark.parametrize("raw", ['{"a": 1}', '"abc"', "42", '[{"x": 1}]', '["abc"]'])
    def test_unexpected_shapes(self, raw):
        assert load_state(MemoryStorage({"picross-elm": raw})).done_levels == []

    @pytest.mark.parametrize("raw", ["[]", "[null]", "null"])
    def test_empty_values(self, raw):
        assert load_state(MemoryStorage({"picross-elm": raw})).done_levels == []

    def test_to_flags(self):
        assert SavedState(["a"]).to_flags() == {"doneLevels": ["a"]}
