from __future__ import annotations

import json
import random
from datetime import date

import httpx

from core.models import AppSettings
from core.state import BOOKMARKS_KEY, DAILY_WORD_DATE_KEY, DAILY_WORD_KEY, SETTINGS_KEY, DictionaryState
from core.storage import JsonFileStore, MemoryStore

from conftest import SAMPLE_CSV, SHEET_URL, mock_client


class SwitchableTransport(httpx.MockTransport):
    """Serves the sample sheet until `fail` is flipped."""

    def __init__(self) -> None:
        self.fail = False
        self.body = SAMPLE_CSV
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        if self.fail:
            return httpx.Response(503, text="unavailable")
        return httpx.Response(200, text=self.body)


def make_state(store=None, *, client=None, today=date(2026, 1, 1), seed=7) -> DictionaryState:
    return DictionaryState(
        store if store is not None else MemoryStore(),
        source_url=SHEET_URL,
        client=client or mock_client(),
        rng=random.Random(seed),
        today=lambda: today,
    )


def test_refresh_loads_entries_and_picks_daily_word() -> None:
    store = MemoryStore()
    state = make_state(store)
    result = state.refresh()
    assert result.ok
    assert len(state.entries) == 4
    assert state.daily_word in state.entries
    assert store.get(DAILY_WORD_KEY)["id"] == state.daily_word.id
    assert store.get(DAILY_WORD_DATE_KEY) == "2026-01-01"


def test_failed_refresh_keeps_previous_entries() -> None:
    transport = SwitchableTransport()
    state = make_state(client=httpx.Client(transport=transport))
    state.refresh()
    before = state.entries

    transport.fail = True
    result = state.refresh()
    assert not result.ok
    assert state.entries is before
    assert "503" in state.last_error

    transport.fail = False
    state.refresh()
    assert state.last_error is None


def test_empty_sheet_keeps_previous_entries() -> None:
    transport = SwitchableTransport()
    state = make_state(client=httpx.Client(transport=transport))
    state.refresh()
    transport.body = "id,akha\n"
    result = state.refresh()
    assert result.ok
    assert len(state.entries) == 4


def test_unconfigured_source_yields_nothing() -> None:
    state = DictionaryState(MemoryStore(), source_url=None)
    result = state.refresh()
    assert not result.ok
    assert state.entries == ()
    assert state.daily_word is None


def test_malformed_source_url_is_reported_not_raised() -> None:
    state = DictionaryState(MemoryStore(), source_url="http://[::1")
    result = state.refresh()
    assert not result.ok
    assert state.last_error == "no data source configured"
    assert state.entries == ()


def test_daily_word_is_stable_within_a_day() -> None:
    store = MemoryStore()
    first = make_state(store, seed=1)
    first.refresh()
    for seed in range(2, 8):
        again = make_state(store, seed=seed)
        again.refresh()
        assert again.daily_word.id == first.daily_word.id


def test_daily_word_snapshot_survives_missing_entry() -> None:
    store = MemoryStore(
        {
            DAILY_WORD_KEY: {"id": "gone", "headword": "Old", "primary_translation": "เก่า", "tags": []},
            DAILY_WORD_DATE_KEY: "2026-01-01",
        }
    )
    state = make_state(store)
    state.refresh()
    assert state.daily_word.id == "gone"
    assert state.daily_word.headword == "Old"


def test_corrupt_daily_word_falls_back_to_first_entry() -> None:
    store = MemoryStore({DAILY_WORD_KEY: "not-a-record", DAILY_WORD_DATE_KEY: "2026-01-01"})
    state = make_state(store)
    state.refresh()
    assert state.daily_word == state.entries[0]


def test_new_day_picks_and_persists_again() -> None:
    store = MemoryStore(
        {DAILY_WORD_KEY: {"id": "gone", "headword": "Old", "tags": []}, DAILY_WORD_DATE_KEY: "2025-12-31"}
    )
    state = make_state(store)
    state.refresh()
    assert state.daily_word.id != "gone"
    assert store.get(DAILY_WORD_DATE_KEY) == "2026-01-01"


def test_shuffle_daily_word() -> None:
    state = make_state()
    assert state.shuffle_daily_word() is None
    state.refresh()
    picked = state.shuffle_daily_word()
    assert picked in state.entries
    assert state.store.get(DAILY_WORD_KEY)["id"] == picked.id


def test_toggle_bookmark_persists() -> None:
    store = MemoryStore()
    state = make_state(store)
    state.refresh()
    assert state.toggle_bookmark("w2") is True
    assert state.toggle_bookmark("w1") is True
    assert store.get(BOOKMARKS_KEY) == ["w2", "w1"]
    assert [e.id for e in state.bookmarked_entries()] == ["w1", "w2"]
    assert state.toggle_bookmark("w2") is False
    assert state.is_bookmarked("w1") and not state.is_bookmarked("w2")
    assert make_state(store).bookmarks == ["w1"]


def test_update_settings_normalizes_and_persists() -> None:
    store = MemoryStore()
    state = make_state(store)
    updated = state.update_settings(theme_color="blue", size_scale="huge", font_family=None)
    assert updated == AppSettings(font_family="Sarabun", size_scale="medium", theme_color="blue")
    assert store.get(SETTINGS_KEY)["theme_color"] == "blue"
    assert make_state(store).settings.theme_color == "blue"


def test_json_file_store_round_trip(tmp_path) -> None:
    path = tmp_path / "nested" / "state.json"
    store = JsonFileStore(path)
    store.set("bookmarks", ["a", "b"])
    assert json.loads(path.read_text(encoding="utf-8")) == {"bookmarks": ["a", "b"]}
    assert JsonFileStore(path).get("bookmarks") == ["a", "b"]


def test_json_file_store_ignores_corrupt_file(tmp_path) -> None:
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")
    assert JsonFileStore(path).get("bookmarks", []) == []
