from __future__ import annotations

import logging
import random
import threading
from dataclasses import asdict
from datetime import date
from typing import Callable, List, Optional, Tuple

import httpx

from core.data import LoadResult, load_dictionary
from core.models import AppSettings, DictionaryEntry, normalize_settings
from core.sheet import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

BOOKMARKS_KEY = "bookmarks"
DAILY_WORD_KEY = "daily_word"
DAILY_WORD_DATE_KEY = "daily_word_date"
SETTINGS_KEY = "settings"


class DictionaryState:
    """Owns the loaded entry batch plus the user's persisted bookmarks, daily word and settings.

    `store` is any object with ``get(key, default)`` / ``set(key, value)``.
    """

    def __init__(
        self,
        store,
        *,
        source_url: Optional[str],
        rng: Optional[random.Random] = None,
        today: Optional[Callable[[], date]] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.store = store
        self.source_url = source_url
        self.rng = rng or random.Random()
        self.today = today or date.today
        self.client = client
        self.timeout = timeout

        self.entries: Tuple[DictionaryEntry, ...] = ()
        self.daily_word: Optional[DictionaryEntry] = None
        self.last_error: Optional[str] = None
        self.bookmarks: List[str] = [str(b) for b in (store.get(BOOKMARKS_KEY) or [])]
        self.settings: AppSettings = normalize_settings(store.get(SETTINGS_KEY))
        self._refresh_lock = threading.Lock()

    # ---------------- Loading ----------------
    def refresh(self) -> LoadResult:
        """Fetch and parse the sheet; keep the previous batch unless a non-empty one arrives."""
        with self._refresh_lock:
            result = load_dictionary(self.source_url, client=self.client, timeout=self.timeout)
            if not result.ok:
                self.last_error = result.error
                return result
            self.last_error = None
            if result.entries:
                self.entries = result.entries
                self._resolve_daily_word()
            else:
                logger.info("Sheet returned no usable rows; keeping %d cached entries", len(self.entries))
            return result

    def get_entry(self, entry_id: str) -> Optional[DictionaryEntry]:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    # ---------------- Bookmarks ----------------
    def is_bookmarked(self, entry_id: str) -> bool:
        return entry_id in self.bookmarks

    def toggle_bookmark(self, entry_id: str) -> bool:
        adding = entry_id not in self.bookmarks
        if adding:
            self.bookmarks = self.bookmarks + [entry_id]
        else:
            self.bookmarks = [b for b in self.bookmarks if b != entry_id]
        self.store.set(BOOKMARKS_KEY, list(self.bookmarks))
        return adding

    def bookmarked_entries(self) -> List[DictionaryEntry]:
        marked = set(self.bookmarks)
        return [e for e in self.entries if e.id in marked]

    # ---------------- Daily word ----------------
    def _remember_daily_word(self, entry: DictionaryEntry) -> None:
        self.daily_word = entry
        self.store.set(DAILY_WORD_KEY, entry.to_dict())
        self.store.set(DAILY_WORD_DATE_KEY, self.today().isoformat())

    def _resolve_daily_word(self) -> None:
        if not self.entries:
            return
        stored = self.store.get(DAILY_WORD_KEY)
        stored_date = self.store.get(DAILY_WORD_DATE_KEY)
        if stored and stored_date == self.today().isoformat():
            try:
                snapshot = DictionaryEntry.from_dict(stored)
            except (KeyError, TypeError, AttributeError):
                logger.warning("Stored daily word is corrupt; falling back to first entry")
                self.daily_word = self.entries[0]
                return
            self.daily_word = self.get_entry(snapshot.id) or snapshot
            return
        self._remember_daily_word(self.rng.choice(self.entries))

    def shuffle_daily_word(self) -> Optional[DictionaryEntry]:
        if not self.entries:
            return None
        self._remember_daily_word(self.rng.choice(self.entries))
        return self.daily_word

    # ---------------- Settings ----------------
    def update_settings(self, **changes) -> AppSettings:
        merged = asdict(self.settings)
        merged.update({k: v for k, v in changes.items() if v is not None})
        self.settings = normalize_settings(merged)
        self.store.set(SETTINGS_KEY, asdict(self.settings))
        return self.settings
