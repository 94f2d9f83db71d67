from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from core.models import DictionaryEntry

ALL_CATEGORIES = "All"
VIEWS = ("search", "bookmarks")


@dataclass(frozen=True)
class SearchFilters:
    query: str = ""
    category: str = ALL_CATEGORIES
    view: str = "search"


def list_categories(entries: Iterable[DictionaryEntry]) -> List[str]:
    cats = sorted({e.category for e in entries if e.category})
    return [ALL_CATEGORIES] + cats


def normalize_filters(raw: dict, *, available_categories: Optional[Sequence[str]] = None) -> SearchFilters:
    query = str(raw.get("query") or "").strip()

    category = str(raw.get("category") or ALL_CATEGORIES).strip() or ALL_CATEGORIES
    if available_categories is not None and category not in available_categories:
        category = ALL_CATEGORIES

    view = str(raw.get("view") or "search").strip().lower()
    if view not in VIEWS:
        view = "search"
    return SearchFilters(query=query, category=category, view=view)


def matches_query(entry: DictionaryEntry, query: str) -> bool:
    q = query.lower()
    return any(q in field.lower() for field in (entry.headword, entry.primary_translation, entry.secondary_translation))


def filter_entries(entries: Iterable[DictionaryEntry], filters: SearchFilters) -> List[DictionaryEntry]:
    out: List[DictionaryEntry] = []
    for entry in entries:
        if filters.category != ALL_CATEGORIES and entry.category != filters.category:
            continue
        if filters.query and not matches_query(entry, filters.query):
            continue
        out.append(entry)
    return out


def displayed_entries(
    entries: Sequence[DictionaryEntry],
    filters: SearchFilters,
    bookmarks: Iterable[str],
) -> List[DictionaryEntry]:
    """Bookmarks view ignores query and category, as the bookmark list is browsed whole."""
    if filters.view == "bookmarks":
        marked = set(bookmarks)
        return [e for e in entries if e.id in marked]
    return filter_entries(entries, filters)


def shows_daily_word(filters: SearchFilters) -> bool:
    """The word-of-the-day card only accompanies the unfiltered search view."""
    return filters.view == "search" and not filters.query and filters.category == ALL_CATEGORIES
