from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import httpx
import pandas as pd

from core.errors import ConfigError, TransportError
from core.models import DEFAULT_CATEGORY, DictionaryEntry, ExampleSentence
from core.sheet import DEFAULT_TIMEOUT, fetch_sheet_csv

logger = logging.getLogger(__name__)

# Positional column order of the sheet export. The header row itself is ignored.
SHEET_COLUMNS: Tuple[str, ...] = (
    "id",
    "headword",
    "pronunciation",
    "primary_translation",
    "secondary_translation",
    "category",
    "tags",
    "example_headword",
    "example_primary",
    "example_secondary",
)

TAG_DELIMITER = "|"
AUTO_ID_PREFIX = "auto-"

_LINE_BREAK = re.compile(r"\r?\n")


# ---------------- Row helpers ----------------
def split_csv_line(line: str) -> List[str]:
    """Split on commas that sit outside a quoted section.

    A comma is a separator only when the count of double quotes before it on the
    line is even.
    """
    values: List[str] = []
    quotes = 0
    start = 0
    for idx, ch in enumerate(line):
        if ch == '"':
            quotes += 1
        elif ch == "," and quotes % 2 == 0:
            values.append(line[start:idx])
            start = idx + 1
    values.append(line[start:])
    return values


def normalize_field(value: str) -> str:
    s = value.strip()
    if len(s) >= 2 and s.startswith('"') and s.endswith('"'):
        s = s[1:-1]
    return s.replace('""', '"')


def parse_tags(value: str) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(t.strip() for t in value.split(TAG_DELIMITER))


def map_row(values: Sequence[str]) -> Dict[str, str]:
    """Named view of one data row; extra values are dropped, missing ones are ''."""
    padded = list(values[: len(SHEET_COLUMNS)]) + [""] * max(0, len(SHEET_COLUMNS) - len(values))
    return dict(zip(SHEET_COLUMNS, padded))


def is_valid_row(row: Dict[str, str]) -> bool:
    if not row["headword"]:
        return False
    return bool(row["primary_translation"] or row["secondary_translation"])


def row_to_entry(row: Dict[str, str], index: int) -> DictionaryEntry:
    example = None
    if row["example_headword"] or row["example_primary"] or row["example_secondary"]:
        example = ExampleSentence(
            headword=row["example_headword"],
            primary=row["example_primary"],
            secondary=row["example_secondary"],
        )
    return DictionaryEntry(
        id=row["id"] or f"{AUTO_ID_PREFIX}{index}",
        headword=row["headword"],
        pronunciation=row["pronunciation"],
        primary_translation=row["primary_translation"],
        secondary_translation=row["secondary_translation"],
        category=row["category"] or DEFAULT_CATEGORY,
        tags=parse_tags(row["tags"]),
        example=example,
    )


# ---------------- Parser ----------------
def parse_csv(csv_text: str) -> List[DictionaryEntry]:
    """Convert a sheet export into entries, silently dropping rows that fail validation."""
    lines = [line for line in _LINE_BREAK.split(csv_text or "") if line.strip()]
    if len(lines) < 2:
        return []

    entries: List[DictionaryEntry] = []
    rejected = 0
    for index, line in enumerate(lines[1:]):
        row = map_row([normalize_field(v) for v in split_csv_line(line)])
        if not is_valid_row(row):
            rejected += 1
            continue
        entries.append(row_to_entry(row, index))
    if rejected:
        logger.debug("skipped %d incomplete rows", rejected)
    return entries


def entries_to_frame(entries: Iterable[DictionaryEntry]) -> pd.DataFrame:
    records = []
    for e in entries:
        ex = e.example or ExampleSentence()
        records.append(
            {
                "id": e.id,
                "headword": e.headword,
                "pronunciation": e.pronunciation,
                "primary_translation": e.primary_translation,
                "secondary_translation": e.secondary_translation,
                "category": e.category,
                "tags": TAG_DELIMITER.join(e.tags),
                "example_headword": ex.headword,
                "example_primary": ex.primary,
                "example_secondary": ex.secondary,
            }
        )
    return pd.DataFrame(records, columns=list(SHEET_COLUMNS))


# ---------------- Pipeline ----------------
@dataclass(frozen=True)
class LoadResult:
    entries: Tuple[DictionaryEntry, ...] = field(default_factory=tuple)
    ok: bool = True
    error: Optional[str] = None


def load_dictionary(
    url: Optional[str],
    *,
    client: Optional[httpx.Client] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> LoadResult:
    try:
        csv_text = fetch_sheet_csv(url, client=client, timeout=timeout)
    except ConfigError as exc:
        logger.warning("Sheet source not configured: %s", exc)
        return LoadResult(ok=False, error=str(exc))
    except TransportError as exc:
        logger.warning("Sheet fetch failed: %s", exc)
        return LoadResult(ok=False, error=str(exc))
    entries = parse_csv(csv_text)
    logger.info("Loaded %d dictionary entries", len(entries))
    return LoadResult(entries=tuple(entries))
