from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Tuple

DEFAULT_CATEGORY = "General"


@dataclass(frozen=True)
class ExampleSentence:
    headword: str = ""
    primary: str = ""
    secondary: str = ""


@dataclass(frozen=True)
class DictionaryEntry:
    id: str
    headword: str
    pronunciation: str = ""
    primary_translation: str = ""
    secondary_translation: str = ""
    category: str = DEFAULT_CATEGORY
    tags: Tuple[str, ...] = field(default_factory=tuple)
    example: Optional[ExampleSentence] = None

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["tags"] = list(self.tags)
        return out

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "DictionaryEntry":
        """Rebuild an entry from `to_dict` output. Raises KeyError/TypeError on bad input."""
        example_raw = raw.get("example")
        example = None
        if example_raw:
            example = ExampleSentence(
                headword=str(example_raw.get("headword", "")),
                primary=str(example_raw.get("primary", "")),
                secondary=str(example_raw.get("secondary", "")),
            )
        return cls(
            id=str(raw["id"]),
            headword=str(raw["headword"]),
            pronunciation=str(raw.get("pronunciation", "")),
            primary_translation=str(raw.get("primary_translation", "")),
            secondary_translation=str(raw.get("secondary_translation", "")),
            category=str(raw.get("category") or DEFAULT_CATEGORY),
            tags=tuple(str(t) for t in (raw.get("tags") or [])),
            example=example,
        )


FONT_FAMILIES = ("Sarabun", "Inter", "sans-serif")
SIZE_SCALES = ("small", "medium", "large")
THEME_COLORS = ("red", "blue", "green", "slate")


@dataclass(frozen=True)
class AppSettings:
    font_family: str = "Sarabun"
    size_scale: str = "medium"
    theme_color: str = "red"


def normalize_settings(raw: Optional[dict]) -> AppSettings:
    raw = raw or {}
    defaults = AppSettings()

    def _pick(key: str, allowed: Tuple[str, ...], default: str) -> str:
        value = raw.get(key)
        return value if value in allowed else default

    return AppSettings(
        font_family=_pick("font_family", FONT_FAMILIES, defaults.font_family),
        size_scale=_pick("size_scale", SIZE_SCALES, defaults.size_scale),
        theme_color=_pick("theme_color", THEME_COLORS, defaults.theme_color),
    )


def share_text(entry: DictionaryEntry) -> str:
    translations = " / ".join(t for t in [entry.primary_translation, entry.secondary_translation] if t)
    reading = f" (read: {entry.pronunciation})" if entry.pronunciation else ""
    return f'Akha heritage word: "{entry.headword}"{reading} means {translations} #AkhaDictionary #Heritage'
