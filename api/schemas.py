from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class SearchFiltersModel(BaseModel):
    query: str = ""
    category: str = "All"
    view: str = "search"


class SettingsModel(BaseModel):
    font_family: Optional[str] = None
    size_scale: Optional[str] = None
    theme_color: Optional[str] = None


class ExampleModel(BaseModel):
    headword: str = ""
    primary: str = ""
    secondary: str = ""


class EntryModel(BaseModel):
    id: str
    headword: str
    pronunciation: str = ""
    primary_translation: str = ""
    secondary_translation: str = ""
    category: str = "General"
    tags: List[str] = Field(default_factory=list)
    example: Optional[ExampleModel] = None
    bookmarked: bool = False


class SearchResponse(BaseModel):
    total: int
    entries: List[EntryModel]


class MetaListResponse(BaseModel):
    values: List[str]
