from __future__ import annotations

import logging
import threading
from dataclasses import asdict
from typing import Optional

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import EntryModel, MetaListResponse, SearchFiltersModel, SearchResponse, SettingsModel
from core.config import configure_logging, load_config
from core.data import entries_to_frame
from core.filters import SearchFilters, displayed_entries, list_categories, normalize_filters
from core.models import DictionaryEntry, share_text
from core.roadmap import roadmap_payload
from core.state import DictionaryState
from core.storage import JsonFileStore


app = FastAPI(title="Akha Dictionary API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_state: Optional[DictionaryState] = None
_state_lock = threading.Lock()


def get_state() -> DictionaryState:
    global _state
    if _state is not None:
        return _state
    with _state_lock:
        if _state is None:
            cfg = load_config()
            configure_logging(cfg.log_level)
            state = DictionaryState(JsonFileStore(cfg.state_path), source_url=cfg.sheet_url, timeout=cfg.fetch_timeout)
            state.refresh()
            _state = state
    return _state


def set_state(state: Optional[DictionaryState]) -> None:
    global _state
    _state = state


def _json(data: object, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(data))


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _not_found(entry_id: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": f"entry {entry_id!r} not found", "type": "NotFound"})


def _entry_model(entry: DictionaryEntry, state: DictionaryState) -> EntryModel:
    return EntryModel(**entry.to_dict(), bookmarked=state.is_bookmarked(entry.id))


def _entry_payload(entry: DictionaryEntry, state: DictionaryState) -> dict:
    return _entry_model(entry, state).model_dump()


def _filters_from_model(model: SearchFiltersModel, state: DictionaryState) -> SearchFilters:
    return normalize_filters(model.model_dump(), available_categories=list_categories(state.entries))


@app.get("/meta/categories")
def meta_categories():
    try:
        state = get_state()
        return _json(MetaListResponse(values=list_categories(state.entries)).model_dump())
    except Exception as exc:
        logger.exception("meta_categories failed")
        return _error(exc)


@app.post("/search")
def search(filters: SearchFiltersModel):
    try:
        state = get_state()
        f = _filters_from_model(filters, state)
        rows = displayed_entries(state.entries, f, state.bookmarks)
        payload = SearchResponse(total=len(rows), entries=[_entry_model(e, state) for e in rows])
        return _json({"filters": asdict(f), **payload.model_dump()})
    except Exception as exc:
        logger.exception("search failed")
        return _error(exc)


@app.get("/entries/{entry_id}")
def get_entry(entry_id: str):
    try:
        state = get_state()
        entry = state.get_entry(entry_id)
        if entry is None:
            return _not_found(entry_id)
        return _json(_entry_payload(entry, state))
    except Exception as exc:
        logger.exception("get_entry failed")
        return _error(exc)


@app.get("/entries/{entry_id}/share")
def share_entry(entry_id: str):
    try:
        state = get_state()
        entry = state.get_entry(entry_id)
        if entry is None:
            return _not_found(entry_id)
        return _json({"id": entry.id, "text": share_text(entry)})
    except Exception as exc:
        logger.exception("share_entry failed")
        return _error(exc)


@app.get("/bookmarks")
def bookmarks():
    try:
        state = get_state()
        return _json({"ids": list(state.bookmarks), "entries": [_entry_payload(e, state) for e in state.bookmarked_entries()]})
    except Exception as exc:
        logger.exception("bookmarks failed")
        return _error(exc)


@app.post("/bookmarks/{entry_id}")
def toggle_bookmark(entry_id: str):
    try:
        state = get_state()
        added = state.toggle_bookmark(entry_id)
        return _json({"id": entry_id, "bookmarked": added, "ids": list(state.bookmarks)})
    except Exception as exc:
        logger.exception("toggle_bookmark failed")
        return _error(exc)


@app.get("/daily-word")
def daily_word():
    try:
        state = get_state()
        entry = state.daily_word
        return _json({"entry": _entry_payload(entry, state) if entry else None})
    except Exception as exc:
        logger.exception("daily_word failed")
        return _error(exc)


@app.post("/daily-word/shuffle")
def shuffle_daily_word():
    try:
        state = get_state()
        entry = state.shuffle_daily_word()
        return _json({"entry": _entry_payload(entry, state) if entry else None})
    except Exception as exc:
        logger.exception("shuffle_daily_word failed")
        return _error(exc)


@app.post("/refresh")
def refresh():
    try:
        state = get_state()
        result = state.refresh()
        return _json({"ok": result.ok, "error": result.error, "fetched": len(result.entries), "total": len(state.entries)})
    except Exception as exc:
        logger.exception("refresh failed")
        return _error(exc)


@app.get("/roadmap")
def roadmap():
    return _json({"steps": roadmap_payload()})


@app.get("/settings")
def get_settings():
    try:
        return _json(asdict(get_state().settings))
    except Exception as exc:
        logger.exception("get_settings failed")
        return _error(exc)


@app.put("/settings")
def put_settings(settings: SettingsModel):
    try:
        updated = get_state().update_settings(**settings.model_dump())
        return _json(asdict(updated))
    except Exception as exc:
        logger.exception("put_settings failed")
        return _error(exc)


@app.post("/export")
def export_entries(filters: SearchFiltersModel):
    state = get_state()
    f = _filters_from_model(filters, state)
    export_df = entries_to_frame(displayed_entries(state.entries, f, state.bookmarks))
    filename = "bookmarks.csv" if f.view == "bookmarks" else "entries.csv"
    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
