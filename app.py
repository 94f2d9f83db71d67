import html

import pandas as pd
import streamlit as st
from contextlib import contextmanager
from typing import List, Optional

from core.config import configure_logging, load_config
from core.data import entries_to_frame
from core.filters import displayed_entries, list_categories, normalize_filters, shows_daily_word
from core.models import FONT_FAMILIES, SIZE_SCALES, THEME_COLORS, DictionaryEntry, share_text
from core.roadmap import ROADMAP_DATA
from core.state import DictionaryState
from core.storage import JsonFileStore

THEME_HEX = {"red": "#991b1b", "blue": "#1e40af", "green": "#065f46", "slate": "#1e293b"}
SIZE_PX = {"small": 14, "medium": 16, "large": 19}
STATUS_LABEL = {"completed": "Completed", "current": "In progress", "future": "Planned"}


# ---------- UI / layout helpers ----------
def inject_base_styles(settings):
    accent = THEME_HEX.get(settings.theme_color, THEME_HEX["red"])
    st.markdown(
        f"""
        <style>
        html, body, [class*="css"] {{font-family: '{settings.font_family}', sans-serif; font-size: {SIZE_PX[settings.size_scale]}px;}}
        .app-top-bar {{padding: 6px 0 4px;border-bottom: 3px solid {accent};margin-bottom: 10px;}}
        .app-top-bar .breadcrumb {{color: #6b7280;font-size: 0.8rem;letter-spacing: 0.2em;text-transform: uppercase;}}
        .app-top-bar .page-title {{font-size: 1.4rem;font-weight: 800;color: #111827;}}
        .card {{border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}}
        .card-title {{font-weight: 700;font-size: 1.1rem;color: {accent};}}
        .chip-row {{display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}}
        .chip {{background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 2px 10px;font-size: 0.8rem;color: #374151;}}
        </style>
        """,
        unsafe_allow_html=True,
    )


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{html.escape(title)}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_tag_chips(tags: List[str]) -> str:
    return "".join([f"<span class='chip'>{html.escape(t)}</span>" for t in tags if t])


def render_page_header(title: str, breadcrumb: str, export_df: Optional[pd.DataFrame] = None, export_name: str = "export.csv"):
    c1, c2 = st.columns([7, 3])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        btn_cols = st.columns(2)
        if btn_cols[0].button("Refresh"):
            result = state.refresh()
            if not result.ok:
                st.toast("Could not reach the word list; showing saved data.")
            st.rerun()
        if export_df is not None and not export_df.empty:
            btn_cols[1].download_button(
                "Export CSV",
                data=export_df.to_csv(index=False).encode("utf-8"),
                file_name=export_name,
                mime="text/csv",
            )


def render_entry(entry: DictionaryEntry, key_prefix: str):
    marked = state.is_bookmarked(entry.id)
    label = f"{'★ ' if marked else ''}{entry.headword}  ·  {entry.primary_translation or entry.secondary_translation}"
    with st.expander(label):
        if entry.pronunciation:
            st.caption(f"/{entry.pronunciation}/")
        cols = st.columns(2)
        cols[0].markdown(f"**Thai:** {entry.primary_translation or '-'}")
        cols[1].markdown(f"**English:** {entry.secondary_translation or '-'}")
        st.markdown(
            f"<div class='chip-row'><span class='chip'>{html.escape(entry.category)}</span>{format_tag_chips(list(entry.tags))}</div>",
            unsafe_allow_html=True,
        )
        if entry.example:
            st.markdown(f"> {entry.example.headword}  \n> {entry.example.primary}  \n> {entry.example.secondary}")
        a1, a2 = st.columns(2)
        if a1.button("Remove bookmark" if marked else "Bookmark", key=f"{key_prefix}-bm-{entry.id}"):
            added = state.toggle_bookmark(entry.id)
            st.toast("Saved to bookmarks" if added else "Removed from bookmarks")
            st.rerun()
        with a2.popover("Share"):
            st.code(share_text(entry), language=None)


def render_daily_word():
    entry = state.daily_word
    if entry is None:
        return
    with card("Word of the Day"):
        c1, c2 = st.columns([5, 1])
        c1.markdown(f"### {entry.headword}")
        if entry.pronunciation:
            c1.caption(f"/{entry.pronunciation}/")
        c1.write(" / ".join(t for t in [entry.primary_translation, entry.secondary_translation] if t))
        if c2.button("Shuffle", key="shuffle-daily"):
            state.shuffle_daily_word()
            st.toast("Picked a new word")
            st.rerun()


def render_roadmap():
    render_page_header("Project Roadmap", "Roadmap")
    for step in ROADMAP_DATA:
        with card(f"{step.phase}: {step.title}"):
            st.caption(STATUS_LABEL.get(step.status, step.status))
            st.write(step.description)
            for detail in step.details:
                st.markdown(f"- {detail}")


# ---------- UI setup ----------
st.set_page_config(page_title="Akha Dictionary", layout="centered")

if "dictionary_state" not in st.session_state:
    cfg = load_config()
    configure_logging(cfg.log_level)
    new_state = DictionaryState(JsonFileStore(cfg.state_path), source_url=cfg.sheet_url, timeout=cfg.fetch_timeout)
    with st.spinner("Loading word list…"):
        new_state.refresh()
    st.session_state["dictionary_state"] = new_state
state: DictionaryState = st.session_state["dictionary_state"]

inject_base_styles(state.settings)
st.title("Akha Dictionary")

# ----- Sidebar: navigation + settings -----
with st.sidebar:
    st.markdown("### Navigate")
    nav_choice = st.radio("Navigate", ["Search", "Bookmarks", "Roadmap"], index=0, label_visibility="collapsed")

    st.markdown("---")
    with st.expander("Display settings", expanded=False):
        font_family = st.selectbox("Font", FONT_FAMILIES, index=FONT_FAMILIES.index(state.settings.font_family))
        size_scale = st.select_slider("Text size", options=SIZE_SCALES, value=state.settings.size_scale)
        theme_color = st.selectbox("Theme", THEME_COLORS, index=THEME_COLORS.index(state.settings.theme_color))
        if (font_family, size_scale, theme_color) != (state.settings.font_family, state.settings.size_scale, state.settings.theme_color):
            state.update_settings(font_family=font_family, size_scale=size_scale, theme_color=theme_color)
            st.rerun()
    if state.last_error:
        st.caption(f"Last sync failed: {state.last_error}")
    st.caption(f"{len(state.entries)} words loaded")

if nav_choice == "Roadmap":
    render_roadmap()
    st.stop()

if not state.entries:
    st.info("No words loaded yet. Check the sheet URL or press Refresh.")

categories = list_categories(state.entries)
if nav_choice == "Search":
    query = st.text_input("Search Akha, Thai or English", "")
    category = st.selectbox("Category", categories, index=0)
    filters = normalize_filters({"query": query, "category": category, "view": "search"}, available_categories=categories)
    if shows_daily_word(filters):
        render_daily_word()
else:
    filters = normalize_filters({"view": "bookmarks"}, available_categories=categories)

rows = displayed_entries(state.entries, filters, state.bookmarks)
render_page_header(
    "Bookmarks" if filters.view == "bookmarks" else "Search",
    f"{len(rows)} results",
    export_df=entries_to_frame(rows),
    export_name="bookmarks.csv" if filters.view == "bookmarks" else "entries.csv",
)
if not rows:
    st.write("No saved words yet." if filters.view == "bookmarks" else "No matching words.")
for entry in rows:
    render_entry(entry, nav_choice.lower())
