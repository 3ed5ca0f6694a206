from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, List, Optional

import gradio as gr
import pandas as pd

from .column_store import JsonFileColumnStore
from .config import Settings
from .errors import ParseError
from .filters import needs_operand1, needs_operand2
from .flattening import ROW_NUMBER_COLUMN, flatten_rows_for_display, format_detail
from .io_utils import read_json_text, write_export_file
from .pipeline import QueryCancelled
from .schema_utils import build_column_tree
from .session import ExplorerSession

logger = logging.getLogger(__name__)

SELECTED_COLUMN = "✓"
VIEW_OUTPUT_COUNT = 4


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def ensure_session(session: Optional[ExplorerSession]) -> ExplorerSession:
    if session is None:
        settings = get_settings()
        session = ExplorerSession(settings, JsonFileColumnStore(settings.column_store))
    return session


# --- Rendering ---

def render_table(session: ExplorerSession) -> pd.DataFrame:
    columns = session.visible_columns
    window = session.window
    rows = flatten_rows_for_display(session.view, columns, window.start_index, window.end_index)
    for row in rows:
        row[SELECTED_COLUMN] = "✓" if row[ROW_NUMBER_COLUMN] in session.selected_rows else ""
    return pd.DataFrame(rows, columns=[SELECTED_COLUMN, ROW_NUMBER_COLUMN] + columns)


def describe_rows(session: ExplorerSession) -> str:
    if not session.has_data:
        return "No data loaded."
    text = f"{len(session.view):,} / {len(session.dataset):,} rows"
    window = session.window
    if not window.is_empty:
        text += f" | rows {window.start_index:,}-{window.end_index:,}"
    if session.sort is not None:
        text += f" | sorted by {session.sort.field} ({session.sort.direction})"
    if session.selected_rows:
        text += f" | {len(session.selected_rows):,} selected"
    return text


def view_outputs(session: ExplorerSession):
    scroll = gr.update(maximum=max(1, session.virtualizer.max_scroll), value=session.virtualizer.scroll_offset)
    return (
        render_table(session),
        describe_rows(session),
        scroll,
        format_detail(session.detail_record),
    )


def column_choices(session: ExplorerSession) -> List[Any]:
    return [(entry.label, entry.path) for entry in build_column_tree(session.columns)]


def column_picker_update(session: ExplorerSession):
    return gr.update(choices=column_choices(session), value=session.visible_columns)


def sort_field_update(session: ExplorerSession):
    value = session.sort.field if session.sort is not None else None
    return gr.update(choices=session.columns, value=value)


def skip_outputs(count: int):
    return tuple(gr.skip() for _ in range(count))


# --- Loading ---

def _loaded_outputs(session: ExplorerSession, status: str, filter_rev: int):
    return (
        session,
        status,
        gr.update(value=""),
        sort_field_update(session),
        column_picker_update(session),
        filter_rev + 1,
        *view_outputs(session),
    )


def load_text_handler(text: str, session: Optional[ExplorerSession], filter_rev: int):
    session = ensure_session(session)
    if not text or not text.strip():
        return (session, "Nothing to load.") + skip_outputs(4 + VIEW_OUTPUT_COUNT)

    try:
        count = session.load_text(text)
    except ParseError as e:
        logger.warning("Rejected JSON load: %s", e)
        return (session, f"Could not parse JSON: {str(e)}") + skip_outputs(4 + VIEW_OUTPUT_COUNT)

    status = f"Successfully loaded {count:,} records. Found {len(session.columns)} unique fields."
    return _loaded_outputs(session, status, filter_rev)


def load_file_handler(file_obj, session: Optional[ExplorerSession], filter_rev: int):
    session = ensure_session(session)
    if file_obj is None:
        return (session, "No file uploaded.") + skip_outputs(4 + VIEW_OUTPUT_COUNT)

    try:
        text = read_json_text(file_obj)
    except (ParseError, OSError) as e:
        return (session, f"Error reading file: {str(e)}") + skip_outputs(4 + VIEW_OUTPUT_COUNT)
    return load_text_handler(text, session, filter_rev)


def clear_handler(session: Optional[ExplorerSession], filter_rev: int):
    session = ensure_session(session)
    session.clear()
    return _loaded_outputs(session, "Data cleared.", filter_rev)


# --- Query ---

def search_handler(query: str, session: Optional[ExplorerSession]):
    session = ensure_session(session)
    task = session.submit_query(query or "")
    try:
        session.complete_query(task)
    except QueryCancelled:
        return skip_outputs(1 + VIEW_OUTPUT_COUNT)
    return (session, *view_outputs(session))


def _refresh_outputs(session: ExplorerSession):
    session.refresh()
    return (session, *view_outputs(session))


def add_filter_handler(session: Optional[ExplorerSession], filter_rev: int):
    session = ensure_session(session)
    if session.add_filter() is None:
        return (session, filter_rev) + skip_outputs(VIEW_OUTPUT_COUNT)
    session.refresh()
    return (session, filter_rev + 1, *view_outputs(session))


def update_filter_handler(filter_id: str, key: str, value: Any, session: Optional[ExplorerSession]):
    session = ensure_session(session)
    session.update_filter(filter_id, **{key: "" if value is None else str(value)})
    return _refresh_outputs(session)


def update_filter_operator_handler(filter_id: str, operator: str, session: Optional[ExplorerSession], filter_rev: int):
    """Operator changes can show or hide operand boxes, so the filter bar is re-rendered."""
    session = ensure_session(session)
    session.update_filter(filter_id, operator=operator or "contains")
    session.refresh()
    return (session, filter_rev + 1, *view_outputs(session))


def remove_filter_handler(filter_id: str, session: Optional[ExplorerSession], filter_rev: int):
    session = ensure_session(session)
    session.remove_filter(filter_id)
    session.refresh()
    return (session, filter_rev + 1, *view_outputs(session))


def reset_handler(session: Optional[ExplorerSession], filter_rev: int):
    session = ensure_session(session)
    session.reset()
    session.refresh()
    return (session, gr.update(value=""), sort_field_update(session), filter_rev + 1, *view_outputs(session))


def sort_handler(field: str, session: Optional[ExplorerSession]):
    session = ensure_session(session)
    if not field:
        return (session,) + skip_outputs(1 + VIEW_OUTPUT_COUNT)
    session.toggle_sort(field)
    session.refresh()
    return (session, sort_field_update(session), *view_outputs(session))


def filter_row_state(session: ExplorerSession):
    """Filters with the operand boxes each one shows, for the filter bar."""
    return [
        (spec, needs_operand1(spec.operator), needs_operand2(spec.operator))
        for spec in session.filters
    ]


# --- Columns ---

def visible_columns_handler(visible: List[str], session: Optional[ExplorerSession]):
    session = ensure_session(session)
    session.set_visible_columns(visible or [])
    return (session, *view_outputs(session))


def show_all_columns_handler(session: Optional[ExplorerSession]):
    session = ensure_session(session)
    session.show_all_columns()
    return (session, column_picker_update(session), *view_outputs(session))


def hide_all_columns_handler(session: Optional[ExplorerSession]):
    session = ensure_session(session)
    session.hide_all_columns()
    return (session, column_picker_update(session), *view_outputs(session))


# --- Viewport ---

def scroll_handler(offset: float, session: Optional[ExplorerSession]):
    session = ensure_session(session)
    session.scroll_to(offset or 0)
    return (session, *view_outputs(session))


def viewport_handler(height: float, session: Optional[ExplorerSession]):
    session = ensure_session(session)
    session.resize(height or 0)
    return (session, *view_outputs(session))


def table_select_handler(mode: str, session: Optional[ExplorerSession], evt: gr.SelectData):
    session = ensure_session(session)
    row = evt.index[0] if isinstance(evt.index, (list, tuple)) else evt.index
    index = session.window.start_index + int(row)
    if mode == "Select rows":
        session.toggle_row(index)
    else:
        session.open_detail(index)
    return (session, *view_outputs(session))


def toggle_all_rows_handler(session: Optional[ExplorerSession]):
    session = ensure_session(session)
    session.toggle_all_rows()
    return (session, *view_outputs(session))


# --- Export ---

def export_filtered_handler(session: Optional[ExplorerSession]):
    session = ensure_session(session)
    if not session.has_data:
        return None, "No data loaded."
    try:
        path = write_export_file(session.view, "filtered.json")
    except (OSError, ValueError) as e:
        logger.exception("Export failed")
        return None, f"Error during export: {str(e)}"
    return path, f"Exported {len(session.view):,} rows to {path}"


def export_selected_handler(session: Optional[ExplorerSession]):
    session = ensure_session(session)
    records = session.selected_records()
    if not records:
        return None, "No rows selected."
    try:
        path = write_export_file(records, f"selected-{len(records)}.json")
    except (OSError, ValueError) as e:
        logger.exception("Export failed")
        return None, f"Error during export: {str(e)}"
    return path, f"Exported {len(records):,} selected rows to {path}"
