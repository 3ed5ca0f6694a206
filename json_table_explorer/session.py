from __future__ import annotations

import dataclasses
import logging
from typing import Any, List, Optional, Set

from .column_store import ColumnVisibilityStore, MemoryColumnStore
from .config import Settings
from .filters import FilterSpec
from .io_utils import parse_dataset
from .pipeline import QueryScheduler, QueryTask
from .schema_utils import detect_fields
from .search import SearchCache
from .sorting import SortSpec, toggle_sort
from .viewport import ViewportWindow, Virtualizer

logger = logging.getLogger(__name__)


class ExplorerSession:
    """All state behind one explorer view.

    Holds the loaded dataset with its schema and search cache, the query
    inputs (search text, filters, sort), the latest completed view, the
    row selection, the hidden columns and the virtualizer for the view.
    """

    def __init__(self, settings: Optional[Settings] = None, store: Optional[ColumnVisibilityStore] = None):
        self.settings = settings or Settings()
        self.store = store if store is not None else MemoryColumnStore()

        self.dataset: List[Any] = []
        self.columns: List[str] = []
        self.search_cache = SearchCache.empty()

        self.query = ''
        self.filters: List[FilterSpec] = []
        self.sort: Optional[SortSpec] = None
        self.view: List[Any] = []

        self.selected_rows: Set[int] = set()
        self.detail_record: Optional[Any] = None
        self.hidden_columns: Set[str] = self.store.load()
        self._filter_seq = 0

        self.scheduler = QueryScheduler(
            debounce=self.settings.debounce_seconds,
            chunk_size=self.settings.chunk_size,
        )
        self.virtualizer = Virtualizer(
            row_count=0,
            estimate=self.settings.row_height,
            viewport_height=self.settings.viewport_height,
            overscan=self.settings.overscan,
        )

    # --- Loading ---

    @property
    def has_data(self) -> bool:
        return bool(self.dataset)

    def load_text(self, text: Any) -> int:
        """Replace the dataset with parsed *text*.

        Raises ParseError before touching any state, so a failed load keeps
        the current dataset intact.
        """
        dataset = parse_dataset(text)
        columns = detect_fields(dataset)
        cache = SearchCache.build(dataset)

        self.scheduler.cancel_all()
        self.dataset, self.columns, self.search_cache = dataset, columns, cache
        self.query = ''
        self.filters = []
        self.sort = None
        self.detail_record = None
        self._publish(list(dataset))

        logger.info("Loaded %d records with %d columns", len(dataset), len(columns))
        return len(dataset)

    def clear(self) -> None:
        self.scheduler.cancel_all()
        self.dataset, self.columns, self.search_cache = [], [], SearchCache.empty()
        self.reset()
        self._publish([])

    # --- Query ---

    def reset(self) -> None:
        self.filters = []
        self.sort = None
        self.query = ''
        self.detail_record = None

    def submit_query(self, query: Optional[str] = None) -> QueryTask:
        if query is not None:
            self.query = query
        return self.scheduler.submit(self.dataset, self.search_cache, self.query, self.filters, self.sort)

    def complete_query(self, task: QueryTask, debounce: bool = True) -> List[Any]:
        """Run *task* and publish its view. Raises QueryCancelled if superseded."""
        return self.scheduler.execute(task, debounce=debounce, on_result=self._publish)

    def refresh(self) -> List[Any]:
        return self.complete_query(self.submit_query(), debounce=False)

    def _publish(self, view: List[Any]) -> None:
        self.view = view
        self.selected_rows = set()
        self.virtualizer.set_row_count(len(view))

    # --- Filters and sort ---

    def add_filter(self) -> Optional[FilterSpec]:
        if not self.columns:
            return None
        self._filter_seq += 1
        spec = FilterSpec(id=str(self._filter_seq), field=self.columns[0], operator='contains')
        self.filters = self.filters + [spec]
        return spec

    def update_filter(self, filter_id: str, **changes) -> Optional[FilterSpec]:
        updated = None
        filters = []
        for spec in self.filters:
            if spec.id == filter_id:
                spec = updated = dataclasses.replace(spec, **changes)
            filters.append(spec)
        self.filters = filters
        return updated

    def remove_filter(self, filter_id: str) -> None:
        self.filters = [spec for spec in self.filters if spec.id != filter_id]

    def toggle_sort(self, field: str) -> SortSpec:
        self.sort = toggle_sort(self.sort, field)
        return self.sort

    # --- Columns ---

    @property
    def visible_columns(self) -> List[str]:
        return [c for c in self.columns if c not in self.hidden_columns]

    def toggle_column(self, column: str) -> None:
        if column in self.hidden_columns:
            self.hidden_columns.discard(column)
        else:
            self.hidden_columns.add(column)
        self.store.save(self.hidden_columns)

    def set_visible_columns(self, visible: List[str]) -> None:
        keep = set(visible or [])
        # Hidden columns from other datasets stay hidden.
        self.hidden_columns = {c for c in self.hidden_columns if c not in self.columns}
        self.hidden_columns.update(c for c in self.columns if c not in keep)
        self.store.save(self.hidden_columns)

    def show_all_columns(self) -> None:
        self.hidden_columns = set()
        self.store.save(self.hidden_columns)

    def hide_all_columns(self) -> None:
        self.hidden_columns = set(self.columns)
        self.store.save(self.hidden_columns)

    # --- Selection and detail ---

    def toggle_row(self, index: int) -> None:
        if not 0 <= index < len(self.view):
            return
        if index in self.selected_rows:
            self.selected_rows.discard(index)
        else:
            self.selected_rows.add(index)

    def toggle_all_rows(self) -> None:
        if len(self.selected_rows) == len(self.view):
            self.selected_rows = set()
        else:
            self.selected_rows = set(range(len(self.view)))

    def selected_records(self) -> List[Any]:
        return [self.view[i] for i in sorted(self.selected_rows) if i < len(self.view)]

    def open_detail(self, index: int) -> Optional[Any]:
        """Show the record at view position *index*; opening the shown record again closes it."""
        record = self.view[index] if 0 <= index < len(self.view) else None
        if record is None or record is self.detail_record:
            self.detail_record = None
        else:
            self.detail_record = record
        return self.detail_record

    # --- Viewport ---

    @property
    def window(self) -> ViewportWindow:
        return self.virtualizer.window

    def scroll_to(self, offset: float) -> ViewportWindow:
        return self.virtualizer.scroll_to(offset)

    def resize(self, viewport_height: float) -> ViewportWindow:
        return self.virtualizer.resize(viewport_height)

    def measure(self, index: int, height: float) -> ViewportWindow:
        return self.virtualizer.measure(index, height)
