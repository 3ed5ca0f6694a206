from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional, Sequence

from .filters import FilterSpec, matches_all
from .search import SearchCache
from .sorting import SortSpec, sort_records

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 5000


class QueryCancelled(Exception):
    """Raised when a newer query has been issued while this one was pending or running."""


def iter_query(
    dataset: Sequence[Any],
    cache: SearchCache,
    query: str = '',
    filters: Sequence[FilterSpec] = (),
    sort: Optional[SortSpec] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Iterator[Optional[List[Any]]]:
    """Run the query pipeline in chunks.

    Yields ``None`` after every ``chunk_size`` rows have been filtered, then
    yields the finished view exactly once. Stopping iteration early abandons
    the run without touching the dataset.
    """
    if not cache.covers(dataset):
        raise ValueError("Search cache was built for a different dataset.")

    needle = (query or '').lower()
    specs = list(filters or [])
    chunk_size = max(1, int(chunk_size))

    if needle or specs:
        result: List[Any] = []
        for start in range(0, len(dataset), chunk_size):
            for index in range(start, min(start + chunk_size, len(dataset))):
                if needle and needle not in cache.text(index):
                    continue
                record = dataset[index]
                if matches_all(record, specs):
                    result.append(record)
            yield None
    else:
        result = list(dataset)

    if sort is not None:
        result = sort_records(result, sort)

    yield result


def run_query(
    dataset: Sequence[Any],
    cache: SearchCache,
    query: str = '',
    filters: Sequence[FilterSpec] = (),
    sort: Optional[SortSpec] = None,
) -> List[Any]:
    """Search, filter (AND) and stable-sort the dataset into a new view."""
    result: List[Any] = []
    for step in iter_query(dataset, cache, query, filters, sort, chunk_size=max(1, len(dataset))):
        if step is not None:
            result = step
    return result


@dataclass
class QueryTask:
    generation: int
    dataset: Sequence[Any]
    cache: SearchCache
    query: str = ''
    filters: List[FilterSpec] = field(default_factory=list)
    sort: Optional[SortSpec] = None


class QueryScheduler:
    """Debounced, latest-request-wins execution of query pipeline runs.

    Every ``submit`` issues a task with a higher generation. ``execute``
    waits out the debounce interval and then runs the pipeline chunk by
    chunk; as soon as a newer task exists it raises ``QueryCancelled`` and
    the partial work is dropped.
    """

    def __init__(
        self,
        debounce: float = 0.2,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.debounce = debounce
        self.chunk_size = chunk_size
        self._sleep = sleep
        self._lock = threading.Lock()
        self._generation = 0
        self.latest_result: Optional[List[Any]] = None
        self.latest_generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def submit(self, dataset, cache, query='', filters=(), sort=None) -> QueryTask:
        with self._lock:
            self._generation += 1
            generation = self._generation
        return QueryTask(generation, dataset, cache, query or '', list(filters or []), sort)

    def cancel_all(self) -> None:
        """Supersede every task issued so far, e.g. when the dataset is replaced."""
        with self._lock:
            self._generation += 1

    def is_current(self, task: QueryTask) -> bool:
        with self._lock:
            return task.generation == self._generation

    def _check(self, task: QueryTask) -> None:
        if not self.is_current(task):
            logger.debug("Query generation %d superseded by %d", task.generation, self._generation)
            raise QueryCancelled(task.generation)

    def execute(
        self,
        task: QueryTask,
        debounce: bool = True,
        on_result: Optional[Callable[[List[Any]], None]] = None,
    ) -> List[Any]:
        """Run *task* and return its view.

        ``on_result`` receives the view under the scheduler lock, after the
        final generation check.
        """
        if debounce and self.debounce > 0:
            self._sleep(self.debounce)
        self._check(task)

        started = time.perf_counter()
        result: List[Any] = []
        for step in iter_query(task.dataset, task.cache, task.query, task.filters, task.sort, self.chunk_size):
            self._check(task)
            if step is not None:
                result = step

        with self._lock:
            if task.generation != self._generation:
                raise QueryCancelled(task.generation)
            self.latest_result = result
            self.latest_generation = task.generation
            if on_result is not None:
                on_result(result)

        logger.debug(
            "Query generation %d: %d of %d rows in %.2fms",
            task.generation,
            len(result),
            len(task.dataset),
            (time.perf_counter() - started) * 1000,
        )
        return result

    def run(self, dataset, cache, query='', filters=(), sort=None, debounce: bool = False) -> List[Any]:
        return self.execute(self.submit(dataset, cache, query, filters, sort), debounce=debounce)
