from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Union

logger = logging.getLogger(__name__)

Number = Union[int, float]


@dataclass(frozen=True)
class ViewportWindow:
    """Contiguous row range to render plus the spacer heights around it.

    An empty window has ``end_index < start_index``.
    """

    start_index: int
    end_index: int
    leading_spacer_height: Number = 0
    trailing_spacer_height: Number = 0

    @property
    def is_empty(self) -> bool:
        return self.end_index < self.start_index

    @property
    def indices(self) -> range:
        return range(self.start_index, self.end_index + 1)

    def __len__(self) -> int:
        return max(0, self.end_index - self.start_index + 1)

    def __contains__(self, index: int) -> bool:
        return self.start_index <= index <= self.end_index


EMPTY_WINDOW = ViewportWindow(0, -1, 0, 0)


class RowHeightIndex:
    """Cumulative row offsets backed by a Fenwick tree.

    Every row starts at the uniform estimate. ``measure`` replaces one
    row's height in place and shifts every later offset, and ``offset``
    and ``row_at`` both run in O(log n).
    """

    def __init__(self, row_count: int = 0, estimate: Number = 36):
        if estimate <= 0:
            raise ValueError("Row height estimate must be positive.")
        self.estimate = estimate
        self._count = max(0, int(row_count))
        self._heights: List[Number] = [estimate] * self._count
        self._tree: List[Number] = self._build(self._heights)

    @staticmethod
    def _build(heights: List[Number]) -> List[Number]:
        n = len(heights)
        tree: List[Number] = [0] * (n + 1)
        for i in range(1, n + 1):
            tree[i] += heights[i - 1]
            parent = i + (i & -i)
            if parent <= n:
                tree[parent] += tree[i]
        return tree

    def __len__(self) -> int:
        return self._count

    def height(self, index: int) -> Number:
        return self._heights[index]

    def measure(self, index: int, height: Number) -> bool:
        """Record the real height of a row. Returns False when nothing changed."""
        if not 0 <= index < self._count:
            return False
        height = max(0, height)
        delta = height - self._heights[index]
        if delta == 0:
            return False
        self._heights[index] = height
        i = index + 1
        while i <= self._count:
            self._tree[i] += delta
            i += i & -i
        return True

    def offset(self, index: int) -> Number:
        """Sum of the heights of rows ``[0, index)``."""
        i = min(max(0, index), self._count)
        total: Number = 0
        while i > 0:
            total += self._tree[i]
            i -= i & -i
        return total

    @property
    def total_height(self) -> Number:
        return self.offset(self._count)

    def row_at(self, position: Number) -> int:
        """Largest row index whose offset is ``<= position``."""
        if self._count == 0:
            return -1
        pos = 0
        remaining = position
        step = 1 << (self._count.bit_length() - 1)
        while step:
            nxt = pos + step
            if nxt <= self._count and self._tree[nxt] <= remaining:
                pos = nxt
                remaining -= self._tree[nxt]
            step >>= 1
        return min(pos, self._count - 1)


def compute_window(index: RowHeightIndex, scroll_offset: Number, viewport_height: Number, overscan: int = 0) -> ViewportWindow:
    """Smallest row range covering ``[scroll_offset, scroll_offset + viewport_height)``, widened by overscan.

    Degenerate input (no rows, no viewport) gives ``EMPTY_WINDOW``. The
    scroll offset is clamped into the scrollable range.
    """
    count = len(index)
    if count == 0 or viewport_height is None or viewport_height <= 0:
        return EMPTY_WINDOW

    total = index.total_height
    scroll = min(max(0, scroll_offset or 0), total)
    overscan = max(0, int(overscan or 0))

    raw_start = index.row_at(scroll)
    limit = scroll + viewport_height
    raw_end = raw_start
    edge = index.offset(raw_start) + index.height(raw_start)
    while edge < limit and raw_end < count - 1:
        raw_end += 1
        edge += index.height(raw_end)

    start = max(0, raw_start - overscan)
    end = min(count - 1, raw_end + overscan)
    return ViewportWindow(
        start_index=start,
        end_index=end,
        leading_spacer_height=index.offset(start),
        trailing_spacer_height=total - index.offset(end + 1),
    )


class Virtualizer:
    """Scroll state and the current window for one displayed row sequence."""

    def __init__(self, row_count: int = 0, estimate: Number = 36, viewport_height: Number = 720, overscan: int = 20):
        self.estimate = estimate
        self.viewport_height = viewport_height
        self.overscan = overscan
        self.scroll_offset: Number = 0
        self.heights = RowHeightIndex(row_count, estimate)
        self.window = EMPTY_WINDOW
        self.recompute()

    @property
    def row_count(self) -> int:
        return len(self.heights)

    @property
    def total_height(self) -> Number:
        return self.heights.total_height

    @property
    def max_scroll(self) -> Number:
        return max(0, self.total_height - max(0, self.viewport_height or 0))

    def recompute(self) -> ViewportWindow:
        self.window = compute_window(self.heights, self.scroll_offset, self.viewport_height, self.overscan)
        return self.window

    def set_row_count(self, row_count: int) -> ViewportWindow:
        """Discard measured heights and start over from the estimate."""
        self.heights = RowHeightIndex(row_count, self.estimate)
        self.scroll_offset = min(self.scroll_offset, self.max_scroll)
        logger.debug("Virtualizer reset to %d rows", row_count)
        return self.recompute()

    def scroll_to(self, offset: Number) -> ViewportWindow:
        self.scroll_offset = min(max(0, offset or 0), self.max_scroll)
        return self.recompute()

    def resize(self, viewport_height: Number) -> ViewportWindow:
        self.viewport_height = max(0, viewport_height or 0)
        self.scroll_offset = min(self.scroll_offset, self.max_scroll)
        return self.recompute()

    def measure(self, index: int, height: Number) -> ViewportWindow:
        """Record a row's rendered height; only rows inside the window trigger a recompute."""
        changed = self.heights.measure(index, height)
        if changed and index in self.window:
            return self.recompute()
        return self.window
