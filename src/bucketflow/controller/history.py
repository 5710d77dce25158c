"""
History Buffer
==============
Fixed-size rolling window of sampled simulation states.

Why is this file needed?
------------------------
1. Bounded memory: Only the last `capacity` samples are kept; appending past
   capacity drops the oldest sample in O(1).
2. Chart feed: Views get immutable snapshots, a time-windowed slice, or
   numpy columns, without touching the driver's live buffer.
"""
from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Dict, Iterator

import numpy as np

from bucketflow.config import CHART_WINDOW, HISTORY_BUFFER_SIZE
from bucketflow.model.state import HistoryPoint

if TYPE_CHECKING:
    import numpy.typing as npt

HISTORY_FIELDS = ("time", "height", "q_in", "q_out", "q_net", "q_spill")


class HistoryBuffer:
    """
    Ordered, bounded sequence of HistoryPoints (insertion order = time order).
    """

    def __init__(self, capacity: int = HISTORY_BUFFER_SIZE) -> None:
        if capacity <= 0:
            raise ValueError(f"History capacity must be positive, got {capacity}.")
        self._points: deque[HistoryPoint] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._points.maxlen

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[HistoryPoint]:
        return iter(self._points)

    def append(self, point: HistoryPoint) -> None:
        self._points.append(point)

    def clear(self) -> None:
        self._points.clear()

    def snapshot(self) -> tuple[HistoryPoint, ...]:
        """Immutable copy for observers."""
        return tuple(self._points)

    def window(self, current_time: float, span: float = CHART_WINDOW) -> list[HistoryPoint]:
        """
        Points visible in a chart window of `span` seconds ending at the current time.

        Until `span` seconds have elapsed the window is pinned to [0, span].
        """
        end_time = max(current_time, span)
        start_time = end_time - span
        return [p for p in self._points if start_time <= p.time <= end_time]

    def as_arrays(self) -> Dict[str, npt.NDArray[np.float64]]:
        """Column-wise numpy view of the buffer, keyed by HistoryPoint field name."""
        return {
            name: np.fromiter((getattr(p, name) for p in self._points), dtype=np.float64, count=len(self._points))
            for name in HISTORY_FIELDS
        }
