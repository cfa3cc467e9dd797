"""
Stress Feed.

Bounded, thread-safe channel between behavior detectors (which may run
on their own threads) and the adaptation session (which polls).
When full, the oldest metrics are dropped.
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, List, Optional

from loguru import logger

from canine_sense.core.contracts import StressMetrics


class StressFeed:
    """
    Polling channel for StressMetrics.

    Detectors call publish(); the session calls drain() each step; latest() peeks for other readers.
    No callbacks are ever invoked.
    """

    def __init__(self, capacity: int = 32):
        """
        Initialize feed.

        Args:
            capacity: Maximum queued metrics (oldest dropped when full)
        """
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")

        self.capacity = capacity
        self._queue: Deque[StressMetrics] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self._dropped: int = 0
        self._last: Optional[StressMetrics] = None

    def publish(self, metrics: StressMetrics):
        """Queue metrics from a detector."""
        with self._lock:
            if len(self._queue) == self.capacity:
                self._dropped += 1
            self._queue.append(metrics)
            self._last = metrics
            dropped = self._dropped

        if dropped and dropped % self.capacity == 1:
            logger.debug(f"Stress feed full, {dropped} metrics dropped so far")

    def latest(self) -> Optional[StressMetrics]:
        """Most recently published metrics (not consumed), or None."""
        with self._lock:
            return self._last

    def drain(self) -> List[StressMetrics]:
        """Remove and return all queued metrics, oldest first."""
        with self._lock:
            items = list(self._queue)
            self._queue.clear()
        return items

    @property
    def dropped(self) -> int:
        with self._lock:
            return self._dropped

    def __len__(self) -> int:
        with self._lock:
            return len(self._queue)

    def clear(self):
        """Drop all queued metrics and forget the latest."""
        with self._lock:
            self._queue.clear()
            self._last = None
            self._dropped = 0
