"""Serial delivery context for reference callbacks."""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable
from typing import Any

LOGGER = logging.getLogger(__name__)


class SerialDispatcher:
    """FIFO queue of callbacks executed one at a time.

    Any thread may ``post``; callbacks only run inside ``run_pending``, which
    the owner of the delivery context (a UI loop, a test, the scenario runner)
    calls. Nested ``run_pending`` calls made from a callback return at once so
    callbacks never interleave.
    """

    def __init__(self) -> None:
        self._queue: deque[tuple[Callable[..., Any], tuple[Any, ...]]] = deque()
        self._lock = threading.Lock()
        self._running = False

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._queue)

    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        with self._lock:
            self._queue.append((callback, args))

    def run_pending(self, limit: int | None = None) -> int:
        """Run queued callbacks, including ones posted meanwhile, until idle."""
        with self._lock:
            if self._running:
                return 0
            self._running = True

        executed = 0
        try:
            while limit is None or executed < limit:
                with self._lock:
                    if not self._queue:
                        break
                    callback, args = self._queue.popleft()
                callback(*args)
                executed += 1
        finally:
            with self._lock:
                self._running = False

        if executed:
            LOGGER.debug("Delivered %d queued callback(s)", executed)
        return executed
