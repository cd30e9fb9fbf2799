"""Observable references: releasable subscriptions to a value over time.

An ``Observable`` holds the latest known value of one facet of an entity
(a device state, a peripheral, an instrument). ``Observable.observe``
returns a ``Ref`` whose callback receives the current value immediately and
every later value published on the observable, in publication order, through
the owning ``SerialDispatcher``. ``None`` means the facet is unavailable.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

from groundctl.core.dispatch import SerialDispatcher

T = TypeVar("T")
LOGGER = logging.getLogger(__name__)


class Ref(Generic[T]):
    """Handle on a single subscription.

    Released references hold no value and never call their observer again,
    even for deliveries that were already queued when ``release`` ran.
    """

    def __init__(
        self,
        observer: Callable[[T | None], None],
        *,
        name: str = "",
        on_release: Callable[[Ref[T]], None] | None = None,
    ) -> None:
        self.name = name
        self._observer: Callable[[T | None], None] | None = observer
        self._on_release = on_release
        self._value: T | None = None
        self._released = False
        # Re-entrant: an observer may release its own reference.
        self._lock = threading.RLock()

    @property
    def value(self) -> T | None:
        with self._lock:
            return self._value

    @property
    def released(self) -> bool:
        with self._lock:
            return self._released

    def release(self) -> None:
        with self._lock:
            if self._released:
                return
            self._released = True
            self._value = None
            self._observer = None
            on_release, self._on_release = self._on_release, None
        LOGGER.debug("Released reference %s", self.name or hex(id(self)))
        if on_release is not None:
            on_release(self)

    def _deliver(self, value: T | None) -> None:
        with self._lock:
            if self._released or self._observer is None:
                return
            self._value = value
            self._observer(value)

    def __repr__(self) -> str:
        state = "released" if self.released else "live"
        return f"<Ref {self.name or '?'} {state}>"


class Observable(Generic[T]):
    """Latest value of one facet, fanned out to its live references."""

    def __init__(
        self,
        dispatcher: SerialDispatcher,
        value: T | None = None,
        *,
        name: str = "",
    ) -> None:
        self.name = name
        self._dispatcher = dispatcher
        self._value = value
        self._refs: list[Ref[T]] = []
        self._lock = threading.Lock()

    @property
    def value(self) -> T | None:
        with self._lock:
            return self._value

    @property
    def observer_count(self) -> int:
        with self._lock:
            return len(self._refs)

    def observe(self, on_change: Callable[[T | None], None]) -> Ref[T]:
        """Subscribe ``on_change``; it is called right away with the current value."""
        ref: Ref[T] = Ref(on_change, name=self.name, on_release=self._detach)
        with self._lock:
            self._refs.append(ref)
            current = self._value
        ref._deliver(current)
        return ref

    def publish(self, value: T | None) -> None:
        """Record ``value`` and queue its delivery to every live reference."""
        with self._lock:
            self._value = value
            refs = list(self._refs)
        for ref in refs:
            self._dispatcher.post(ref._deliver, value)

    def _detach(self, ref: Ref[T]) -> None:
        with self._lock:
            if ref in self._refs:
                self._refs.remove(ref)
