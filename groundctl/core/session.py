"""Binding of the current entity and the references created against it."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any, Generic, Protocol, TypeVar

from groundctl.core.reference import Ref

LOGGER = logging.getLogger(__name__)


class Identified(Protocol):
    @property
    def uid(self) -> str: ...


E = TypeVar("E", bound=Identified)


class SessionState(Enum):
    UNBOUND = "unbound"
    BOUND = "bound"


class ReferenceGroup:
    """References owned by one bound entity, kept in named slots.

    Assigning a slot releases the reference previously held there. Once the
    group is released, any reference assigned to it is released on arrival, so
    callbacks still running for an unbound entity cannot leak subscriptions.
    """

    def __init__(self, owner: str) -> None:
        self.owner = owner
        self._slots: dict[str, Ref[Any]] = {}
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    @property
    def live_count(self) -> int:
        return sum(1 for ref in self._slots.values() if not ref.released)

    def __contains__(self, slot: str) -> bool:
        return slot in self._slots

    def __setitem__(self, slot: str, ref: Ref[Any]) -> None:
        if self._released:
            LOGGER.debug("Group %s already released, dropping %s", self.owner, slot)
            ref.release()
            return
        previous = self._slots.get(slot)
        self._slots[slot] = ref
        if previous is not None and previous is not ref:
            previous.release()

    def get(self, slot: str) -> Ref[Any] | None:
        return self._slots.get(slot)

    def value(self, slot: str) -> Any:
        ref = self._slots.get(slot)
        return ref.value if ref is not None else None

    def release_all(self) -> None:
        self._released = True
        refs = list(self._slots.values())
        self._slots.clear()
        for ref in refs:
            ref.release()
        LOGGER.debug("Released %d reference(s) of %s", len(refs), self.owner)


class SessionManager(Generic[E]):
    """Tracks the currently bound entity of one kind (drone, remote control).

    ``update`` is fed every value of the upstream "current entity"
    notification. A change of uid fully tears down the old binding
    (references released, then ``reset`` called) before ``start`` creates the
    references for the new entity.
    """

    def __init__(
        self,
        name: str,
        *,
        start: Callable[[E, ReferenceGroup], None],
        reset: Callable[[], None] | None = None,
    ) -> None:
        self.name = name
        self._start = start
        self._reset = reset
        self._entity: E | None = None
        self._group: ReferenceGroup | None = None

    @property
    def state(self) -> SessionState:
        return SessionState.BOUND if self._entity is not None else SessionState.UNBOUND

    @property
    def entity(self) -> E | None:
        return self._entity

    @property
    def uid(self) -> str | None:
        return self._entity.uid if self._entity is not None else None

    @property
    def group(self) -> ReferenceGroup | None:
        return self._group

    @property
    def live_count(self) -> int:
        return self._group.live_count if self._group is not None else 0

    def value(self, slot: str) -> Any:
        return self._group.value(slot) if self._group is not None else None

    def update(self, entity: E | None) -> bool:
        """Bind ``entity``; returns whether the binding changed."""
        new_uid = entity.uid if entity is not None else None
        if new_uid == self.uid:
            return False

        if self._entity is not None:
            self._unbind()
            if self._reset is not None:
                self._reset()

        if entity is not None:
            self._bind(entity)
        return True

    def close(self) -> None:
        if self._entity is not None:
            self._unbind()

    def _bind(self, entity: E) -> None:
        group = ReferenceGroup(f"{self.name}:{entity.uid}")
        self._entity = entity
        self._group = group
        LOGGER.debug("Session %s bound to %s", self.name, entity.uid)
        self._start(entity, group)

    def _unbind(self) -> None:
        group, uid = self._group, self.uid
        self._entity = None
        self._group = None
        if group is not None:
            group.release_all()
        LOGGER.debug("Session %s unbound from %s", self.name, uid)
