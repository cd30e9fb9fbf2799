from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from groundctl.core.dispatch import SerialDispatcher
from groundctl.core.reference import Observable, Ref
from groundctl.core.session import ReferenceGroup, SessionManager, SessionState


@dataclass
class FakeEntity:
    uid: str
    dispatcher: SerialDispatcher
    facets: dict[str, Observable[Any]] = field(default_factory=dict)

    def observe(self, facet: str, on_change) -> Ref[Any]:
        if facet not in self.facets:
            self.facets[facet] = Observable(self.dispatcher, f"{self.uid}.{facet}")
        return self.facets[facet].observe(on_change)

    def observer_count(self) -> int:
        return sum(observable.observer_count for observable in self.facets.values())


class Recorder:
    def __init__(self) -> None:
        self.events: list[str] = []
        self.values: dict[str, Any] = {}

    def start(self, entity: FakeEntity, refs: ReferenceGroup) -> None:
        self.events.append(f"start:{entity.uid}")
        for facet in ("state", "battery", "camera"):
            refs[facet] = entity.observe(facet, lambda value, facet=facet: self.values.__setitem__(facet, value))

    def reset(self) -> None:
        self.events.append("reset")
        self.values.clear()


def _manager(recorder: Recorder) -> SessionManager[FakeEntity]:
    return SessionManager("drone", start=recorder.start, reset=recorder.reset)


def test_initial_state_is_unbound() -> None:
    manager = _manager(Recorder())
    assert manager.state is SessionState.UNBOUND
    assert manager.uid is None
    assert manager.live_count == 0


def test_binding_creates_references() -> None:
    dispatcher = SerialDispatcher()
    recorder = Recorder()
    manager = _manager(recorder)
    entity = FakeEntity("A", dispatcher)

    assert manager.update(entity)

    assert manager.state is SessionState.BOUND
    assert manager.uid == "A"
    assert manager.live_count == 3
    assert entity.observer_count() == 3
    assert recorder.values == {"state": "A.state", "battery": "A.battery", "camera": "A.camera"}


def test_same_uid_is_a_no_op() -> None:
    dispatcher = SerialDispatcher()
    recorder = Recorder()
    manager = _manager(recorder)
    manager.update(FakeEntity("A", dispatcher))

    assert not manager.update(FakeEntity("A", dispatcher))
    assert recorder.events == ["start:A"]


def test_entity_change_releases_old_references_before_binding_new_ones() -> None:
    dispatcher = SerialDispatcher()
    recorder = Recorder()
    manager = _manager(recorder)
    first = FakeEntity("A", dispatcher)
    second = FakeEntity("B", dispatcher)
    manager.update(first)
    old_refs = [manager.group.get(slot) for slot in ("state", "battery", "camera")]

    manager.update(second)

    assert recorder.events == ["start:A", "reset", "start:B"]
    assert all(ref.released for ref in old_refs)
    assert first.observer_count() == 0
    assert second.observer_count() == 3
    assert manager.uid == "B"


def test_old_entity_notifications_are_not_delivered_after_change() -> None:
    dispatcher = SerialDispatcher()
    recorder = Recorder()
    manager = _manager(recorder)
    first = FakeEntity("A", dispatcher)
    manager.update(first)

    first.facets["battery"].publish(12)
    manager.update(FakeEntity("B", dispatcher))
    dispatcher.run_pending()

    assert recorder.values["battery"] == "B.battery"


def test_none_unbinds_and_resets() -> None:
    dispatcher = SerialDispatcher()
    recorder = Recorder()
    manager = _manager(recorder)
    entity = FakeEntity("A", dispatcher)
    manager.update(entity)

    assert manager.update(None)

    assert manager.state is SessionState.UNBOUND
    assert recorder.events == ["start:A", "reset"]
    assert recorder.values == {}
    assert entity.observer_count() == 0


def test_none_while_unbound_does_not_reset() -> None:
    recorder = Recorder()
    manager = _manager(recorder)

    assert not manager.update(None)
    assert recorder.events == []


def test_rapid_churn_leaves_only_the_last_entity_referenced() -> None:
    dispatcher = SerialDispatcher()
    recorder = Recorder()
    manager = _manager(recorder)
    entities = [FakeEntity(uid, dispatcher) for uid in ("A", "B", "A", "C")]
    entities.insert(2, None)

    for entity in entities:
        manager.update(entity)
    dispatcher.run_pending()

    assert manager.uid == "C"
    assert sum(e.observer_count() for e in entities if e is not None) == 3
    assert entities[-1].observer_count() == 3


def test_close_returns_to_unbound_without_reset() -> None:
    dispatcher = SerialDispatcher()
    recorder = Recorder()
    manager = _manager(recorder)
    entity = FakeEntity("A", dispatcher)
    manager.update(entity)

    manager.close()

    assert manager.state is SessionState.UNBOUND
    assert entity.observer_count() == 0
    assert recorder.events == ["start:A"]


def test_reference_created_by_stale_callback_is_released_immediately() -> None:
    dispatcher = SerialDispatcher()
    entity = FakeEntity("A", dispatcher)
    group = ReferenceGroup("drone:A")
    group.release_all()

    group["late"] = entity.observe("camera", lambda value: None)

    assert "late" not in group
    assert entity.observer_count() == 0


def test_reassigning_a_slot_releases_the_previous_reference() -> None:
    dispatcher = SerialDispatcher()
    entity = FakeEntity("A", dispatcher)
    group = ReferenceGroup("drone:A")
    first = entity.observe("stream", lambda value: None)
    second = entity.observe("stream", lambda value: None)

    group["stream"] = first
    group["stream"] = second

    assert first.released
    assert not second.released
    assert group.live_count == 1
    assert group.value("stream") == "A.stream"
