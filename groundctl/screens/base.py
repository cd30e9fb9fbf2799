"""Plumbing shared by the sample screens."""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial
from typing import Any, ClassVar

from groundctl.core.errors import ScreenResolutionError
from groundctl.core.model import AutoConnectionState, FacilityKind, PeripheralKind
from groundctl.core.projector import connection_label
from groundctl.core.reference import Ref
from groundctl.core.session import ReferenceGroup, SessionManager
from groundctl.core.surface import Surface
from groundctl.sdk.base import GroundSdk

LOGGER = logging.getLogger(__name__)


class Screen:
    """A screen observing the SDK and projecting what it sees on a surface.

    ``open`` subscribes to the auto-connection facility; each change of the
    current drone or remote control is routed to the screen's
    ``SessionManager`` instances. ``close`` releases every reference.
    """

    name: ClassVar[str] = ""
    title: ClassVar[str] = ""
    actions: ClassVar[tuple[str, ...]] = ()
    selectors: ClassVar[tuple[str, ...]] = ()

    def __init__(self, sdk: GroundSdk, surface: Surface | None = None) -> None:
        self.sdk = sdk
        self.surface = surface or Surface()
        self._facility_ref: Ref[Any] | None = None
        self._sessions: list[SessionManager[Any]] = []
        self._opened = False

    @property
    def opened(self) -> bool:
        return self._opened

    def open(self) -> None:
        if self._opened:
            return
        self._opened = True
        self.reset_ui()
        self._facility_ref = self.sdk.get_facility(FacilityKind.AUTO_CONNECTION, self._on_auto_connection)

    def close(self) -> None:
        if not self._opened:
            return
        self._opened = False
        if self._facility_ref is not None:
            self._facility_ref.release()
            self._facility_ref = None
        for session in self._sessions:
            session.close()
        self.reset_ui()

    def live_count(self) -> int:
        """Number of live references this screen currently holds."""
        facility = 1 if self._facility_ref is not None and not self._facility_ref.released else 0
        return facility + sum(session.live_count for session in self._sessions)

    def press(self, action: str) -> None:
        if action not in self.actions:
            available = ", ".join(self.actions) or "none"
            raise ScreenResolutionError(
                f"Screen '{self.name}' has no action '{action}'. Available: {available}"
            )
        LOGGER.debug("Screen %s: press %s", self.name, action)
        getattr(self, f"on_{action}")()

    def select(self, selector: str, index: int) -> None:
        if selector not in self.selectors:
            available = ", ".join(self.selectors) or "none"
            raise ScreenResolutionError(
                f"Screen '{self.name}' has no selector '{selector}'. Available: {available}"
            )
        LOGGER.debug("Screen %s: select %s=%d", self.name, selector, index)
        getattr(self, f"on_select_{selector}")(index)

    def reset_ui(self) -> None:
        """Project the cleared state of every widget."""

    def on_auto_connection(self, auto_connection: Any) -> None:
        """Route the current drone and remote control to the sessions."""

    def add_session(
        self,
        name: str,
        *,
        start: Callable[[Any, ReferenceGroup], None],
        reset: Callable[[], None] | None = None,
    ) -> SessionManager[Any]:
        session: SessionManager[Any] = SessionManager(name, start=start, reset=reset)
        self._sessions.append(session)
        return session

    def monitor_state(self, device: Any, refs: ReferenceGroup, widget: str) -> None:
        refs["state"] = device.get_state(lambda state: self.surface.set(widget, connection_label(state)))

    def start_video_stream(self, drone: Any, refs: ReferenceGroup) -> None:
        refs["stream_server"] = drone.get_peripheral(
            PeripheralKind.STREAM_SERVER, partial(self._on_stream_server, refs)
        )

    def _on_stream_server(self, refs: ReferenceGroup, stream_server: Any) -> None:
        if stream_server is None:
            return
        stream_server.enabled = True
        if "live_stream" not in refs:
            refs["live_stream"] = stream_server.live(self._on_live_stream)

    def _on_live_stream(self, stream: Any) -> None:
        self.surface.set("stream", stream)
        if stream is not None:
            stream.play()

    def _on_auto_connection(self, auto_connection: Any) -> None:
        if auto_connection is None:
            return
        if auto_connection.state is not AutoConnectionState.STARTED:
            auto_connection.start()
        self.on_auto_connection(auto_connection)
