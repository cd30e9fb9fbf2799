"""Headless presentation surface."""

from __future__ import annotations

from enum import Enum
from typing import Any

from groundctl.core.model import ButtonState, PickerState, SelectorState


class Surface:
    """Named widgets holding the latest state projected onto them."""

    def __init__(self) -> None:
        self._widgets: dict[str, Any] = {}

    def set(self, widget: str, state: Any) -> None:
        self._widgets[widget] = state

    def get(self, widget: str, default: Any = None) -> Any:
        return self._widgets.get(widget, default)

    def __getitem__(self, widget: str) -> Any:
        return self._widgets[widget]

    def __contains__(self, widget: str) -> bool:
        return widget in self._widgets

    def render(self) -> tuple[str, ...]:
        return tuple(f"{widget}: {format_widget(state)}" for widget, state in sorted(self._widgets.items()))


def format_widget(state: Any) -> str:
    if state is None:
        return "-"
    if isinstance(state, bool):
        return str(state).lower()
    if isinstance(state, str):
        return state if state else '""'
    if isinstance(state, Enum):
        return str(state.value)
    if isinstance(state, ButtonState):
        title = state.title or "-"
        return f"[{title}] {'enabled' if state.enabled else 'disabled'}"
    if isinstance(state, SelectorState):
        options = " | ".join(
            f"*{option}*" if index == state.index else option for index, option in enumerate(state.options)
        )
        return options if state.enabled else f"{options} (disabled)"
    if isinstance(state, PickerState):
        if not state.options:
            return "(empty)"
        return ", ".join(f"*{option}*" if option == state.selected else option for option in state.options)
    return str(state)
