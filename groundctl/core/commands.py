"""Requests issued in response to UI actions.

Requests are fire-and-forget: the return value only tells whether the SDK
rejected them on the spot. Their effect is observed through the next
reference delivery, never read back here.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from groundctl.core.model import Camera2Param
from groundctl.core.projector import select_first

LOGGER = logging.getLogger(__name__)


def edit_config(config: Any, changes: Mapping[Camera2Param, Any]) -> bool:
    """Draft ``changes`` on ``config``, auto-complete and commit.

    Parameters the configuration does not offer, and values a parameter does
    not support, are skipped without error; when none is left nothing is
    committed.
    """
    editor = config.edit(from_scratch=False)
    applied = 0
    for param, value in changes.items():
        editable = editor.get(param)
        if editable is None:
            LOGGER.debug("Camera configuration has no '%s' parameter, skipping", param.value)
            continue
        if value not in editable.supported_values:
            LOGGER.debug("Camera parameter '%s' does not support %r, skipping", param.value, value)
            continue
        editable.value = value
        applied += 1

    if not applied:
        return False
    editor.auto_complete()
    return editor.commit()


def take_off_or_land(itf: Any) -> bool:
    if itf is None:
        return False
    action: Callable[[], bool] | None = select_first(
        ((itf.can_take_off, itf.take_off), (itf.can_land, itf.land))
    )
    return action() if action is not None else False
