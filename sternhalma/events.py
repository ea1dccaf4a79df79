"""
Minimal synchronous publish/subscribe registry for board-state changes.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

PIECE_MOVED = "pieceMoved"
TURN_CHANGED = "turnChanged"
STATE_RESET = "stateReset"

Listener = Callable[[Dict[str, Any]], None]


class EventEmitter:
    """Named events with plain callback subscribers.

    Emission is synchronous and in-process.  No ordering is promised between
    several subscribers of the same event.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}

    def subscribe(self, event: str, callback: Listener) -> None:
        callbacks = self._listeners.setdefault(event, [])
        if callback not in callbacks:
            callbacks.append(callback)

    def unsubscribe(self, event: str, callback: Listener) -> None:
        callbacks = self._listeners.get(event)
        if callbacks and callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event: str, data: Dict[str, Any]) -> None:
        callbacks = list(self._listeners.get(event, ()))
        logger.debug("emit %s to %d listener(s)", event, len(callbacks))
        for callback in callbacks:
            callback(data)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))
