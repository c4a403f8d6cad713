from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class EventBroadcaster(Protocol):
    def emit(self, event: str, payload: dict) -> None:
        raise NotImplementedError


class SocketIOBroadcaster(EventBroadcaster):
    """Push events to every connected dashboard."""

    def __init__(self, socketio):
        self._socketio = socketio

    def emit(self, event: str, payload: dict) -> None:
        logger.debug("emit %s %s", event, payload)
        self._socketio.emit(event, payload)
