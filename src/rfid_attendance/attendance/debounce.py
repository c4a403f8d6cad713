from __future__ import annotations

import threading
import time
from typing import Callable


class DuplicateScanFilter:
    """Suppress repeated reads of the same card.

    A UID is accepted at most once per `window_seconds`; the window starts
    when the scan is accepted. Safe to share between the serial reader thread
    and request handlers.
    """

    def __init__(self, window_seconds: float = 5, *, clock: Callable[[], float] = time.monotonic):
        self._window = float(window_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._expires_at: dict[str, float] = {}

    @property
    def window_seconds(self) -> float:
        return self._window

    def try_accept(self, uid: str) -> bool:
        now = self._clock()
        with self._lock:
            self._purge(now)
            if uid in self._expires_at:
                return False
            self._expires_at[uid] = now + self._window
            return True

    def _purge(self, now: float) -> None:
        expired = [uid for uid, until in self._expires_at.items() if until <= now]
        for uid in expired:
            del self._expires_at[uid]
