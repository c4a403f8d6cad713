"""Serial-line adapter for the RFID reader board.

The board prints one line per event, terminated by CRLF. Card reads look like::

    RFID Tag UID: 04 A3 5B 1A

Everything else (boot banners, debug output) is ignored.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

import serial

from ..core.constants import DEFAULT_SERIAL_BAUDRATE, SCAN_LINE_PREFIX

logger = logging.getLogger(__name__)

# Reader lines are short; anything longer without a newline is line noise.
MAX_LINE_BYTES = 256


def parse_uid_line(line: str) -> Optional[str]:
    """Return the UID carried by a reader line, or None for any other line."""

    line = (line or "").strip()
    if not line.startswith(SCAN_LINE_PREFIX):
        return None
    uid = line.split(":", 1)[1].strip()
    return uid or None


class SerialCardReader:
    def __init__(
        self,
        port: str,
        on_uid: Callable[[str], Any],
        *,
        baudrate: int = DEFAULT_SERIAL_BAUDRATE,
        serial_factory: Callable[..., Any] = serial.Serial,
        read_timeout: float = 1.0,
    ):
        self._port = port
        self._baudrate = int(baudrate)
        self._on_uid = on_uid
        self._serial_factory = serial_factory
        self._read_timeout = read_timeout
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._serial = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, name="rfid-serial-reader", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._serial is not None:
            try:
                self._serial.close()
            except serial.SerialException:
                logger.debug("Serial port %s already closed", self._port)

    def open(self):
        logger.info("Attempting to connect to card reader on %s...", self._port)
        self._serial = self._serial_factory(self._port, self._baudrate, timeout=self._read_timeout)
        logger.info("Serial port %s opened.", self._port)
        return self._serial

    def run(self) -> None:
        """Read lines until stopped or the port fails. Blocks the calling thread.

        `readline` gives up after `read_timeout`, possibly in the middle of a
        line, so bytes are buffered until the terminating newline arrives.
        """

        try:
            port = self.open()
        except (serial.SerialException, OSError) as e:
            logger.error("Could not connect to card reader on port %s: %s", self._port, e)
            return

        pending = b""
        try:
            while not self._stop.is_set():
                try:
                    raw = port.readline()
                except (serial.SerialException, OSError) as e:
                    if not self._stop.is_set():
                        logger.error("SerialPort Error: %s", e)
                    break
                if not raw:
                    continue
                pending += raw
                if pending.endswith(b"\n"):
                    self.process_line(pending.decode("utf-8", errors="replace"))
                    pending = b""
                elif len(pending) > MAX_LINE_BYTES:
                    logger.warning("Dropping %d bytes without a line break from %s", len(pending), self._port)
                    pending = b""
        finally:
            if pending:
                logger.debug("Discarding incomplete line from %s: %r", self._port, pending)
            try:
                port.close()
            except (serial.SerialException, OSError) as e:
                logger.debug("Closing %s failed: %s", self._port, e)
            logger.info("Card reader on %s stopped.", self._port)

    def process_line(self, line: str) -> Optional[str]:
        uid = parse_uid_line(line)
        if uid is None:
            if line.strip():
                logger.debug("reader: %s", line.strip())
            return None

        try:
            self._on_uid(uid)
        except Exception:
            # Keep reading; one bad scan must not take the reader down.
            logger.exception("Scan handler failed for %s", uid)
        return uid
