from __future__ import annotations

import pytest
import serial

from rfid_attendance.reader.serial_reader import SerialCardReader, parse_uid_line


class FakeSerial:
    """Replays a fixed list of lines, then fails like an unplugged device."""

    def __init__(self, lines):
        self._lines = list(lines)
        self.closed = False
        self.opened_with = None

    def __call__(self, port, baudrate, timeout=None):
        self.opened_with = (port, baudrate, timeout)
        return self

    def readline(self):
        if self._lines:
            return self._lines.pop(0)
        raise serial.SerialException("device disconnected")

    def close(self):
        self.closed = True


@pytest.mark.parametrize(
    "line, expected",
    [
        ("RFID Tag UID: 04 A3 5B 1A\r\n", "04 A3 5B 1A"),
        ("RFID Tag UID:04A35B1A", "04A35B1A"),
        ("RFID Tag UID: AA:BB:CC", "AA:BB:CC"),
        ("RFID Tag UID:   ", None),
        ("Reader ready", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_uid_line(line, expected):
    assert parse_uid_line(line) == expected


def test_reader_submits_each_uid_and_stops_on_port_error():
    seen = []
    port = FakeSerial(
        [
            b"MFRC522 firmware v2\r\n",
            b"RFID Tag UID: 04 A3 5B 1A\r\n",
            b"",
            b"RFID Tag UID: 04 11 22 33\r\n",
        ]
    )
    reader = SerialCardReader("COM14", seen.append, serial_factory=port, read_timeout=0.5)

    reader.run()

    assert seen == ["04 A3 5B 1A", "04 11 22 33"]
    assert port.opened_with == ("COM14", 9600, 0.5)
    assert port.closed is True


def test_line_split_across_reads_is_joined():
    seen = []
    port = FakeSerial([b"RFID Tag UID: 04 A3", b"", b" 5B 1A\r\n", b"RFID Tag UID: 04 11 22 33\r\n"])

    SerialCardReader("COM14", seen.append, serial_factory=port).run()

    assert seen == ["04 A3 5B 1A", "04 11 22 33"]


def test_unterminated_tail_is_not_submitted():
    seen = []
    port = FakeSerial([b"RFID Tag UID: 04 A3 5B 1A\r\n", b"RFID Tag UID: 04 11"])

    SerialCardReader("COM14", seen.append, serial_factory=port).run()

    assert seen == ["04 A3 5B 1A"]


def test_runaway_bytes_without_newline_are_dropped():
    seen = []
    port = FakeSerial([b"x" * 300, b"RFID Tag UID: 04 A3 5B 1A\r\n"])

    SerialCardReader("COM14", seen.append, serial_factory=port).run()

    assert seen == ["04 A3 5B 1A"]


def test_reader_keeps_going_when_handler_fails(caplog):
    calls = []

    def handler(uid):
        calls.append(uid)
        if len(calls) == 1:
            raise RuntimeError("db down")

    port = FakeSerial([b"RFID Tag UID: A\r\n", b"RFID Tag UID: B\r\n"])

    SerialCardReader("COM14", handler, serial_factory=port).run()

    assert calls == ["A", "B"]
    assert "Scan handler failed for A" in caplog.text


def test_reader_gives_up_quietly_when_port_cannot_be_opened(caplog):
    def factory(*args, **kwargs):
        raise serial.SerialException("could not open port COM99")

    reader = SerialCardReader("COM99", lambda uid: None, serial_factory=factory)

    reader.run()

    assert "Could not connect to card reader on port COM99" in caplog.text


def test_start_runs_on_a_daemon_thread():
    seen = []
    reader = SerialCardReader("COM14", seen.append, serial_factory=FakeSerial([b"RFID Tag UID: X\r\n"]))

    reader.start()
    reader._thread.join(timeout=2)

    assert reader._thread.daemon is True
    assert seen == ["X"]
    assert reader.is_running is False
