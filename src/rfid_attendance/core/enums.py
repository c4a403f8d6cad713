from __future__ import annotations

from enum import Enum


class UserType(str, Enum):
    """Kind of user on the attendance roster."""

    STUDENT = "student"
    FACULTY = "faculty"


class ScanStatus(str, Enum):
    """Outcome of one card scan, sent with the `scan_event` broadcast."""

    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    IGNORED = "IGNORED"
    UNREGISTERED = "UNREGISTERED"
    NO_DETAILS = "NO_DETAILS"
    ERROR = "ERROR"


class SocketEvent(str, Enum):
    SCAN = "scan_event"
    COUNTS = "counts_update"
