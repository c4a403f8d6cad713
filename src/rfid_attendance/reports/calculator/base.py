from __future__ import annotations

from abc import ABC, abstractmethod

from ...attendance.model import AttendanceReportRow


class DurationCalculator(ABC):
    """Calculator interface (Strategy Pattern for time spent per session)."""

    @abstractmethod
    def session_minutes(self, row: AttendanceReportRow) -> int:
        raise NotImplementedError
