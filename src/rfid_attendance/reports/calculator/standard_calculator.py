from __future__ import annotations

from datetime import datetime

from .base import DurationCalculator
from ...attendance.model import AttendanceReportRow


class StandardDurationCalculator(DurationCalculator):
    """Standard rule: logout - login, open sessions count as 0, never below 0."""

    def session_minutes(self, row: AttendanceReportRow) -> int:
        if not row.logout_time:
            return 0
        login = datetime.combine(row.log_date, row.login_time)
        logout = datetime.combine(row.log_date, row.logout_time)
        minutes = int((logout - login).total_seconds() // 60)
        return max(minutes, 0)
