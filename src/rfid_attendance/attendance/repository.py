from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import UserType
from .model import AttendanceLog, AttendanceReportRow, BranchCount, DashboardRow


class AttendanceRepository(Protocol):
    def find_open_session(self, user_id: str, log_date: date) -> Optional[AttendanceLog]:
        raise NotImplementedError

    def open_session(self, *, user_id: str, log_date: date, login_time: time) -> int:
        raise NotImplementedError

    def close_session(self, *, log_id: int, logout_time: time) -> bool:
        raise NotImplementedError

    def list_for_date(self, log_date: date) -> Sequence[DashboardRow]:
        """Rows of the day, most recent login first."""

        raise NotImplementedError

    def branch_counts(self, log_date: date) -> Sequence[BranchCount]:
        """Student visits of the day grouped by degree and branch code."""

        raise NotImplementedError

    def close_open_sessions_on(self, log_date: date, *, logout_time: time) -> int:
        raise NotImplementedError

    def close_open_sessions_before(self, log_date: date, *, logout_time: time) -> int:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        user_type: Optional[UserType] = None,
        user_id: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
