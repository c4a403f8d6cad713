from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.model import AttendanceReportRow
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_hhmm
from ..core.constants import DATE_FORMAT, TIME_FORMAT
from ..core.enums import UserType
from ..core.exceptions import ValidationError
from .calculator.base import DurationCalculator
from .calculator.standard_calculator import StandardDurationCalculator

REPORT_FIELDS = [
    "log_date",
    "user_id",
    "user_name",
    "user_type",
    "group",
    "detail",
    "login_time",
    "logout_time",
    "duration",
]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


def _group_of(r: AttendanceReportRow) -> str:
    if r.user_type == UserType.STUDENT:
        return f"{r.degree or '-'} {r.branch_code or ''}".strip()
    return r.department_name or "-"


def _detail_of(r: AttendanceReportRow) -> str:
    if r.user_type == UserType.STUDENT:
        return f"Year {r.year}" if r.year else "-"
    return r.designation or "-"


class AttendanceReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        calculator: Optional[DurationCalculator] = None,
    ):
        self._attendance = attendance
        self._calculator = calculator or StandardDurationCalculator()

    def build_attendance_report(
        self,
        *,
        start: date,
        end: date,
        user_type: Optional[UserType] = None,
        user_id: Optional[str] = None,
    ) -> ReportData:
        if end < start:
            raise ValidationError("End date must not be before start date.")

        query_rows = self._attendance.get_report_rows(
            start_date=start, end_date=end, user_type=user_type, user_id=user_id
        )

        summary_map: dict[str, dict] = {}
        out_rows: list[dict] = []

        for r in query_rows:
            minutes = self._calculator.session_minutes(r)

            out_rows.append(
                {
                    "log_date": r.log_date.strftime(DATE_FORMAT),
                    "user_id": r.user_id,
                    "user_name": r.user_name,
                    "user_type": r.user_type.value,
                    "group": _group_of(r),
                    "detail": _detail_of(r),
                    "login_time": r.login_time.strftime(TIME_FORMAT),
                    "logout_time": r.logout_time.strftime(TIME_FORMAT) if r.logout_time else "-",
                    "duration": format_hhmm(minutes),
                }
            )

            s = summary_map.get(r.user_id)
            if not s:
                s = {
                    "user_id": r.user_id,
                    "user_name": r.user_name,
                    "user_type": r.user_type.value,
                    "visits": 0,
                    "days": set(),
                    "total_minutes": 0,
                }
                summary_map[r.user_id] = s
            s["visits"] += 1
            s["days"].add(r.log_date)
            s["total_minutes"] += minutes

        summary = [
            {
                "user_id": s["user_id"],
                "user_name": s["user_name"],
                "user_type": s["user_type"],
                "visits": s["visits"],
                "days_present": len(s["days"]),
                "total_minutes": s["total_minutes"],
                "total_time": format_hhmm(s["total_minutes"]),
            }
            for s in summary_map.values()
        ]
        summary.sort(key=lambda x: (-x["total_minutes"], x["user_id"]))
        return ReportData(rows=out_rows, summary=summary)
