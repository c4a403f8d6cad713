from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import ScanStatus, UserType


@dataclass(frozen=True)
class AttendanceLog:
    """Domain entity: one attendance session (login/logout) within a day."""

    log_id: int
    user_id: str
    log_date: date
    login_time: time
    logout_time: Optional[time] = None

    @property
    def is_open(self) -> bool:
        return self.logout_time is None


@dataclass(frozen=True)
class DashboardRow:
    user_id: str
    user_name: str
    login_time: time
    logout_time: Optional[time]


@dataclass(frozen=True)
class BranchCount:
    degree: str
    branch_code: str
    visit_count: int


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read model for reports and exports (shaped for the query)."""

    user_id: str
    user_name: str
    user_type: UserType
    log_date: date
    login_time: time
    logout_time: Optional[time]
    degree: Optional[str] = None
    branch_code: Optional[str] = None
    year: Optional[str] = None
    department_name: Optional[str] = None
    designation: Optional[str] = None


@dataclass(frozen=True)
class ScanEvent:
    """Payload of the `scan_event` broadcast."""

    uid: str
    status: ScanStatus
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    time: Optional[str] = None
    message: Optional[str] = None

    def to_payload(self) -> dict:
        payload = {k: v for k, v in asdict(self).items() if v is not None}
        payload["status"] = self.status.value
        return payload
