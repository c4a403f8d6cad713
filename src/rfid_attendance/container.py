from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from .attendance.auto_logout import AutoLogoutService
from .attendance.broadcast import EventBroadcaster
from .attendance.debounce import DuplicateScanFilter
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import ScanService
from .cards.mysql_card_repository import MySQLCardRepository
from .cards.service import CardRegistrationService
from .core.constants import DEFAULT_AUTO_LOGOUT_TIME, DEFAULT_SCAN_TIMEOUT_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import AttendanceReportService
from .users.mysql_department_repository import MySQLDepartmentRepository, MySQLProgramRepository
from .users.mysql_user_repository import MySQLAdminRepository, MySQLUserRepository
from .users.service import AuthService, RosterService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    admins_repo: MySQLAdminRepository
    programs_repo: MySQLProgramRepository
    departments_repo: MySQLDepartmentRepository
    cards_repo: MySQLCardRepository
    attendance_repo: MySQLAttendanceRepository

    auth_service: AuthService
    roster_service: RosterService
    card_service: CardRegistrationService
    scan_service: ScanService
    auto_logout_service: AutoLogoutService
    report_service: AttendanceReportService


def build_container(
    *,
    db_config: dict,
    broadcaster: EventBroadcaster,
    scan_timeout_seconds: float = DEFAULT_SCAN_TIMEOUT_SECONDS,
    auto_logout_time: time = DEFAULT_AUTO_LOGOUT_TIME,
    timezone: Optional[str] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    users_repo = MySQLUserRepository(conn)
    admins_repo = MySQLAdminRepository(conn)
    programs_repo = MySQLProgramRepository(conn)
    departments_repo = MySQLDepartmentRepository(conn)
    cards_repo = MySQLCardRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    auth_service = AuthService(admins_repo)
    roster_service = RosterService(users_repo, programs_repo, departments_repo)
    card_service = CardRegistrationService(cards_repo)
    scan_service = ScanService(
        attendance_repo,
        cards_repo,
        users_repo,
        broadcaster,
        scan_filter=DuplicateScanFilter(scan_timeout_seconds),
        timezone=timezone,
    )
    auto_logout_service = AutoLogoutService(attendance_repo, logout_time=auto_logout_time, timezone=timezone)
    report_service = AttendanceReportService(attendance_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        admins_repo=admins_repo,
        programs_repo=programs_repo,
        departments_repo=departments_repo,
        cards_repo=cards_repo,
        attendance_repo=attendance_repo,
        auth_service=auth_service,
        roster_service=roster_service,
        card_service=card_service,
        scan_service=scan_service,
        auto_logout_service=auto_logout_service,
        report_service=report_service,
    )
