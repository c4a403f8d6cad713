from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..core.enums import UserType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_time, db_cursor, fetchall, fetchone
from .model import AttendanceLog, AttendanceReportRow, BranchCount, DashboardRow
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_open_session(self, user_id: str, log_date: date) -> Optional[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT log_id, user_id, log_date, login_time, logout_time
                FROM attendance_log
                WHERE user_id=%s AND log_date=%s AND logout_time IS NULL
                LIMIT 1
                """,
                (user_id, log_date),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AttendanceLog(
                log_id=int(r["log_id"]),
                user_id=str(r["user_id"]),
                log_date=r["log_date"],
                login_time=as_time(r["login_time"]),
                logout_time=as_time(r.get("logout_time")),
            )

    def open_session(self, *, user_id: str, log_date: date, login_time: time) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO attendance_log(user_id, log_date, login_time) VALUES(%s,%s,%s)",
                (user_id, log_date, login_time),
            )
            return int(cur.lastrowid)

    def close_session(self, *, log_id: int, logout_time: time) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE attendance_log SET logout_time=%s WHERE log_id=%s", (logout_time, int(log_id)))
            return cur.rowcount > 0

    def list_for_date(self, log_date: date) -> Sequence[DashboardRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT al.user_id, al.login_time, al.logout_time, u.user_name
                FROM attendance_log al
                JOIN users u ON al.user_id = u.user_id
                WHERE al.log_date=%s
                ORDER BY al.login_time DESC
                """,
                (log_date,),
            )
            return [
                DashboardRow(
                    user_id=str(r["user_id"]),
                    user_name=r["user_name"],
                    login_time=as_time(r["login_time"]),
                    logout_time=as_time(r.get("logout_time")),
                )
                for r in fetchall(cur)
            ]

    def branch_counts(self, log_date: date) -> Sequence[BranchCount]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT p.degree, p.branch_code, COUNT(al.log_id) AS visit_count
                FROM attendance_log al
                JOIN users u ON al.user_id = u.user_id
                JOIN programs p ON u.program_id = p.program_id
                WHERE al.log_date=%s AND u.user_type='student'
                GROUP BY p.degree, p.branch_code
                ORDER BY p.degree, p.branch_code
                """,
                (log_date,),
            )
            return [
                BranchCount(degree=r["degree"], branch_code=r["branch_code"], visit_count=int(r["visit_count"]))
                for r in fetchall(cur)
            ]

    def close_open_sessions_on(self, log_date: date, *, logout_time: time) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_log SET logout_time=%s WHERE log_date=%s AND logout_time IS NULL",
                (logout_time, log_date),
            )
            return int(cur.rowcount)

    def close_open_sessions_before(self, log_date: date, *, logout_time: time) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_log SET logout_time=%s WHERE log_date<%s AND logout_time IS NULL",
                (logout_time, log_date),
            )
            return int(cur.rowcount)

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        user_type: Optional[UserType] = None,
        user_id: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["al.log_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if user_type is not None:
            clauses.append("u.user_type=%s")
            params.append(user_type.value)
        if user_id:
            clauses.append("u.user_id=%s")
            params.append(user_id)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    u.user_id, u.user_name, u.user_type, u.year, u.designation,
                    p.degree, p.branch_code,
                    d.department_name,
                    al.log_date, al.login_time, al.logout_time
                FROM attendance_log al
                JOIN users u ON u.user_id = al.user_id
                LEFT JOIN programs p ON p.program_id = u.program_id
                LEFT JOIN departments d ON d.department_id = u.department_id
                WHERE {where}
                ORDER BY al.log_date DESC, al.login_time ASC, u.user_id ASC
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(
                    user_id=str(r["user_id"]),
                    user_name=r["user_name"],
                    user_type=UserType(r["user_type"]),
                    log_date=r["log_date"],
                    login_time=as_time(r["login_time"]),
                    logout_time=as_time(r.get("logout_time")),
                    degree=r.get("degree"),
                    branch_code=r.get("branch_code"),
                    year=r.get("year"),
                    department_name=r.get("department_name"),
                    designation=r.get("designation"),
                )
                for r in fetchall(cur)
            ]
