from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import UserType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, translate_integrity_errors
from .model import Admin, User
from .repository import AdminRepository, UserRepository

_INSERT_USER = """
    INSERT INTO users(user_id, user_type, user_name, year, program_id, designation, department_id)
    VALUES(%s,%s,%s,%s,%s,%s,%s)
"""


def _user_params(user: User) -> tuple:
    return (
        user.user_id,
        user.user_type.value,
        user.user_name,
        user.year,
        user.program_id,
        user.designation,
        user.department_id,
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, user_type, user_name, year, program_id, designation, department_id
                FROM users
                WHERE user_id=%s
                """,
                (user_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return User(
                user_id=str(row["user_id"]),
                user_type=UserType(row["user_type"]),
                user_name=row["user_name"],
                year=row.get("year"),
                program_id=row.get("program_id"),
                designation=row.get("designation"),
                department_id=row.get("department_id"),
            )

    def create_user(self, user: User) -> None:
        with translate_integrity_errors():
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(_INSERT_USER, _user_params(user))

    def bulk_create(self, users: Sequence[User]) -> int:
        if not users:
            return 0
        # db_cursor commits once at the end and rolls back on any failure.
        with translate_integrity_errors():
            with db_cursor(self._conn_factory) as (_, cur):
                cur.executemany(_INSERT_USER, [_user_params(u) for u in users])
        return len(users)

    def list_roster(self) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.user_id, u.user_type, u.user_name, u.year, u.designation,
                       p.degree, p.branch_code,
                       d.department_name,
                       r.uid
                FROM users u
                LEFT JOIN programs p ON p.program_id = u.program_id
                LEFT JOIN departments d ON d.department_id = u.department_id
                LEFT JOIN rfid_details r ON r.user_id = u.user_id
                ORDER BY u.user_type, u.user_id
                """
            )
            out: list[dict] = []
            for r in fetchall(cur):
                if r["user_type"] == UserType.STUDENT.value:
                    group = f"{r.get('degree') or '-'} {r.get('branch_code') or ''}".strip()
                    detail = f"Year {r['year']}" if r.get("year") else "-"
                else:
                    group = r.get("department_name") or "-"
                    detail = r.get("designation") or "-"
                out.append(
                    {
                        "user_id": r["user_id"],
                        "user_type": r["user_type"],
                        "user_name": r["user_name"],
                        "group": group,
                        "detail": detail,
                        "uid": r.get("uid") or "",
                    }
                )
            return out


class MySQLAdminRepository(AdminRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_username(self, username: str) -> Optional[Admin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT admin_id, username, full_name, password_hash, is_active FROM admins WHERE username=%s",
                (username,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Admin(
                admin_id=int(row["admin_id"]),
                username=row["username"],
                full_name=row["full_name"],
                password_hash=row["password_hash"],
                is_active=bool(row.get("is_active", True)),
            )
