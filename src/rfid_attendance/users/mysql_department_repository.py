from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .department_model import Department, Program
from .department_repository import DepartmentRepository, ProgramRepository


def _to_department(r: dict) -> Department:
    return Department(department_id=int(r["department_id"]), department_name=r["department_name"])


def _to_program(r: dict) -> Program:
    return Program(
        program_id=int(r["program_id"]),
        degree=r["degree"],
        branch_code=r["branch_code"],
        branch_name=r["branch_name"],
    )


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT department_id, department_name FROM departments ORDER BY department_name")
            return [_to_department(r) for r in fetchall(cur)]

    def get_by_name(self, department_name: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT department_id, department_name FROM departments WHERE department_name=%s",
                (department_name,),
            )
            r = fetchone(cur)
            return _to_department(r) if r else None


class MySQLProgramRepository(ProgramRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Program]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT program_id, degree, branch_code, branch_name FROM programs ORDER BY degree, branch_name"
            )
            return [_to_program(r) for r in fetchall(cur)]

    def get_by_degree_and_branch(self, degree: str, branch_code: str) -> Optional[Program]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT program_id, degree, branch_code, branch_name
                FROM programs
                WHERE degree=%s AND branch_code=%s
                """,
                (degree, branch_code),
            )
            r = fetchone(cur)
            return _to_program(r) if r else None
