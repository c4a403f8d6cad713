from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

from werkzeug.security import check_password_hash

from ..common.validators import optional_text, require_non_empty, require_positive_int
from ..core.enums import UserType
from ..core.exceptions import (
    AuthenticationError,
    DuplicateEntryError,
    ReferenceNotFoundError,
    ValidationError,
)
from .department_repository import DepartmentRepository, ProgramRepository
from .importer import read_faculty_rows, read_student_rows
from .model import User
from .repository import AdminRepository, UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionAdmin:
    """What we store into Flask session after login."""

    admin_id: int
    username: str
    full_name: str


class AuthService:
    """Use case: authenticate an admin (login)."""

    def __init__(self, admins: AdminRepository):
        self._admins = admins

    def authenticate(self, username: str, password: str) -> SessionAdmin:
        admin = self._admins.get_by_username((username or "").strip())
        if not admin or not admin.is_active:
            raise AuthenticationError("Invalid username or password.")

        try:
            ok = check_password_hash(admin.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid username or password.")

        return SessionAdmin(admin_id=admin.admin_id, username=admin.username, full_name=admin.full_name)


class RosterService:
    """Use case: manage the roster of students and faculty (admin)."""

    def __init__(self, users: UserRepository, programs: ProgramRepository, departments: DepartmentRepository):
        self._users = users
        self._programs = programs
        self._departments = departments

    def list_programs(self):
        return self._programs.list_all()

    def list_departments(self):
        return self._departments.list_all()

    def list_roster(self) -> Sequence[dict]:
        return self._users.list_roster()

    def add_student(self, *, user_id: str, user_name: str, year: Optional[str], program_id) -> User:
        try:
            user = User(
                user_id=require_non_empty(user_id, "User ID"),
                user_type=UserType.STUDENT,
                user_name=require_non_empty(user_name, "Name"),
                year=optional_text(year),
                program_id=require_positive_int(program_id, "Program"),
            )
            self._users.create_user(user)
        except DuplicateEntryError:
            raise ValidationError("Student with that ID already exists.")
        except (ValidationError, ReferenceNotFoundError) as e:
            logger.warning("Rejected student %r: %s", user_id, e)
            raise ValidationError("Failed to add student.")
        return user

    def add_faculty(self, *, user_id: str, user_name: str, designation: Optional[str], department_id) -> User:
        try:
            user = User(
                user_id=require_non_empty(user_id, "User ID"),
                user_type=UserType.FACULTY,
                user_name=require_non_empty(user_name, "Name"),
                designation=optional_text(designation),
                department_id=require_positive_int(department_id, "Department"),
            )
            self._users.create_user(user)
        except DuplicateEntryError:
            raise ValidationError("Faculty with that ID already exists.")
        except (ValidationError, ReferenceNotFoundError) as e:
            logger.warning("Rejected faculty %r: %s", user_id, e)
            raise ValidationError("Failed to add faculty.")
        return user

    def import_students(self, source: Union[str, Path]) -> int:
        """Insert every student of the workbook, or none of them."""

        students: list[User] = []
        for row in read_student_rows(source):
            if not row.user_id:
                continue
            program = self._programs.get_by_degree_and_branch(row.degree, row.branch_code)
            if not program:
                raise ValidationError(
                    f"Program not found for Degree '{row.degree}' with Branch Code '{row.branch_code}'."
                )
            students.append(
                User(
                    user_id=row.user_id,
                    user_type=UserType.STUDENT,
                    user_name=row.user_name,
                    year=row.year or None,
                    program_id=program.program_id,
                )
            )

        return self._bulk_insert(students)

    def import_faculty(self, source: Union[str, Path]) -> int:
        """Insert every faculty member of the workbook, or none of them."""

        faculty: list[User] = []
        for row in read_faculty_rows(source):
            if not row.user_id:
                continue
            department = self._departments.get_by_name(row.department_name)
            if not department:
                raise ValidationError(f"Department not found for {row.department_name}.")
            faculty.append(
                User(
                    user_id=row.user_id,
                    user_type=UserType.FACULTY,
                    user_name=row.user_name,
                    designation=row.designation or None,
                    department_id=department.department_id,
                )
            )

        return self._bulk_insert(faculty)

    def _bulk_insert(self, users: list[User]) -> int:
        if not users:
            return 0
        try:
            count = self._users.bulk_create(users)
        except DuplicateEntryError as e:
            raise ValidationError(f"Upload rejected, duplicate user ID: {e}")
        logger.info("Imported %d %s rows", count, users[0].user_type.value)
        return count
