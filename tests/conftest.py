from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from typing import Optional

import pytest

from rfid_attendance.attendance.model import AttendanceLog, BranchCount, DashboardRow
from rfid_attendance.cards.model import RfidBinding
from rfid_attendance.core.enums import UserType
from rfid_attendance.core.exceptions import DuplicateEntryError, ReferenceNotFoundError
from rfid_attendance.users.department_model import Department, Program
from rfid_attendance.users.model import User


class RecordingBroadcaster:
    def __init__(self):
        self.events: list[tuple[str, dict]] = []

    def emit(self, event: str, payload: dict) -> None:
        self.events.append((event, payload))

    def of(self, name: str) -> list[dict]:
        return [p for e, p in self.events if e == name]


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryPrograms:
    def __init__(self, programs: list[Program]):
        self._programs = list(programs)

    def list_all(self):
        return sorted(self._programs, key=lambda p: (p.degree, p.branch_name))

    def get_by_degree_and_branch(self, degree: str, branch_code: str) -> Optional[Program]:
        for p in self._programs:
            if p.degree == degree and p.branch_code == branch_code:
                return p
        return None


class InMemoryDepartments:
    def __init__(self, departments: list[Department]):
        self._departments = list(departments)

    def list_all(self):
        return sorted(self._departments, key=lambda d: d.department_name)

    def get_by_name(self, department_name: str) -> Optional[Department]:
        for d in self._departments:
            if d.department_name == department_name:
                return d
        return None


class InMemoryUsers:
    def __init__(self, users: list[User] = (), *, valid_program_ids=None, valid_department_ids=None):
        self.users: dict[str, User] = {u.user_id: u for u in users}
        self._program_ids = valid_program_ids
        self._department_ids = valid_department_ids

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def _check(self, user: User, pending: dict) -> None:
        if user.user_id in self.users or user.user_id in pending:
            raise DuplicateEntryError(f"Duplicate entry '{user.user_id}' for key 'PRIMARY'")
        if self._program_ids is not None and user.program_id is not None and user.program_id not in self._program_ids:
            raise ReferenceNotFoundError("program")
        if (
            self._department_ids is not None
            and user.department_id is not None
            and user.department_id not in self._department_ids
        ):
            raise ReferenceNotFoundError("department")

    def create_user(self, user: User) -> None:
        self._check(user, {})
        self.users[user.user_id] = user

    def bulk_create(self, users) -> int:
        pending: dict[str, User] = {}
        for u in users:
            self._check(u, pending)
            pending[u.user_id] = u
        self.users.update(pending)
        return len(pending)

    def list_roster(self):
        return [
            {"user_id": u.user_id, "user_type": u.user_type.value, "user_name": u.user_name, "group": "-", "detail": "-", "uid": ""}
            for u in self.users.values()
        ]


class InMemoryCards:
    def __init__(self, bindings: list[RfidBinding] = (), *, known_user_ids=None):
        self.by_uid: dict[str, RfidBinding] = {b.uid: b for b in bindings}
        self._known_user_ids = known_user_ids
        self._id = len(self.by_uid)

    def get_by_uid(self, uid: str) -> Optional[RfidBinding]:
        return self.by_uid.get(uid)

    def create(self, *, user_id: str, uid: str) -> int:
        if uid in self.by_uid or any(b.user_id == user_id for b in self.by_uid.values()):
            raise DuplicateEntryError("duplicate")
        if self._known_user_ids is not None and user_id not in self._known_user_ids:
            raise ReferenceNotFoundError("user")
        self._id += 1
        self.by_uid[uid] = RfidBinding(rfid_id=self._id, user_id=user_id, uid=uid)
        return self._id

    def delete_by_uid(self, uid: str) -> bool:
        return self.by_uid.pop(uid, None) is not None

    def list_view(self):
        return [
            {"uid": b.uid, "user_id": b.user_id, "user_name": "-", "user_type": "-", "registered_at": "-"}
            for b in self.by_uid.values()
        ]


class InMemoryAttendance:
    """Attendance log kept in a list; branch counts join the user and program fakes."""

    def __init__(self, users: InMemoryUsers, programs: InMemoryPrograms, report_rows=()):
        self.logs: list[AttendanceLog] = []
        self._users = users
        self._programs = programs
        self._report_rows = list(report_rows)
        self.last_report_args: Optional[dict] = None

    def find_open_session(self, user_id: str, log_date: date) -> Optional[AttendanceLog]:
        for log in self.logs:
            if log.user_id == user_id and log.log_date == log_date and log.logout_time is None:
                return log
        return None

    def open_session(self, *, user_id: str, log_date: date, login_time: time) -> int:
        log_id = len(self.logs) + 1
        self.logs.append(AttendanceLog(log_id=log_id, user_id=user_id, log_date=log_date, login_time=login_time))
        return log_id

    def close_session(self, *, log_id: int, logout_time: time) -> bool:
        for i, log in enumerate(self.logs):
            if log.log_id == log_id:
                self.logs[i] = replace(log, logout_time=logout_time)
                return True
        return False

    def list_for_date(self, log_date: date):
        rows = [
            DashboardRow(
                user_id=log.user_id,
                user_name=self._users.get_by_id(log.user_id).user_name,
                login_time=log.login_time,
                logout_time=log.logout_time,
            )
            for log in self.logs
            if log.log_date == log_date
        ]
        return sorted(rows, key=lambda r: r.login_time, reverse=True)

    def branch_counts(self, log_date: date):
        programs_by_id = {p.program_id: p for p in self._programs.list_all()}
        counts: dict[tuple[str, str], int] = {}
        for log in self.logs:
            user = self._users.get_by_id(log.user_id)
            if log.log_date != log_date or user.user_type != UserType.STUDENT:
                continue
            program = programs_by_id[user.program_id]
            key = (program.degree, program.branch_code)
            counts[key] = counts.get(key, 0) + 1
        return [BranchCount(degree=k[0], branch_code=k[1], visit_count=v) for k, v in sorted(counts.items())]

    def _close_where(self, predicate, logout_time: time) -> int:
        closed = 0
        for i, log in enumerate(self.logs):
            if log.logout_time is None and predicate(log.log_date):
                self.logs[i] = replace(log, logout_time=logout_time)
                closed += 1
        return closed

    def close_open_sessions_on(self, log_date: date, *, logout_time: time) -> int:
        return self._close_where(lambda d: d == log_date, logout_time)

    def close_open_sessions_before(self, log_date: date, *, logout_time: time) -> int:
        return self._close_where(lambda d: d < log_date, logout_time)

    def get_report_rows(self, *, start_date, end_date, user_type=None, user_id=None):
        self.last_report_args = {
            "start_date": start_date,
            "end_date": end_date,
            "user_type": user_type,
            "user_id": user_id,
        }
        return self._report_rows


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 9, 15, 30)


@pytest.fixture
def programs() -> InMemoryPrograms:
    return InMemoryPrograms(
        [
            Program(program_id=1, degree="B.Tech", branch_code="CSE", branch_name="Computer Science and Engineering"),
            Program(program_id=2, degree="B.Tech", branch_code="ECE", branch_name="Electronics and Communication"),
            Program(program_id=3, degree="MBA", branch_code="GEN", branch_name="General Management"),
        ]
    )


@pytest.fixture
def departments() -> InMemoryDepartments:
    return InMemoryDepartments(
        [
            Department(department_id=1, department_name="Computer Science"),
            Department(department_id=2, department_name="Library"),
        ]
    )


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers(
        [
            User(user_id="S100", user_type=UserType.STUDENT, user_name="Asha Rao", year="2", program_id=1),
            User(user_id="S200", user_type=UserType.STUDENT, user_name="Vikram Shah", year="3", program_id=2),
            User(user_id="F10", user_type=UserType.FACULTY, user_name="Dr. Meera Iyer", designation="Professor", department_id=1),
        ],
        valid_program_ids={1, 2, 3},
        valid_department_ids={1, 2},
    )


@pytest.fixture
def cards(users) -> InMemoryCards:
    return InMemoryCards(
        [
            RfidBinding(rfid_id=1, user_id="S100", uid="04 A3 5B 1A"),
            RfidBinding(rfid_id=2, user_id="S200", uid="04 11 22 33"),
            RfidBinding(rfid_id=3, user_id="F10", uid="04 FF 00 01"),
            # Bound to a user that has since disappeared from the roster.
            RfidBinding(rfid_id=4, user_id="GONE", uid="04 DE AD 00"),
        ],
        known_user_ids=set(users.users),
    )


@pytest.fixture
def attendance(users, programs) -> InMemoryAttendance:
    return InMemoryAttendance(users, programs)


@pytest.fixture
def broadcaster() -> RecordingBroadcaster:
    return RecordingBroadcaster()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
