from __future__ import annotations

import io
from datetime import date, time

import pytest
from openpyxl import Workbook, load_workbook
from werkzeug.security import generate_password_hash

from rfid_attendance.attendance.auto_logout import AutoLogoutService
from rfid_attendance.attendance.debounce import DuplicateScanFilter
from rfid_attendance.attendance.model import AttendanceReportRow
from rfid_attendance.attendance.service import ScanService
from rfid_attendance.cards.service import CardRegistrationService
from rfid_attendance.container import Container
from rfid_attendance.core.enums import UserType
from rfid_attendance.main import create_app
from rfid_attendance.reports.service import AttendanceReportService
from rfid_attendance.users.model import Admin
from rfid_attendance.users.service import AuthService, RosterService


class FakeAdmins:
    def __init__(self):
        self.admin = Admin(
            admin_id=1, username="admin", full_name="Administrator", password_hash=generate_password_hash("s3cret")
        )

    def get_by_username(self, username):
        return self.admin if username == self.admin.username else None


@pytest.fixture
def report_rows():
    return [
        AttendanceReportRow(
            user_id="S100",
            user_name="Asha Rao",
            user_type=UserType.STUDENT,
            log_date=date(2026, 2, 2),
            login_time=time(9, 0),
            logout_time=time(10, 30),
            degree="B.Tech",
            branch_code="CSE",
            year="2",
        )
    ]


@pytest.fixture
def container(users, programs, departments, cards, attendance, broadcaster, report_rows):
    attendance._report_rows = report_rows
    admins = FakeAdmins()
    return Container(
        conn=None,
        users_repo=users,
        admins_repo=admins,
        programs_repo=programs,
        departments_repo=departments,
        cards_repo=cards,
        attendance_repo=attendance,
        auth_service=AuthService(admins),
        roster_service=RosterService(users, programs, departments),
        card_service=CardRegistrationService(cards),
        scan_service=ScanService(attendance, cards, users, broadcaster, scan_filter=DuplicateScanFilter(5)),
        auto_logout_service=AutoLogoutService(attendance),
        report_service=AttendanceReportService(attendance),
    )


@pytest.fixture
def app(container, tmp_path):
    app = create_app(settings_module="rfid_attendance.config.testing", container=container)
    app.config["UPLOAD_FOLDER"] = str(tmp_path / "uploads")
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    with client.session_transaction() as sess:
        sess["admin_id"] = 1
        sess["name"] = "Administrator"
    return client


def _xlsx(header, rows) -> io.BytesIO:
    wb = Workbook()
    ws = wb.active
    ws.append(header)
    for row in rows:
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf


def test_dashboard_is_public(client, container):
    container.scan_service.handle_scan("04 A3 5B 1A")

    res = client.get("/")

    assert res.status_code == 200
    assert b"Asha Rao" in res.data


def test_api_today_snapshot(client, container):
    container.scan_service.handle_scan("04 A3 5B 1A")

    body = client.get("/api/today").get_json()

    assert body["success"] is True
    assert body["logs"][0]["user_id"] == "S100"
    assert body["counts"] == {"B.Tech": [{"branch_code": "CSE", "visit_count": 1}]}


@pytest.mark.parametrize("path", ["/register", "/manage-users", "/users", "/reports"])
def test_admin_pages_redirect_to_login(client, path):
    res = client.get(path)

    assert res.status_code == 302
    assert "/login" in res.headers["Location"]


def test_api_scan_requires_login(client):
    res = client.post("/api/scan", json={"uid": "04 A3 5B 1A"})

    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_login_and_logout(client):
    res = client.post("/login", data={"username": "admin", "password": "s3cret"})

    assert res.status_code == 302
    assert res.headers["Location"].endswith("/manage-users")
    with client.session_transaction() as sess:
        assert sess["admin_id"] == 1

    client.get("/logout")
    with client.session_transaction() as sess:
        assert "admin_id" not in sess


def test_login_follows_local_next_only(client):
    res = client.post("/login?next=//evil.example", data={"username": "admin", "password": "s3cret"})

    assert res.headers["Location"].endswith("/manage-users")


def test_login_rejects_bad_password(client):
    res = client.post("/login", data={"username": "admin", "password": "nope"})

    assert res.status_code == 200
    assert b"Invalid username or password." in res.data


def test_api_scan_toggles_and_debounces(admin_client, broadcaster):
    first = admin_client.post("/api/scan", json={"uid": "04 A3 5B 1A"}).get_json()
    second = admin_client.post("/api/scan", data={"uid": "04 A3 5B 1A"}).get_json()

    assert first["event"]["status"] == "LOGIN"
    assert second["event"]["status"] == "IGNORED"
    assert [p["status"] for p in broadcaster.of("scan_event")] == ["LOGIN", "IGNORED"]


def test_api_scan_requires_uid(admin_client):
    res = admin_client.post("/api/scan", json={"uid": "  "})

    assert res.status_code == 400
    assert res.get_json()["message"] == "UID is required."


def test_register_card_flow(admin_client, cards, users):
    res = admin_client.post("/add", data={"user_id": "S100", "uid": "04 99 99 99"}, follow_redirects=True)
    assert b"Duplicate User ID or UID." in res.data

    res = admin_client.post("/add", data={"user_id": "", "uid": ""}, follow_redirects=True)
    assert b"All fields are required." in res.data

    res = admin_client.post("/add", data={"user_id": "NOBODY", "uid": "04 99 99 99"}, follow_redirects=True)
    assert b"User ID NOBODY does not exist." in res.data

    admin_client.post("/cards/04%2011%2022%2033/delete")
    res = admin_client.post("/add", data={"user_id": "S200", "uid": "04 99 99 99"}, follow_redirects=True)
    assert b"Registration successful!" in res.data
    assert cards.get_by_uid("04 99 99 99").user_id == "S200"


def test_add_card_database_error(admin_client, cards, monkeypatch):
    def boom(**kwargs):
        raise RuntimeError("lost connection")

    monkeypatch.setattr(cards, "create", boom)

    res = admin_client.post("/add", data={"user_id": "S100", "uid": "X"}, follow_redirects=True)

    assert b"Database error." in res.data


def test_manage_users_page_lists_programs(admin_client):
    res = admin_client.get("/manage-users")

    assert res.status_code == 200
    assert b"Computer Science and Engineering" in res.data
    assert b"Library" in res.data


def test_add_student_manual(admin_client, users):
    res = admin_client.post(
        "/add-student-manual",
        data={"user_id": "S300", "user_name": "Neha Gupta", "year": "1", "program_id": "2"},
        follow_redirects=True,
    )

    assert b"Student added successfully!" in res.data
    assert users.get_by_id("S300").program_id == 2

    res = admin_client.post(
        "/add-student-manual",
        data={"user_id": "S300", "user_name": "Neha Gupta", "year": "1", "program_id": "2"},
        follow_redirects=True,
    )
    assert b"Student with that ID already exists." in res.data


def test_add_student_manual_unknown_program(admin_client, users):
    res = admin_client.post(
        "/add-student-manual",
        data={"user_id": "S301", "user_name": "Neha Gupta", "year": "1", "program_id": "42"},
        follow_redirects=True,
    )

    assert b"Failed to add student." in res.data
    assert users.get_by_id("S301") is None


def test_add_faculty_manual_without_department(admin_client, users):
    res = admin_client.post(
        "/add-faculty-manual",
        data={"user_id": "F21", "user_name": "Ravi Kumar", "designation": "Librarian", "department_id": ""},
        follow_redirects=True,
    )

    assert b"Failed to add faculty." in res.data
    assert users.get_by_id("F21") is None


def test_add_faculty_manual(admin_client, users):
    res = admin_client.post(
        "/add-faculty-manual",
        data={"user_id": "F20", "user_name": "Ravi Kumar", "designation": "Librarian", "department_id": "2"},
        follow_redirects=True,
    )

    assert b"Faculty added successfully!" in res.data
    assert users.get_by_id("F20").designation == "Librarian"


def test_upload_students_excel(admin_client, users, app, tmp_path):
    data = {
        "userFile": (
            _xlsx(["ID", "Name", "Year", "Degree", "Branch"], [["S401", "Kiran Das", 1, "B.Tech", "ECE"]]),
            "students.xlsx",
        )
    }

    res = admin_client.post(
        "/upload-students-excel", data=data, content_type="multipart/form-data", follow_redirects=True
    )

    assert b"1 students uploaded!" in res.data
    assert users.get_by_id("S401").program_id == 2
    assert list((tmp_path / "uploads").iterdir()) == []


def test_upload_students_unknown_program_removes_temp_file(admin_client, users, tmp_path):
    data = {
        "userFile": (
            _xlsx(["ID", "Name", "Year", "Degree", "Branch"], [["S401", "Kiran Das", 1, "PhD", "CSE"]]),
            "students.xlsx",
        )
    }

    res = admin_client.post(
        "/upload-students-excel", data=data, content_type="multipart/form-data", follow_redirects=True
    )

    assert b"Program not found for Degree" in res.data
    assert users.get_by_id("S401") is None
    assert list((tmp_path / "uploads").iterdir()) == []


def test_upload_empty_workbook(admin_client, tmp_path):
    buf = io.BytesIO()
    Workbook().save(buf)
    buf.seek(0)

    res = admin_client.post(
        "/upload-students-excel",
        data={"userFile": (buf, "empty.xlsx")},
        content_type="multipart/form-data",
        follow_redirects=True,
    )

    assert b"0 students uploaded!" in res.data
    assert list((tmp_path / "uploads").iterdir()) == []


def test_upload_without_file(admin_client):
    res = admin_client.post("/upload-faculty-excel", data={}, follow_redirects=True)

    assert b"No faculty Excel file was uploaded." in res.data


def test_upload_faculty_excel(admin_client, users):
    data = {
        "userFile": (
            _xlsx(["ID", "Name", "Department", "Designation"], [["F30", "Ravi Kumar", "Library", "Librarian"]]),
            "faculty.xlsx",
        )
    }

    res = admin_client.post("/upload-faculty-excel", data=data, content_type="multipart/form-data", follow_redirects=True)

    assert b"1 faculty members uploaded!" in res.data
    assert users.get_by_id("F30").department_id == 2


def test_users_list(admin_client):
    res = admin_client.get("/users")

    assert res.status_code == 200
    assert b"Dr. Meera Iyer" in res.data


def test_reports_page(admin_client, attendance):
    res = admin_client.get("/reports?start=2026-02-01&end=2026-02-28&user_type=student")

    assert res.status_code == 200
    assert b"Asha Rao" in res.data
    assert b"01:30" in res.data
    assert attendance.last_report_args["user_type"] == UserType.STUDENT


def test_reports_bad_date_redirects(admin_client):
    res = admin_client.get("/reports?start=02/01/2026")

    assert res.status_code == 302


def test_reports_csv(admin_client):
    res = admin_client.get("/reports.csv?start=2026-02-01&end=2026-02-28")

    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    assert "attendance_20260201_20260228.csv" in res.headers["Content-Disposition"]
    assert "S100,Asha Rao" in res.data.decode("utf-8-sig")


def test_reports_xlsx(admin_client):
    res = admin_client.get("/reports.xlsx?start=2026-02-01&end=2026-02-28&user_type=student")

    assert res.status_code == 200
    assert "attendance_student_20260201_20260228.xlsx" in res.headers["Content-Disposition"]
    wb = load_workbook(io.BytesIO(res.data))
    assert wb.sheetnames == ["Attendance", "Summary"]
    assert wb["Attendance"]["B2"].value == "S100"
