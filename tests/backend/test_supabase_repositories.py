from __future__ import annotations

from datetime import date, time
from types import SimpleNamespace

import httpx
import pytest
from postgrest.exceptions import APIError

from src.college_attendance.college_attendance.attendance.model import AttendanceChanges, AttendanceDraft
from src.college_attendance.college_attendance.attendance.supabase_attendance_repository import (
    SupabaseAttendanceRepository,
    row_to_record,
)
from src.college_attendance.college_attendance.backend.base import backend_call, fetchall, fetchone
from src.college_attendance.college_attendance.core.enums import AttendanceStatus, Role
from src.college_attendance.college_attendance.core.exceptions import AuthenticationError, BackendError
from src.college_attendance.college_attendance.students.model import StudentDraft
from src.college_attendance.college_attendance.students.supabase_student_repository import (
    SupabaseStudentRepository,
    row_to_student,
)
from src.college_attendance.college_attendance.users.supabase_user_repository import (
    SupabaseAuthGateway,
    SupabaseProfileRepository,
)

STUDENT_ROW = {
    "id": "7f6c",
    "user_id": "u1",
    "name": "Lakshmi P",
    "roll_number": "PH-11",
    "department": "Physics",
    "email": None,
    "phone": "9876543210",
    "year": "II Year",
    "created_at": "2026-01-02T08:00:00+00:00",
    "updated_at": None,
}

RECORD_ROW = {
    "id": "r1",
    "user_id": "u1",
    "student_id": "7f6c",
    "date": "2026-02-02",
    "time_in": "09:15:00",
    "time_out": None,
    "status": "late",
    "remarks": None,
    "created_at": "2026-02-02T03:45:00Z",
    "student": STUDENT_ROW,
}


class StubQuery:
    """Records the builder chain of one `table(...)` call."""

    def __init__(self, client: "StubClient", table: str):
        self._client = client
        self.table = table
        self.calls: list[tuple[str, tuple, dict]] = []

    def _record(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        return self

    def select(self, *args, **kwargs):
        return self._record("select", *args, **kwargs)

    def insert(self, *args, **kwargs):
        return self._record("insert", *args, **kwargs)

    def upsert(self, *args, **kwargs):
        return self._record("upsert", *args, **kwargs)

    def update(self, *args, **kwargs):
        return self._record("update", *args, **kwargs)

    def delete(self, *args, **kwargs):
        return self._record("delete", *args, **kwargs)

    def eq(self, *args, **kwargs):
        return self._record("eq", *args, **kwargs)

    def order(self, *args, **kwargs):
        return self._record("order", *args, **kwargs)

    def limit(self, *args, **kwargs):
        return self._record("limit", *args, **kwargs)

    def call(self, name):
        return next(c for c in self.calls if c[0] == name)

    def execute(self):
        outcome = self._client.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return SimpleNamespace(data=outcome)


class StubClient:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.queries: list[StubQuery] = []

    def table(self, name: str) -> StubQuery:
        query = StubQuery(self, name)
        self.queries.append(query)
        return query


def _api_error(message="duplicate key value violates unique constraint", code="23505"):
    return APIError({"message": message, "code": code, "hint": None, "details": None})


def test_backend_call_translates_api_errors():
    with pytest.raises(BackendError) as exc:
        with backend_call("add student"):
            raise _api_error()

    assert exc.value.operation == "add student"
    assert exc.value.message == "duplicate key value violates unique constraint"
    assert isinstance(exc.value.__cause__, APIError)


def test_backend_call_translates_transport_errors():
    with pytest.raises(BackendError) as exc:
        with backend_call("fetch students"):
            raise httpx.ConnectError("connection refused")

    assert exc.value.message == "connection refused"
    assert str(exc.value) == "fetch students: connection refused"


def test_backend_call_leaves_other_errors_alone():
    with pytest.raises(KeyError):
        with backend_call("fetch students"):
            raise KeyError("id")


def test_fetch_helpers():
    assert fetchall(SimpleNamespace(data=None)) == []
    assert fetchone(SimpleNamespace(data=[{"id": 1}, {"id": 2}]), "op") == {"id": 1}
    with pytest.raises(BackendError, match="no row returned"):
        fetchone(SimpleNamespace(data=[]), "update student")


def test_row_to_record_parses_the_joined_student():
    record = row_to_record(RECORD_ROW)

    assert record.date == date(2026, 2, 2)
    assert record.time_in == time(9, 15)
    assert record.status == AttendanceStatus.LATE
    assert record.key == ("7f6c", date(2026, 2, 2))
    assert record.student.department == "Physics"
    assert record.student.email == ""
    assert record.created_at.utcoffset().total_seconds() == 0


def test_row_to_record_without_embedded_student():
    record = row_to_record({**RECORD_ROW, "student": None, "time_in": None})

    assert record.student is None
    assert record.time_in is None


def test_attendance_list_selects_joined_rows_newest_first():
    client = StubClient([RECORD_ROW])

    records = SupabaseAttendanceRepository(client).list_all()

    query = client.queries[0]
    assert query.table == "attendance_records"
    assert query.call("select")[1] == ("*, student:students(*)",)
    assert query.call("order") == ("order", ("created_at",), {"desc": True})
    assert [r.id for r in records] == ["r1"]


def test_attendance_create_upserts_on_student_and_date():
    client = StubClient([[{**RECORD_ROW, "student": None, "status": "present"}]])
    draft = AttendanceDraft(student_id="7f6c", date=date(2026, 2, 2), status=AttendanceStatus.PRESENT, time_in=time(9, 15))

    record = SupabaseAttendanceRepository(client).create(user_id="u1", draft=draft)

    _, args, kwargs = client.queries[0].call("upsert")
    assert args[0] == {
        "student_id": "7f6c",
        "date": "2026-02-02",
        "status": "present",
        "time_in": "09:15",
        "time_out": None,
        "remarks": None,
        "user_id": "u1",
    }
    assert kwargs == {"on_conflict": "student_id,date", "ignore_duplicates": False}
    assert record.status == AttendanceStatus.PRESENT


def test_attendance_insert_only_returns_none_on_conflict():
    client = StubClient([])
    draft = AttendanceDraft(student_id="7f6c", date=date(2026, 2, 2), status=AttendanceStatus.PRESENT)

    assert SupabaseAttendanceRepository(client).create(user_id="u1", draft=draft, overwrite=False) is None
    assert client.queries[0].call("upsert")[2]["ignore_duplicates"] is True


def test_attendance_get_by_key_and_update():
    client = StubClient([RECORD_ROW], [], [{**RECORD_ROW, "status": "absent", "time_in": None}])
    repo = SupabaseAttendanceRepository(client)

    found = repo.get_by_key("7f6c", date(2026, 2, 2))
    missing = repo.get_by_key("7f6c", date(2026, 2, 3))
    updated = repo.update("r1", AttendanceChanges(status=AttendanceStatus.ABSENT))

    eqs = [c for c in client.queries[0].calls if c[0] == "eq"]
    assert eqs == [("eq", ("student_id", "7f6c"), {}), ("eq", ("date", "2026-02-02"), {})]
    assert found.id == "r1"
    assert missing is None
    assert client.queries[2].call("update")[1] == ({"status": "absent", "time_in": None},)
    assert updated.time_in is None


def test_attendance_update_with_no_row_is_a_backend_error():
    client = StubClient([])

    with pytest.raises(BackendError, match="update attendance"):
        SupabaseAttendanceRepository(client).update("gone", AttendanceChanges(status=AttendanceStatus.LATE))


def test_student_repository_round_trip():
    client = StubClient([STUDENT_ROW], [STUDENT_ROW], [{**STUDENT_ROW, "name": "Lakshmi Priya"}], [])
    repo = SupabaseStudentRepository(client)
    draft = StudentDraft(name="Lakshmi P", roll_number="PH-11", department="Physics", year="II Year")

    [listed] = repo.list_all()
    created = repo.create(user_id="u1", draft=draft)
    updated = repo.update("7f6c", draft)
    repo.delete("7f6c")

    assert listed == row_to_student(STUDENT_ROW)
    assert client.queries[1].call("insert")[1][0]["user_id"] == "u1"
    assert created.id == "7f6c"
    update_payload = client.queries[2].call("update")[1][0]
    assert "updated_at" in update_payload
    assert updated.name == "Lakshmi Priya"
    assert client.queries[3].call("eq") == ("eq", ("id", "7f6c"), {})


def test_student_repository_maps_api_error():
    client = StubClient(_api_error("permission denied for table students", "42501"))

    with pytest.raises(BackendError) as exc:
        SupabaseStudentRepository(client).list_all()

    assert exc.value.operation == "fetch students"
    assert exc.value.message == "permission denied for table students"


def test_profile_repository():
    client = StubClient(
        [{"id": "u1", "username": "kavya", "full_name": "Kavya R", "role": "admin", "department": "Tamil"}],
        [{"id": "u2", "username": "ravi", "full_name": None, "role": None, "department": None}],
        [],
    )
    repo = SupabaseProfileRepository(client)

    admin = repo.get_by_id("u1")
    fallback = repo.get_by_id("u2")

    assert admin.role == Role.ADMIN
    assert (fallback.role, fallback.full_name, fallback.department) == (Role.TEACHER, "", "")
    assert repo.get_by_id("u3") is None
    assert client.queries[0].table == "user_profiles"


class StubAuth:
    def __init__(self):
        self.calls = []

    def sign_in_with_password(self, credentials):
        self.calls.append(("sign_in", credentials))
        return SimpleNamespace(user=SimpleNamespace(id="u1", email=credentials["email"]))

    def sign_up(self, credentials):
        self.calls.append(("sign_up", credentials))

    def sign_out(self):
        self.calls.append(("sign_out",))


class StubConnection:
    def __init__(self):
        self.auth = StubAuth()

    def connect(self):
        return SimpleNamespace(auth=self.auth)


def test_auth_gateway_uses_a_client_per_session():
    connection = StubConnection()
    gateway = SupabaseAuthGateway(connection)

    session = gateway.sign_in("kavya@gasc.edu", "secret123")
    gateway.sign_up("new@gasc.edu", "secret123", {"username": "new", "department": "Tamil"})
    gateway.sign_out(session)

    assert session.user_id == "u1"
    assert session.client.auth is connection.auth
    assert connection.auth.calls[1] == (
        "sign_up",
        {"email": "new@gasc.edu", "password": "secret123", "options": {"data": {"username": "new", "department": "Tamil"}}},
    )
    assert connection.auth.calls[-1] == ("sign_out",)


def test_auth_gateway_sign_in_without_user_is_rejected():
    connection = StubConnection()
    connection.auth.sign_in_with_password = lambda credentials: SimpleNamespace(user=None)

    with pytest.raises(AuthenticationError, match="Invalid login credentials"):
        SupabaseAuthGateway(connection).sign_in("kavya@gasc.edu", "x")
