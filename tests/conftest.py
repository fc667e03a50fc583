from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.college_attendance.college_attendance.attendance.model import (
    AttendanceChanges,
    AttendanceDraft,
    AttendanceRecord,
)
from src.college_attendance.college_attendance.core.enums import AttendanceStatus, Role
from src.college_attendance.college_attendance.core.exceptions import AuthenticationError, BackendError
from src.college_attendance.college_attendance.students.model import Student, StudentDraft
from src.college_attendance.college_attendance.users.model import AuthSession, UserProfile


class InMemoryStudents:
    def __init__(self, students=()):
        self.rows: list[Student] = list(students)
        self.fail_on: set[str] = set()
        self._id = 100

    def _check(self, op: str):
        if op in self.fail_on:
            raise BackendError(op, "backend unavailable")

    def list_all(self):
        self._check("list")
        return list(self.rows)

    def create(self, *, user_id: str, draft: StudentDraft) -> Student:
        self._check("create")
        self._id += 1
        student = Student(id=f"s{self._id}", user_id=user_id, **draft.as_payload())
        self.rows.insert(0, student)
        return student

    def update(self, student_id: str, draft: StudentDraft) -> Student:
        self._check("update")
        for i, s in enumerate(self.rows):
            if s.id == student_id:
                self.rows[i] = draft.apply_to(s)
                return self.rows[i]
        raise BackendError("update student", "no row returned")

    def delete(self, student_id: str) -> None:
        self._check("delete")
        self.rows = [s for s in self.rows if s.id != student_id]


class InMemoryAttendance:
    """Keyed on (student_id, date) like the backend's unique constraint."""

    def __init__(self, records=()):
        self.rows: list[AttendanceRecord] = list(records)
        self.fail_on: set[str] = set()
        self.creates = 0
        self.updates = 0
        self.conflicts = 0
        self._id = 500

    def _check(self, op: str):
        if op in self.fail_on:
            raise BackendError(op, "backend unavailable")

    def list_all(self):
        self._check("list")
        return list(self.rows)

    def get_by_key(self, student_id: str, day: date) -> Optional[AttendanceRecord]:
        self._check("get")
        return next((r for r in self.rows if r.key == (student_id, day)), None)

    def create(self, *, user_id: str, draft: AttendanceDraft, overwrite: bool = True) -> Optional[AttendanceRecord]:
        self._check("create")
        existing = next((r for r in self.rows if r.key == draft.key), None)
        if existing is not None and not overwrite:
            self.conflicts += 1
            return None
        self.creates += 1
        record_id = existing.id if existing else f"a{self._id + self.creates}"
        record = AttendanceRecord(
            id=record_id,
            user_id=user_id,
            student_id=draft.student_id,
            date=draft.date,
            status=draft.status,
            time_in=draft.time_in,
            time_out=draft.time_out,
            remarks=draft.remarks,
        )
        self.rows = [record] + [r for r in self.rows if r.key != draft.key]
        return record

    def update(self, record_id: str, changes: AttendanceChanges) -> AttendanceRecord:
        self._check("update")
        self.updates += 1
        for i, r in enumerate(self.rows):
            if r.id == record_id:
                self.rows[i] = replace(changes.apply_to(r), student=None)
                return self.rows[i]
        raise BackendError("update attendance", "no row returned")


class InMemoryProfiles:
    def __init__(self, profiles=()):
        self._by_id = {p.id: p for p in profiles}

    def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        return self._by_id.get(user_id)


class FakeAuthGateway:
    def __init__(self, accounts: Optional[dict] = None):
        # email -> (password, user_id)
        self.accounts = dict(accounts or {})
        self.signed_up: list[tuple[str, dict]] = []
        self.signed_out: list[str] = []

    def sign_in(self, email: str, password: str) -> AuthSession:
        account = self.accounts.get(email)
        if not account or account[0] != password:
            raise AuthenticationError("Invalid login credentials")
        return AuthSession(user_id=account[1], email=email)

    def sign_up(self, email: str, password: str, metadata) -> None:
        if email in self.accounts:
            raise AuthenticationError("User already registered")
        self.signed_up.append((email, dict(metadata)))

    def sign_out(self, session: AuthSession) -> None:
        self.signed_out.append(session.user_id)


def make_student(student_id: str, *, department: str = "Computer Science", year: str = "I Year", name=None) -> Student:
    return Student(
        id=student_id,
        user_id="u1",
        name=name or f"Student {student_id}",
        roll_number=f"R-{student_id}",
        department=department,
        email=f"{student_id}@example.com",
        phone="9000000000",
        year=year,
    )


def make_record(record_id: str, student_id: str, day: date, status: AttendanceStatus) -> AttendanceRecord:
    return AttendanceRecord(id=record_id, user_id="u1", student_id=student_id, date=day, status=status)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 9, 15, 42)


@pytest.fixture
def student_factory():
    return make_student


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def students_repo():
    return InMemoryStudents


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(id="u1", username="kavya", full_name="Kavya R", role=Role.TEACHER, department="Computer Science")


@pytest.fixture
def profiles_repo(profile):
    return InMemoryProfiles([profile])


@pytest.fixture
def auth_gateway():
    return FakeAuthGateway({"kavya@gasc.edu": ("secret123", "u1")})
