from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role stored on the user profile at sign-up."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STAFF = "staff"


class AttendanceStatus(str, Enum):
    """Attendance outcome for a student on a date."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"

    @property
    def stamps_time_in(self) -> bool:
        return self in (AttendanceStatus.PRESENT, AttendanceStatus.LATE)


class SyncStatus(str, Enum):
    """Lifecycle of a locally held row against the backend."""

    PENDING = "pending"
    COMMITTED = "committed"
    FAILED = "failed"


class ReportType(str, Enum):
    SUMMARY = "summary"
    DETAILED = "detailed"
    STUDENT = "student"
