"""State-update interface: every change to `AppState` is one of these."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from ..attendance.model import AttendanceRecord
from ..core.enums import SyncStatus
from ..students.model import Student


@dataclass(frozen=True)
class Loaded:
    students: Sequence[Student]
    attendance: Sequence[AttendanceRecord]


@dataclass(frozen=True)
class LoadFailed:
    message: str


@dataclass(frozen=True)
class StudentUpserted:
    """Replace the student with the same id, or prepend it."""

    student: Student
    status: SyncStatus


@dataclass(frozen=True)
class StudentReplaced:
    """Swap a row (usually a pending placeholder) for the server's row."""

    old_id: str
    student: Student
    status: SyncStatus = SyncStatus.COMMITTED


@dataclass(frozen=True)
class StudentRemoved:
    """Drop a student together with every attendance row referencing it."""

    student_id: str


@dataclass(frozen=True)
class AttendanceUpserted:
    """Replace the record with the same id or (student, date) key, or prepend it."""

    record: AttendanceRecord
    status: SyncStatus


@dataclass(frozen=True)
class AttendanceReplaced:
    old_id: str
    record: AttendanceRecord
    status: SyncStatus = SyncStatus.COMMITTED


@dataclass(frozen=True)
class AttendanceRemoved:
    record_id: str


@dataclass(frozen=True)
class SyncMarked:
    record_id: str
    status: SyncStatus


@dataclass(frozen=True)
class SyncFailed:
    message: str


@dataclass(frozen=True)
class ErrorsCleared:
    pass


Action = Union[
    Loaded,
    LoadFailed,
    StudentUpserted,
    StudentReplaced,
    StudentRemoved,
    AttendanceUpserted,
    AttendanceReplaced,
    AttendanceRemoved,
    SyncMarked,
    SyncFailed,
    ErrorsCleared,
]
