from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import AttendanceStatus
from ..students.model import Student


def _clock(value: Optional[time]) -> Optional[str]:
    return value.isoformat(timespec="minutes") if value else None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: attendance of one student on one date."""

    id: str
    user_id: str
    student_id: str
    date: date
    status: AttendanceStatus
    time_in: Optional[time] = None
    time_out: Optional[time] = None
    remarks: Optional[str] = None
    created_at: Optional[datetime] = None
    student: Optional[Student] = None

    @property
    def key(self) -> tuple[str, date]:
        """Uniqueness key: one record per (student, date)."""
        return (self.student_id, self.date)


@dataclass(frozen=True)
class AttendanceDraft:
    """A new record as submitted by the marking view."""

    student_id: str
    date: date
    status: AttendanceStatus
    time_in: Optional[time] = None
    time_out: Optional[time] = None
    remarks: Optional[str] = None

    @property
    def key(self) -> tuple[str, date]:
        return (self.student_id, self.date)

    def as_payload(self) -> dict:
        return {
            "student_id": self.student_id,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "time_in": _clock(self.time_in),
            "time_out": _clock(self.time_out),
            "remarks": self.remarks,
        }


@dataclass(frozen=True)
class AttendanceChanges:
    """Status change on an existing record; `time_in=None` clears it."""

    status: AttendanceStatus
    time_in: Optional[time] = None

    def as_payload(self) -> dict:
        return {"status": self.status.value, "time_in": _clock(self.time_in)}

    def apply_to(self, record: AttendanceRecord) -> AttendanceRecord:
        return replace(record, status=self.status, time_in=self.time_in)
