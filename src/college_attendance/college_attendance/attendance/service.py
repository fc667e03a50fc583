from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import clock_time, format_clock, now_local
from ..core.constants import PENDING_ID_PREFIX
from ..core.enums import AttendanceStatus, SyncStatus
from ..core.exceptions import ValidationError
from ..state.coordinator import Coordinator, Mutation
from ..students.model import Student
from .model import AttendanceChanges, AttendanceDraft, AttendanceRecord

UNMARKED = "unmarked"


@dataclass(frozen=True)
class DaySheetRow:
    """One line of the marking view: a student and its record for the day."""

    student: Student
    record: Optional[AttendanceRecord]
    sync: SyncStatus = SyncStatus.COMMITTED

    @property
    def state(self) -> str:
        return self.record.status.value if self.record else UNMARKED

    @property
    def time_in(self) -> str:
        return format_clock(self.record.time_in) if self.record else ""


def students_in_department(students, department: Optional[str]) -> list[Student]:
    """All students when no department is selected."""
    return [s for s in students if not department or s.department == department]


class AttendanceService:
    """Use case: mark daily attendance.

    Per (student, date) the state is unmarked/present/late/absent and any
    state may move to any other. Present and late stamp the wall-clock time
    as time-in; absent clears it.
    """

    def __init__(self, coordinator: Coordinator, *, clock: Callable[[], datetime] = now_local):
        self._coordinator = coordinator
        self._clock = clock

    def day_sheet(self, *, day: date, department: Optional[str] = None) -> list[DaySheetRow]:
        state = self._coordinator.state
        rows = []
        for student in students_in_department(state.students, department):
            record = state.attendance_for(student.id, day)
            sync = state.status_of(record.id) if record else state.status_of(student.id)
            rows.append(DaySheetRow(student=student, record=record, sync=sync))
        return rows

    def mark(
        self, *, student_id: str, day: date, status: AttendanceStatus, overwrite: bool = True
    ) -> Mutation[AttendanceRecord]:
        if self._coordinator.state.student(student_id) is None:
            raise ValidationError("Student not found")

        time_in = clock_time(self._clock()) if status.stamps_time_in else None
        existing = self._coordinator.state.attendance_for(student_id, day)
        # A pending row has no backend id yet; the keyed create reconciles it.
        if existing and not existing.id.startswith(PENDING_ID_PREFIX):
            return self._coordinator.update_attendance(existing.id, AttendanceChanges(status=status, time_in=time_in))

        return self._coordinator.mark_attendance(
            AttendanceDraft(student_id=student_id, date=day, status=status, time_in=time_in),
            overwrite=overwrite,
        )

    def apply_bulk(
        self, *, day: date, status: AttendanceStatus, department: Optional[str] = None
    ) -> list[Mutation[AttendanceRecord]]:
        """Mark every currently unmarked student of the filter; existing records are left alone.

        Rows written on the backend since the last load are kept too: the
        insert does not overwrite and such mutations come back with
        `applied=False`.
        """

        unmarked = [row.student for row in self.day_sheet(day=day, department=department) if row.record is None]
        return [self.mark(student_id=s.id, day=day, status=status, overwrite=False) for s in unmarked]
