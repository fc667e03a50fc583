from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, replace
from typing import Callable, Generic, Optional, TypeVar

from ..attendance.model import AttendanceChanges, AttendanceDraft, AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..core.constants import PENDING_ID_PREFIX
from ..core.enums import SyncStatus
from ..core.exceptions import BackendError, ValidationError
from ..students.model import Student, StudentDraft
from ..students.repository import StudentRepository
from .actions import (
    AttendanceRemoved,
    AttendanceReplaced,
    AttendanceUpserted,
    Loaded,
    LoadFailed,
    StudentRemoved,
    StudentReplaced,
    StudentUpserted,
    SyncFailed,
    SyncMarked,
)
from .model import AppState
from .store import Store

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Mutation(Generic[T]):
    """Outcome of one two-phase write."""

    status: SyncStatus
    record: Optional[T] = None
    error: Optional[str] = None
    # False when the backend kept a row that was already there
    applied: bool = True

    @property
    def ok(self) -> bool:
        return self.status == SyncStatus.COMMITTED


def _pending_id() -> str:
    return f"{PENDING_ID_PREFIX}{uuid.uuid4().hex}"


class Coordinator:
    """Owns the roster/attendance state of one signed-in user.

    Every write is two-phase: the local row is applied as pending, the
    backend call is made, then the row is reconciled with the server's
    version (committed) or reverted (failed). Failures are logged and kept
    in `state.errors` for the views to surface; nothing is retried.
    """

    def __init__(
        self,
        *,
        user_id: str,
        students: StudentRepository,
        attendance: AttendanceRepository,
        store: Optional[Store] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._user_id = user_id
        self._students = students
        self._attendance = attendance
        self._store = store or Store()
        self._clock = clock
        self._loaded_at: Optional[float] = None

    @property
    def state(self) -> AppState:
        return self._store.state

    @property
    def user_id(self) -> str:
        return self._user_id

    def load(self) -> AppState:
        """Full refetch; replaces the local roster and attendance."""
        try:
            students = self._students.list_all()
            attendance = self._attendance.list_all()
        except BackendError as e:
            logger.error("Loading data for %s failed: %s", self._user_id, e)
            self._loaded_at = None
            return self._store.dispatch(LoadFailed(f"Could not load data: {e.message}"))
        self._loaded_at = self._clock()
        return self._store.dispatch(Loaded(students=students, attendance=attendance))

    def is_stale(self, max_age: float) -> bool:
        """True when the last load failed, never happened or is older than `max_age` seconds."""
        if self._loaded_at is None:
            return True
        return self._clock() - self._loaded_at > max_age

    def take_errors(self) -> tuple[str, ...]:
        return self._store.drain_errors()

    # students

    def add_student(self, draft: StudentDraft) -> Mutation[Student]:
        placeholder = Student(id=_pending_id(), user_id=self._user_id, **draft.as_payload())
        self._store.dispatch(StudentUpserted(placeholder, SyncStatus.PENDING))
        try:
            created = self._students.create(user_id=self._user_id, draft=draft)
        except BackendError as e:
            logger.error("Error adding student %s: %s", draft.roll_number, e)
            self._store.dispatch(StudentRemoved(placeholder.id))
            return self._failed(f"Could not add student {draft.name}: {e.message}")

        self._store.dispatch(StudentReplaced(placeholder.id, created))
        return Mutation(SyncStatus.COMMITTED, created)

    def update_student(self, student_id: str, draft: StudentDraft) -> Mutation[Student]:
        previous = self._require_student(student_id)
        self._store.dispatch(StudentUpserted(draft.apply_to(previous), SyncStatus.PENDING))
        try:
            updated = self._students.update(student_id, draft)
        except BackendError as e:
            logger.error("Error updating student %s: %s", student_id, e)
            self._store.dispatch(StudentUpserted(previous, SyncStatus.FAILED))
            return self._failed(f"Could not update student {previous.name}: {e.message}", previous)

        self._store.dispatch(StudentUpserted(updated, SyncStatus.COMMITTED))
        self._refresh_embedded_student(updated)
        return Mutation(SyncStatus.COMMITTED, updated)

    def delete_student(self, student_id: str) -> Mutation[Student]:
        previous = self._require_student(student_id)
        self._store.dispatch(SyncMarked(student_id, SyncStatus.PENDING))
        try:
            self._students.delete(student_id)
        except BackendError as e:
            logger.error("Error deleting student %s: %s", student_id, e)
            self._store.dispatch(SyncMarked(student_id, SyncStatus.FAILED))
            return self._failed(f"Could not delete student {previous.name}: {e.message}", previous)

        self._store.dispatch(StudentRemoved(student_id))
        return Mutation(SyncStatus.COMMITTED, previous)

    # attendance

    def mark_attendance(self, draft: AttendanceDraft, *, overwrite: bool = True) -> Mutation[AttendanceRecord]:
        """Create the record for the draft's (student, date).

        Without `overwrite` a row that already exists on the backend wins:
        it replaces the local placeholder and the mutation reports
        `applied=False`.
        """
        student = self._require_student(draft.student_id)
        placeholder = AttendanceRecord(
            id=_pending_id(),
            user_id=self._user_id,
            student_id=draft.student_id,
            date=draft.date,
            status=draft.status,
            time_in=draft.time_in,
            time_out=draft.time_out,
            remarks=draft.remarks,
            student=student,
        )
        previous = self._store.state.attendance_for(*draft.key)
        self._store.dispatch(AttendanceUpserted(placeholder, SyncStatus.PENDING))
        try:
            created = self._attendance.create(user_id=self._user_id, draft=draft, overwrite=overwrite)
            existing = None if created else self._attendance.get_by_key(*draft.key)
        except BackendError as e:
            logger.error("Error marking attendance for %s on %s: %s", draft.student_id, draft.date, e)
            if previous is not None:
                self._store.dispatch(AttendanceReplaced(placeholder.id, previous, SyncStatus.FAILED))
            else:
                self._store.dispatch(AttendanceRemoved(placeholder.id))
            return self._failed(f"Could not mark attendance for {student.name}: {e.message}", previous)

        if created is None:
            if existing is None:
                logger.error("Attendance for %s on %s conflicted but no row was found", draft.student_id, draft.date)
                self._store.dispatch(AttendanceRemoved(placeholder.id))
                return self._failed(f"Could not mark attendance for {student.name}: record changed, refresh and retry")
            logger.info("Attendance for %s on %s already marked; keeping backend row", draft.student_id, draft.date)
            existing = existing if existing.student else replace(existing, student=student)
            self._store.dispatch(AttendanceReplaced(placeholder.id, existing))
            return Mutation(SyncStatus.COMMITTED, existing, applied=False)

        created = created if created.student else replace(created, student=student)
        self._store.dispatch(AttendanceReplaced(placeholder.id, created))
        return Mutation(SyncStatus.COMMITTED, created)

    def update_attendance(self, record_id: str, changes: AttendanceChanges) -> Mutation[AttendanceRecord]:
        previous = next((r for r in self._store.state.attendance if r.id == record_id), None)
        if previous is None:
            raise ValidationError("Attendance record not found")

        self._store.dispatch(AttendanceUpserted(changes.apply_to(previous), SyncStatus.PENDING))
        try:
            updated = self._attendance.update(record_id, changes)
        except BackendError as e:
            logger.error("Error updating attendance %s: %s", record_id, e)
            self._store.dispatch(AttendanceUpserted(previous, SyncStatus.FAILED))
            return self._failed(f"Could not update attendance: {e.message}", previous)

        updated = updated if updated.student else replace(updated, student=previous.student)
        self._store.dispatch(AttendanceUpserted(updated, SyncStatus.COMMITTED))
        return Mutation(SyncStatus.COMMITTED, updated)

    # helpers

    def _require_student(self, student_id: str) -> Student:
        student = self._store.state.student(student_id)
        if student is None:
            raise ValidationError("Student not found")
        return student

    def _refresh_embedded_student(self, student: Student) -> None:
        for r in self._store.state.attendance:
            if r.student_id == student.id and r.student is not None:
                self._store.dispatch(AttendanceUpserted(replace(r, student=student), self._store.state.status_of(r.id)))

    def _failed(self, message: str, record=None) -> Mutation:
        self._store.dispatch(SyncFailed(message))
        return Mutation(SyncStatus.FAILED, record, message)
