from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Mapping, Optional

from ..attendance.model import AttendanceRecord
from ..core.enums import SyncStatus
from ..students.model import Student
from .actions import (
    Action,
    AttendanceRemoved,
    AttendanceReplaced,
    AttendanceUpserted,
    ErrorsCleared,
    Loaded,
    LoadFailed,
    StudentRemoved,
    StudentReplaced,
    StudentUpserted,
    SyncFailed,
    SyncMarked,
)
from .model import AppState, _frozen


def reduce(state: AppState, action: Action) -> AppState:
    """Pure state transition. Never mutates `state`."""

    if isinstance(action, Loaded):
        return AppState(
            students=_unique_students(action.students),
            attendance=_unique_attendance(action.attendance),
            errors=state.errors,
            loaded=True,
        )

    if isinstance(action, LoadFailed):
        return replace(state, errors=state.errors + (action.message,), loaded=True)

    if isinstance(action, StudentUpserted):
        students = _put_student(state.students, action.student, at_id=action.student.id)
        return replace(state, students=students, sync=_set_sync(state.sync, action.student.id, action.status))

    if isinstance(action, StudentReplaced):
        students = _put_student(state.students, action.student, at_id=action.old_id)
        sync = _set_sync(_drop_sync(state.sync, [action.old_id]), action.student.id, action.status)
        return replace(state, students=students, sync=sync)

    if isinstance(action, StudentRemoved):
        removed = [r.id for r in state.attendance if r.student_id == action.student_id]
        return replace(
            state,
            students=tuple(s for s in state.students if s.id != action.student_id),
            attendance=tuple(r for r in state.attendance if r.student_id != action.student_id),
            sync=_drop_sync(state.sync, [action.student_id, *removed]),
        )

    if isinstance(action, AttendanceUpserted):
        attendance, displaced = _put_record(state.attendance, action.record, at_id=action.record.id)
        sync = _set_sync(_drop_sync(state.sync, displaced), action.record.id, action.status)
        return replace(state, attendance=attendance, sync=sync)

    if isinstance(action, AttendanceReplaced):
        attendance, displaced = _put_record(state.attendance, action.record, at_id=action.old_id)
        sync = _set_sync(_drop_sync(state.sync, [action.old_id, *displaced]), action.record.id, action.status)
        return replace(state, attendance=attendance, sync=sync)

    if isinstance(action, AttendanceRemoved):
        return replace(
            state,
            attendance=tuple(r for r in state.attendance if r.id != action.record_id),
            sync=_drop_sync(state.sync, [action.record_id]),
        )

    if isinstance(action, SyncMarked):
        return replace(state, sync=_set_sync(state.sync, action.record_id, action.status))

    if isinstance(action, SyncFailed):
        return replace(state, errors=state.errors + (action.message,))

    if isinstance(action, ErrorsCleared):
        return replace(state, errors=())

    raise TypeError(f"Unknown action: {action!r}")


def _unique_students(students: Iterable[Student]) -> tuple[Student, ...]:
    seen: set[str] = set()
    out = []
    for s in students:
        if s.id in seen:
            continue
        seen.add(s.id)
        out.append(s)
    return tuple(out)


def _unique_attendance(records: Iterable[AttendanceRecord]) -> tuple[AttendanceRecord, ...]:
    # Input is newest first, so the first row per key wins.
    seen: set = set()
    out = []
    for r in records:
        if r.key in seen:
            continue
        seen.add(r.key)
        out.append(r)
    return tuple(out)


def _put_student(students: tuple[Student, ...], student: Student, *, at_id: str) -> tuple[Student, ...]:
    for i, s in enumerate(students):
        if s.id == at_id:
            rest = tuple(x for x in students[i + 1:] if x.id != student.id)
            head = tuple(x for x in students[:i] if x.id != student.id)
            return head + (student,) + rest
    return (student,) + tuple(s for s in students if s.id != student.id)


def _put_record(
    records: tuple[AttendanceRecord, ...], record: AttendanceRecord, *, at_id: str
) -> tuple[tuple[AttendanceRecord, ...], list[str]]:
    """Place `record` at the slot of `at_id` (or its key) and drop any other row sharing its key.

    Returns the new tuple and the ids of displaced rows.
    """

    slot: Optional[int] = next((i for i, r in enumerate(records) if r.id == at_id), None)
    if slot is None:
        slot = next((i for i, r in enumerate(records) if r.key == record.key), None)

    displaced = [r.id for i, r in enumerate(records) if i != slot and r.key == record.key and r.id != record.id]
    if slot is not None and records[slot].id not in (at_id, record.id):
        displaced.append(records[slot].id)

    if slot is None:
        kept = tuple(r for r in records if r.key != record.key and r.id != record.id)
        return (record,) + kept, displaced

    out = []
    for i, r in enumerate(records):
        if i == slot:
            out.append(record)
        elif r.key == record.key or r.id == record.id:
            continue
        else:
            out.append(r)
    return tuple(out), displaced


def _set_sync(sync: Mapping[str, SyncStatus], record_id: str, status: SyncStatus) -> Mapping[str, SyncStatus]:
    updated = dict(sync)
    if status == SyncStatus.COMMITTED:
        updated.pop(record_id, None)
    else:
        updated[record_id] = status
    return _frozen(updated)


def _drop_sync(sync: Mapping[str, SyncStatus], record_ids: Iterable[str]) -> Mapping[str, SyncStatus]:
    updated = dict(sync)
    for record_id in record_ids:
        updated.pop(record_id, None)
    return _frozen(updated)
