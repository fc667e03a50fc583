from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Mapping, Optional

from ..attendance.model import AttendanceRecord
from ..core.enums import SyncStatus
from ..students.model import Student


def _frozen(mapping: Optional[Mapping[str, SyncStatus]] = None) -> Mapping[str, SyncStatus]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class AppState:
    """Canonical roster and attendance of one signed-in user.

    Immutable: a new state is produced by `reducer.reduce` for every action.
    `sync` maps record ids to their backend status; ids absent from it are
    committed.
    """

    students: tuple[Student, ...] = ()
    attendance: tuple[AttendanceRecord, ...] = ()
    sync: Mapping[str, SyncStatus] = field(default_factory=_frozen)
    errors: tuple[str, ...] = ()
    loaded: bool = False

    def student(self, student_id: str) -> Optional[Student]:
        return next((s for s in self.students if s.id == student_id), None)

    def attendance_for(self, student_id: str, day: date) -> Optional[AttendanceRecord]:
        return next((r for r in self.attendance if r.key == (student_id, day)), None)

    def attendance_on(self, day: date) -> tuple[AttendanceRecord, ...]:
        return tuple(r for r in self.attendance if r.date == day)

    def status_of(self, record_id: str) -> SyncStatus:
        return self.sync.get(record_id, SyncStatus.COMMITTED)
