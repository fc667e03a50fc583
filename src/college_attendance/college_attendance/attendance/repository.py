from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceChanges, AttendanceDraft, AttendanceRecord


class AttendanceRepository(Protocol):
    def list_all(self) -> Sequence[AttendanceRecord]:
        """All records with their student embedded, newest first."""
        raise NotImplementedError

    def get_by_key(self, student_id: str, day: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(self, *, user_id: str, draft: AttendanceDraft, overwrite: bool = True) -> Optional[AttendanceRecord]:
        """Insert keyed on (student_id, date).

        With `overwrite` an existing row for the key is replaced; without it
        the existing row is kept and None is returned.
        """
        raise NotImplementedError

    def update(self, record_id: str, changes: AttendanceChanges) -> AttendanceRecord:
        raise NotImplementedError
