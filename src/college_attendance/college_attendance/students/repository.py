from __future__ import annotations

from typing import Protocol, Sequence

from .model import Student, StudentDraft


class StudentRepository(Protocol):
    """Repository interface for the `students` table.

    Services depend on this protocol, never on the backend client directly.
    """

    def list_all(self) -> Sequence[Student]:
        """All students, newest first."""
        raise NotImplementedError

    def create(self, *, user_id: str, draft: StudentDraft) -> Student:
        raise NotImplementedError

    def update(self, student_id: str, draft: StudentDraft) -> Student:
        raise NotImplementedError

    def delete(self, student_id: str) -> None:
        raise NotImplementedError
