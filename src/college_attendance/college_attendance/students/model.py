from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a student on the roster."""

    id: str
    user_id: str
    name: str
    roll_number: str
    department: str
    email: str
    phone: str
    year: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class StudentDraft:
    """Editable fields of a student (add/edit form)."""

    name: str
    roll_number: str
    department: str
    email: str = ""
    phone: str = ""
    year: str = ""

    @classmethod
    def from_student(cls, student: Student) -> "StudentDraft":
        return cls(
            name=student.name,
            roll_number=student.roll_number,
            department=student.department,
            email=student.email,
            phone=student.phone,
            year=student.year,
        )

    def as_payload(self) -> dict:
        return asdict(self)

    def apply_to(self, student: Student) -> Student:
        return Student(
            id=student.id,
            user_id=student.user_id,
            created_at=student.created_at,
            updated_at=student.updated_at,
            **self.as_payload(),
        )
