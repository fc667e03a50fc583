from __future__ import annotations

from typing import Iterable, Mapping, Optional

from ..common.validators import require_choice, require_non_empty
from ..core.constants import DEPARTMENTS, YEARS
from ..state.coordinator import Coordinator, Mutation
from .model import Student, StudentDraft


def search_students(students: Iterable[Student], *, term: str = "", department: Optional[str] = None) -> list[Student]:
    """Case-insensitive match on name or roll number, within an optional department."""

    needle = (term or "").strip().lower()
    out = []
    for s in students:
        matches_search = not needle or needle in s.name.lower() or needle in s.roll_number.lower()
        matches_department = not department or s.department == department
        if matches_search and matches_department:
            out.append(s)
    return out


def parse_student_form(form: Mapping[str, str]) -> StudentDraft:
    return StudentDraft(
        name=require_non_empty(form.get("name", ""), "Name"),
        roll_number=require_non_empty(form.get("roll_number", ""), "Roll number"),
        department=require_choice(form.get("department", ""), "Department", DEPARTMENTS),
        email=(form.get("email") or "").strip(),
        phone=(form.get("phone") or "").strip(),
        year=require_choice(form.get("year", ""), "Year", YEARS),
    )


class StudentService:
    """Use case: manage the student roster."""

    def __init__(self, coordinator: Coordinator):
        self._coordinator = coordinator

    def list(self, *, term: str = "", department: Optional[str] = None) -> list[Student]:
        return search_students(self._coordinator.state.students, term=term, department=department)

    def get(self, student_id: str) -> Optional[Student]:
        return self._coordinator.state.student(student_id)

    def add(self, form: Mapping[str, str]) -> Mutation[Student]:
        return self._coordinator.add_student(parse_student_form(form))

    def update(self, student_id: str, form: Mapping[str, str]) -> Mutation[Student]:
        return self._coordinator.update_student(student_id, parse_student_form(form))

    def delete(self, student_id: str) -> Mutation[Student]:
        return self._coordinator.delete_student(student_id)
