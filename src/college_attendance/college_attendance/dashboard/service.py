from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from fractions import Fraction
from typing import Sequence

from ..attendance.model import AttendanceRecord
from ..core.constants import DEPARTMENT_PREVIEW_LIMIT, DEPARTMENTS, RECENT_ACTIVITY_LIMIT, YEARS
from ..core.enums import AttendanceStatus
from ..students.model import Student


def _percent(numerator: int, denominator: int) -> int:
    if denominator <= 0:
        return 0
    return math.floor(Fraction(numerator * 100, denominator) + Fraction(1, 2))


@dataclass(frozen=True)
class DepartmentToday:
    name: str
    total: int
    present: int
    rate: int


@dataclass(frozen=True)
class DashboardStats:
    total_students: int
    present_today: int
    attendance_rate: int
    active_departments: int
    departments: list[DepartmentToday]
    recent_activity: list[AttendanceRecord]


def dashboard_stats(students: Sequence[Student], attendance: Sequence[AttendanceRecord], today: date) -> DashboardStats:
    """Today's headline numbers. Only `present` counts here; late is shown in reports."""

    todays = [r for r in attendance if r.date == today]
    present = [r for r in todays if r.status == AttendanceStatus.PRESENT]
    department_of = {s.id: s.department for s in students}

    departments = []
    for name in DEPARTMENTS:
        total = sum(1 for s in students if s.department == name)
        present_here = sum(1 for r in present if department_of.get(r.student_id) == name)
        departments.append(DepartmentToday(name=name, total=total, present=present_here, rate=_percent(present_here, total)))

    return DashboardStats(
        total_students=len(students),
        present_today=len(present),
        attendance_rate=_percent(len(present), len(students)),
        active_departments=len(DEPARTMENTS),
        departments=departments,
        recent_activity=todays[:RECENT_ACTIVITY_LIMIT],
    )


@dataclass(frozen=True)
class DepartmentCard:
    name: str
    total: int
    year_breakdown: dict[str, int]
    preview: list[Student]
    more: int

    def year_share(self, year: str) -> int:
        return _percent(self.year_breakdown.get(year, 0), self.total)


@dataclass(frozen=True)
class DepartmentOverview:
    total_departments: int
    departments_with_students: int
    total_students: int
    average_per_department: int
    cards: list[DepartmentCard]


def department_overview(students: Sequence[Student]) -> DepartmentOverview:
    cards = []
    for name in DEPARTMENTS:
        roster = [s for s in students if s.department == name]
        cards.append(
            DepartmentCard(
                name=name,
                total=len(roster),
                year_breakdown={year: sum(1 for s in roster if s.year == year) for year in YEARS},
                preview=roster[:DEPARTMENT_PREVIEW_LIMIT],
                more=max(len(roster) - DEPARTMENT_PREVIEW_LIMIT, 0),
            )
        )

    average = math.floor(Fraction(len(students), len(DEPARTMENTS)) + Fraction(1, 2)) if students else 0
    return DepartmentOverview(
        total_departments=len(DEPARTMENTS),
        departments_with_students=sum(1 for c in cards if c.total > 0),
        total_students=len(students),
        average_per_department=average,
        cards=cards,
    )
