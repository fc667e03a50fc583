"""Report aggregation.

Pure reductions over the in-memory roster and attendance; nothing here
talks to the backend.

Every rate is `(present + late) / (students in scope x total classes)`,
rounded half up to an integer percent and 0 when the denominator is 0. The
scope is the filtered roster for the summary, one student for a student
row and the department's roster for a department row, so the three
reports agree with each other.
"""
from __future__ import annotations

import math
from collections import Counter
from fractions import Fraction
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..core.constants import DEPARTMENTS
from ..core.enums import AttendanceStatus, ReportType
from ..students.model import Student
from .model import DepartmentReportRow, ReportData, ReportFilter, StudentReportRow, SummaryReport


def attendance_rate(attended: int, students: int, classes: int) -> int:
    denominator = students * classes
    if denominator <= 0:
        return 0
    return math.floor(Fraction(attended * 100, denominator) + Fraction(1, 2))


def _department_of(record: AttendanceRecord, by_id: dict[str, Student]) -> Optional[str]:
    student = by_id.get(record.student_id) or record.student
    return student.department if student else None


def filter_students(students: Iterable[Student], flt: ReportFilter) -> list[Student]:
    return [s for s in students if not flt.department or s.department == flt.department]


def filter_attendance(
    attendance: Iterable[AttendanceRecord], students: Iterable[Student], flt: ReportFilter
) -> list[AttendanceRecord]:
    by_id = {s.id: s for s in students}
    out = []
    for r in attendance:
        if flt.date_from and r.date < flt.date_from:
            continue
        if flt.date_to and r.date > flt.date_to:
            continue
        if flt.department and _department_of(r, by_id) != flt.department:
            continue
        out.append(r)
    return out


def total_classes(records: Iterable[AttendanceRecord]) -> int:
    return len({r.date for r in records})


def _counts(records: Iterable[AttendanceRecord]) -> Counter:
    return Counter(r.status for r in records)


def summary_report(
    students: Sequence[Student], attendance: Sequence[AttendanceRecord], flt: ReportFilter
) -> SummaryReport:
    records = filter_attendance(attendance, students, flt)
    scope = filter_students(students, flt)
    classes = total_classes(records)
    counts = _counts(records)

    present = counts[AttendanceStatus.PRESENT]
    late = counts[AttendanceStatus.LATE]
    return SummaryReport(
        total_classes=classes,
        total_students=len(scope),
        present=present,
        absent=counts[AttendanceStatus.ABSENT],
        late=late,
        attendance_rate=attendance_rate(present + late, len(scope), classes),
    )


def student_report(
    students: Sequence[Student], attendance: Sequence[AttendanceRecord], flt: ReportFilter
) -> list[StudentReportRow]:
    records = filter_attendance(attendance, students, flt)
    classes = total_classes(records)

    per_student: dict[str, Counter] = {}
    for r in records:
        per_student.setdefault(r.student_id, Counter())[r.status] += 1

    rows = []
    for student in filter_students(students, flt):
        counts = per_student.get(student.id, Counter())
        present = counts[AttendanceStatus.PRESENT]
        late = counts[AttendanceStatus.LATE]
        rows.append(
            StudentReportRow(
                student=student,
                total_classes=classes,
                present=present,
                absent=counts[AttendanceStatus.ABSENT],
                late=late,
                rate=attendance_rate(present + late, 1, classes),
            )
        )
    return rows


def known_departments(students: Iterable[Student]) -> list[str]:
    """Configured departments first, then any other department found on the roster."""

    extra = sorted({s.department for s in students if s.department and s.department not in DEPARTMENTS})
    return list(DEPARTMENTS) + extra


def department_report(
    students: Sequence[Student], attendance: Sequence[AttendanceRecord], flt: ReportFilter
) -> list[DepartmentReportRow]:
    by_id = {s.id: s for s in students}
    records = filter_attendance(attendance, students, flt)
    classes = total_classes(records)

    rows = []
    for department in known_departments(students):
        if flt.department and department != flt.department:
            continue
        roster = [s for s in students if s.department == department]
        if not roster:
            continue

        counts = _counts(r for r in records if _department_of(r, by_id) == department)
        present = counts[AttendanceStatus.PRESENT]
        late = counts[AttendanceStatus.LATE]
        rows.append(
            DepartmentReportRow(
                department=department,
                total_students=len(roster),
                total_classes=classes,
                present=present,
                absent=counts[AttendanceStatus.ABSENT],
                late=late,
                rate=attendance_rate(present + late, len(roster), classes),
            )
        )
    return rows


def build_report(
    report_type: ReportType,
    students: Sequence[Student],
    attendance: Sequence[AttendanceRecord],
    flt: ReportFilter,
) -> ReportData:
    data = ReportData(
        report_type=report_type,
        filter=flt,
        summary=summary_report(students, attendance, flt),
    )
    if report_type == ReportType.STUDENT:
        return ReportData(report_type, flt, data.summary, students=student_report(students, attendance, flt))
    if report_type == ReportType.DETAILED:
        return ReportData(report_type, flt, data.summary, departments=department_report(students, attendance, flt))
    return data
