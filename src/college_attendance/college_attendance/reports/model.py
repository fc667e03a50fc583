from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import ReportType
from ..students.model import Student


@dataclass(frozen=True)
class ReportFilter:
    """Inclusive date range and department; `None` means unbounded / all."""

    date_from: Optional[date] = None
    date_to: Optional[date] = None
    department: Optional[str] = None


@dataclass(frozen=True)
class SummaryReport:
    total_classes: int
    total_students: int
    present: int
    absent: int
    late: int
    attendance_rate: int


@dataclass(frozen=True)
class StudentReportRow:
    student: Student
    total_classes: int
    present: int
    absent: int
    late: int
    rate: int


@dataclass(frozen=True)
class DepartmentReportRow:
    department: str
    total_students: int
    total_classes: int
    present: int
    absent: int
    late: int
    rate: int


@dataclass(frozen=True)
class ReportData:
    report_type: ReportType
    filter: ReportFilter
    summary: SummaryReport
    students: list[StudentReportRow] = field(default_factory=list)
    departments: list[DepartmentReportRow] = field(default_factory=list)
