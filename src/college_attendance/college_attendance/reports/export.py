from __future__ import annotations

import csv
import io
from datetime import date

from ..core.constants import REPORT_FILENAME_PREFIX
from ..core.enums import ReportType
from .model import ReportData

SUMMARY_HEADER = ["Metric", "Value"]
STUDENT_HEADER = [
    "Name",
    "Roll Number",
    "Department",
    "Year",
    "Total Classes",
    "Present",
    "Absent",
    "Late",
    "Attendance Rate",
]
DEPARTMENT_HEADER = [
    "Department",
    "Total Students",
    "Total Classes",
    "Present",
    "Absent",
    "Late",
    "Attendance Rate",
]


def _percent(rate: int) -> str:
    return f"{rate}%"


def report_to_csv(data: ReportData) -> str:
    """Serialize the selected report, one header row then one row per item."""

    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")

    if data.report_type == ReportType.STUDENT:
        writer.writerow(STUDENT_HEADER)
        for row in data.students:
            s = row.student
            writer.writerow(
                [s.name, s.roll_number, s.department, s.year, row.total_classes, row.present, row.absent, row.late, _percent(row.rate)]
            )
    elif data.report_type == ReportType.DETAILED:
        writer.writerow(DEPARTMENT_HEADER)
        for row in data.departments:
            writer.writerow(
                [row.department, row.total_students, row.total_classes, row.present, row.absent, row.late, _percent(row.rate)]
            )
    else:
        summary = data.summary
        writer.writerow(SUMMARY_HEADER)
        writer.writerows(
            [
                ["Total Classes", summary.total_classes],
                ["Total Students", summary.total_students],
                ["Present", summary.present],
                ["Absent", summary.absent],
                ["Late", summary.late],
                ["Attendance Rate", _percent(summary.attendance_rate)],
            ]
        )

    return out.getvalue()


def report_filename(today: date) -> str:
    return f"{REPORT_FILENAME_PREFIX}_{today.isoformat()}.csv"
