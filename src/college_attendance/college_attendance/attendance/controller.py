from __future__ import annotations

from flask import Flask, flash, g, redirect, render_template, request, url_for

from ..common.datetime_utils import today_local
from ..common.web import date_arg, department_arg, login_required_for
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..container import Container


def _status_arg(value: str) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError("Invalid attendance status")


def register(app: Flask, container: Container) -> None:
    login_required = login_required_for(container)

    def _back(day, department):
        return redirect(url_for("attendance", date=day.isoformat(), department=department or ""))

    @app.route("/attendance", methods=["GET"], endpoint="attendance")
    @login_required
    def attendance():
        try:
            day = date_arg(request.args.get("date"), "Date") or today_local()
        except ValidationError as e:
            flash(str(e), "warning")
            day = today_local()
        department = department_arg(request.args.get("department"))

        rows = g.workspace.attendance.day_sheet(day=day, department=department)
        return render_template(
            "attendance.html",
            rows=rows,
            day=day,
            department=department or "",
            active_page="attendance",
        )

    @app.route("/attendance/mark", methods=["POST"], endpoint="mark_attendance")
    @login_required
    def mark_attendance():
        department = department_arg(request.form.get("department"))
        day = today_local()
        try:
            day = date_arg(request.form.get("date"), "Date") or day
            status = _status_arg(request.form.get("status", ""))
            g.workspace.attendance.mark(student_id=request.form.get("student_id", ""), day=day, status=status)
        except ValidationError as e:
            flash(str(e), "warning")
        return _back(day, department)

    @app.route("/attendance/bulk", methods=["POST"], endpoint="bulk_attendance")
    @login_required
    def bulk_attendance():
        department = department_arg(request.form.get("department"))
        day = today_local()
        try:
            day = date_arg(request.form.get("date"), "Date") or day
            if not request.form.get("status"):
                raise ValidationError("Select a bulk action first")
            status = _status_arg(request.form["status"])
            mutations = g.workspace.attendance.apply_bulk(day=day, status=status, department=department)
        except ValidationError as e:
            flash(str(e), "warning")
            return _back(day, department)

        marked = sum(1 for m in mutations if m.ok and m.applied)
        kept = sum(1 for m in mutations if m.ok and not m.applied)
        flash(f"Marked {marked} student(s) as {status.value}.", "success" if marked == len(mutations) else "warning")
        if kept:
            flash(f"{kept} student(s) were already marked by someone else and were left unchanged.", "info")
        return _back(day, department)
