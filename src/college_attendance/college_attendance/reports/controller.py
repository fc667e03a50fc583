from __future__ import annotations

from flask import Flask, flash, g, render_template, request

from ..common.datetime_utils import today_local
from ..common.web import date_arg, department_arg, login_required_for
from ..core.constants import RATE_GOOD, RATE_WARNING
from ..core.enums import ReportType
from ..core.exceptions import ValidationError
from ..container import Container
from .export import report_filename, report_to_csv
from .model import ReportFilter
from .service import build_report


def register(app: Flask, container: Container) -> None:
    login_required = login_required_for(container)

    def _field(parse, *args):
        """Parse one query field; a bad value is flashed and ignored."""
        try:
            return parse(*args)
        except ValidationError as e:
            flash(str(e), "warning")
            return None

    def _report_type(value) -> ReportType:
        try:
            return ReportType(value or ReportType.SUMMARY.value)
        except ValueError:
            raise ValidationError("Unknown report type")

    def _build():
        state = g.workspace.coordinator.state
        report_type = _field(_report_type, request.args.get("type")) or ReportType.SUMMARY
        flt = ReportFilter(
            date_from=_field(date_arg, request.args.get("date_from"), "From date"),
            date_to=_field(date_arg, request.args.get("date_to"), "To date"),
            department=department_arg(request.args.get("department")),
        )
        return build_report(report_type, state.students, state.attendance, flt)

    @app.route("/reports", methods=["GET"], endpoint="reports")
    @login_required
    def reports():
        data = _build()
        return render_template(
            "reports.html",
            data=data,
            report_types=[t.value for t in ReportType],
            rate_good=RATE_GOOD,
            rate_warning=RATE_WARNING,
            active_page="reports",
        )

    @app.route("/reports/export.csv", methods=["GET"], endpoint="export_report")
    @login_required
    def export_report():
        data = _build()
        filename = report_filename(today_local())
        return app.response_class(
            report_to_csv(data).encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
