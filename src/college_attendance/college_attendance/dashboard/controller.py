from __future__ import annotations

from flask import Flask, flash, g, redirect, render_template, request, url_for

from ..common.datetime_utils import today_local
from ..common.web import login_required_for
from ..container import Container
from .service import dashboard_stats, department_overview


def register(app: Flask, container: Container) -> None:
    login_required = login_required_for(container)

    @app.route("/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        state = g.workspace.coordinator.state
        stats = dashboard_stats(state.students, state.attendance, today_local())
        return render_template("dashboard.html", stats=stats, active_page="dashboard")

    @app.route("/departments", endpoint="departments")
    @login_required
    def departments():
        overview = department_overview(g.workspace.coordinator.state.students)
        return render_template("departments.html", overview=overview, active_page="departments")

    @app.route("/refresh", methods=["POST"], endpoint="refresh")
    @login_required
    def refresh():
        coordinator = g.workspace.coordinator
        coordinator.load()
        for message in coordinator.take_errors():
            flash(message, "danger")
        target = request.form.get("next") or ""
        # Only same-site paths.
        if not target.startswith("/") or target.startswith("//"):
            target = url_for("dashboard")
        return redirect(target)
