from __future__ import annotations

from flask import Flask, abort, flash, g, redirect, render_template, request, url_for

from ..common.web import department_arg, login_required_for
from ..core.exceptions import ValidationError
from ..container import Container
from .model import StudentDraft


def register(app: Flask, container: Container) -> None:
    login_required = login_required_for(container)

    def _render(*, form=None, editing=None, show_form=False, status=200):
        term = request.args.get("q", "")
        department = department_arg(request.args.get("department"))
        students = g.workspace.students.list(term=term, department=department)
        return (
            render_template(
                "students.html",
                students=students,
                sync=g.workspace.coordinator.state.sync,
                term=term,
                department=department or "",
                form=form or {},
                editing=editing,
                show_form=show_form,
                active_page="students",
            ),
            status,
        )

    @app.route("/students", methods=["GET", "POST"], endpoint="students")
    @login_required
    def students():
        if request.method == "GET":
            return _render(show_form=bool(request.args.get("new")))

        try:
            mutation = g.workspace.students.add(request.form)
        except ValidationError as e:
            flash(str(e), "warning")
            return _render(form=request.form, show_form=True, status=400)

        if mutation.ok:
            flash(f"Student {mutation.record.name} added.", "success")
        return redirect(url_for("students"))

    @app.route("/students/<student_id>/edit", methods=["GET", "POST"], endpoint="edit_student")
    @login_required
    def edit_student(student_id: str):
        student = g.workspace.students.get(student_id)
        if student is None:
            abort(404)

        if request.method == "GET":
            draft = StudentDraft.from_student(student)
            return _render(form=draft.as_payload(), editing=student, show_form=True)

        try:
            mutation = g.workspace.students.update(student_id, request.form)
        except ValidationError as e:
            flash(str(e), "warning")
            return _render(form=request.form, editing=student, show_form=True, status=400)

        if mutation.ok:
            flash(f"Student {mutation.record.name} updated.", "success")
        return redirect(url_for("students"))

    @app.route("/students/<student_id>/delete", methods=["POST"], endpoint="delete_student")
    @login_required
    def delete_student(student_id: str):
        try:
            mutation = g.workspace.students.delete(student_id)
        except ValidationError as e:
            flash(str(e), "warning")
            return redirect(url_for("students"))

        if mutation.ok:
            flash(f"Student {mutation.record.name} deleted.", "success")
        return redirect(url_for("students"))
