from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.web import WORKSPACE_KEY
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, BackendError, ValidationError
from ..container import Container
from .model import SignUpForm

logger = logging.getLogger(__name__)

REGISTERED_NOTICE = "Registration successful! Please login with your credentials."


def register(app: Flask, container: Container) -> None:
    def _render_login(*, mode: str = "login", error: str = "", notice: str = "", status: int = 200):
        return (
            render_template(
                "login.html",
                mode=mode,
                error=error,
                notice=notice,
                form=request.form,
                roles=[r.value for r in Role],
            ),
            status,
        )

    def _close_workspace(key):
        workspace = container.workspaces.discard(key)
        if workspace is not None:
            container.auth_service.sign_out(workspace.session)

    @app.route("/", methods=["GET", "POST"], endpoint="login")
    def login():
        if container.workspaces.get(session.get(WORKSPACE_KEY)):
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            username = request.form.get("username", "")
            password = request.form.get("password", "")
            try:
                auth_session = container.auth_service.sign_in(username, password)
            except (AuthenticationError, ValidationError) as e:
                return _render_login(error=str(e), status=401)
            except BackendError as e:
                logger.error("Sign-in for %s failed: %s", username, e)
                return _render_login(error=e.message, status=502)

            try:
                workspace = container.workspace_factory.open(auth_session)
            except BackendError as e:
                logger.error("Opening workspace for %s failed: %s", username, e)
                container.auth_service.sign_out(auth_session)
                return _render_login(error=e.message, status=502)

            _close_workspace(session.get(WORKSPACE_KEY))
            session.clear()
            session[WORKSPACE_KEY] = container.workspaces.add(workspace)
            flash(f"Welcome, {workspace.profile.full_name or workspace.profile.username}!", "success")
            return redirect(url_for("dashboard"))

        return _render_login()

    @app.route("/signup", methods=["GET", "POST"], endpoint="signup")
    def signup():
        if request.method == "GET":
            return _render_login(mode="signup")

        try:
            try:
                role = Role(request.form.get("role") or Role.TEACHER.value)
            except ValueError:
                raise ValidationError("Invalid role")

            container.auth_service.sign_up(
                SignUpForm(
                    username=request.form.get("username", ""),
                    password=request.form.get("password", ""),
                    full_name=request.form.get("full_name", ""),
                    role=role,
                    department=request.form.get("department", ""),
                )
            )
        except (AuthenticationError, ValidationError) as e:
            return _render_login(mode="signup", error=str(e), status=400)

        return _render_login(mode="login", notice=REGISTERED_NOTICE)

    @app.route("/logout", endpoint="logout")
    def logout():
        _close_workspace(session.get(WORKSPACE_KEY))
        session.clear()
        flash("You have been signed out.", "info")
        return redirect(url_for("login"))
