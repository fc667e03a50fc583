from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import current_app, flash, g, redirect, request, session, url_for

from ..core.exceptions import ValidationError
from ..common.datetime_utils import parse_optional_date

WORKSPACE_KEY = "workspace_key"


def login_required_for(container):
    """Decorator factory: resolve the caller's workspace into `g.workspace`.

    Page loads refetch the user's data when the last load failed or is
    older than `STATE_MAX_AGE_SECONDS`; pending coordinator errors are then
    flashed before the view runs.
    """

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            workspace = container.workspaces.get(session.get(WORKSPACE_KEY))
            if workspace is None:
                session.pop(WORKSPACE_KEY, None)
                flash("Please sign in to continue.", "warning")
                return redirect(url_for("login"))

            coordinator = workspace.coordinator
            if request.method == "GET" and coordinator.is_stale(current_app.config["STATE_MAX_AGE_SECONDS"]):
                coordinator.load()

            g.workspace = workspace
            for message in workspace.coordinator.take_errors():
                flash(message, "danger")
            return view(*args, **kwargs)

        return wrapper

    return login_required


def date_arg(value: Optional[str], field_name: str):
    try:
        return parse_optional_date(value)
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def department_arg(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None
