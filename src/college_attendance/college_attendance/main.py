from __future__ import annotations

import importlib
import logging
import sys
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import (
    DEPARTMENTS,
    INSTITUTION_NAME,
    INSTITUTION_SHORT_NAME,
    STATE_MAX_AGE_SECONDS,
    WORKSPACE_IDLE_SECONDS,
    YEARS,
)
from .core.exceptions import ConfigurationError
from .dashboard.controller import register as register_dashboard
from .reports.controller import register as register_reports
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates")

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["STATE_MAX_AGE_SECONDS"] = float(getattr(settings, "STATE_MAX_AGE_SECONDS", STATE_MAX_AGE_SECONDS))

    supabase_url = getattr(settings, "SUPABASE_URL", "")
    supabase_key = getattr(settings, "SUPABASE_ANON_KEY", "")
    if not supabase_url or not supabase_key:
        logger.critical("SUPABASE_URL and SUPABASE_ANON_KEY must be set (settings=%s)", settings_module)
        raise ConfigurationError("Missing Supabase environment variables")

    logger.info("Starting attendance app (settings=%s, backend=%s)", settings_module, supabase_url)

    if container is None:
        container = build_container(
            backend_config={"url": supabase_url, "anon_key": supabase_key},
            email_domain=getattr(settings, "EMAIL_DOMAIN", "gasc.edu"),
            workspace_idle_seconds=float(getattr(settings, "WORKSPACE_IDLE_SECONDS", WORKSPACE_IDLE_SECONDS)),
        )

    @app.context_processor
    def inject_institution():
        return {
            "institution_name": INSTITUTION_NAME,
            "institution_short_name": INSTITUTION_SHORT_NAME,
            "departments": DEPARTMENTS,
            "years": YEARS,
        }

    register_users(app, container)
    register_dashboard(app, container)
    register_students(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app
