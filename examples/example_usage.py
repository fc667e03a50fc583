"""Example: use the service layer without Flask.

Signs in, opens the workspace and prints this month's summary report.
Usage: python -m examples.example_usage <username> <password>
"""

import importlib
import sys

from config import get_settings_module

from src.college_attendance.college_attendance.common.datetime_utils import today_local
from src.college_attendance.college_attendance.container import build_container
from src.college_attendance.college_attendance.reports.model import ReportFilter
from src.college_attendance.college_attendance.reports.service import summary_report


def main(username: str, password: str):
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        backend_config={"url": settings.SUPABASE_URL, "anon_key": settings.SUPABASE_ANON_KEY},
        email_domain=settings.EMAIL_DOMAIN,
    )
    session = container.auth_service.sign_in(username, password)
    workspace = container.workspace_factory.open(session)

    today = today_local()
    state = workspace.coordinator.state
    print(summary_report(state.students, state.attendance, ReportFilter(date_from=today.replace(day=1), date_to=today)))
    container.auth_service.sign_out(session)


if __name__ == "__main__":
    main(*sys.argv[1:3])
