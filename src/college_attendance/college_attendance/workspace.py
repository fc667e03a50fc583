from __future__ import annotations

import logging
import secrets
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.supabase_attendance_repository import SupabaseAttendanceRepository
from .common.datetime_utils import now_local
from .core.constants import WORKSPACE_IDLE_SECONDS
from .core.enums import Role
from .state.coordinator import Coordinator
from .students.repository import StudentRepository
from .students.service import StudentService
from .students.supabase_student_repository import SupabaseStudentRepository
from .users.model import AuthSession, UserProfile
from .users.repository import ProfileRepository
from .users.supabase_user_repository import SupabaseProfileRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Workspace:
    """Everything one signed-in user works with."""

    session: AuthSession
    profile: UserProfile
    coordinator: Coordinator
    students: StudentService
    attendance: AttendanceService


class WorkspaceFactory:
    """Builds a workspace on the signed-in backend client and loads its data."""

    def __init__(
        self,
        *,
        profiles: Callable[[Any], ProfileRepository] = SupabaseProfileRepository,
        students: Callable[[Any], StudentRepository] = SupabaseStudentRepository,
        attendance: Callable[[Any], AttendanceRepository] = SupabaseAttendanceRepository,
        clock: Callable[[], datetime] = now_local,
    ):
        self._profiles = profiles
        self._students = students
        self._attendance = attendance
        self._clock = clock

    def open(self, session: AuthSession) -> Workspace:
        profile = self._profiles(session.client).get_by_id(session.user_id)
        if profile is None:
            # The profile row is written by a backend trigger and may lag the sign-in.
            logger.warning("No profile row for %s yet", session.user_id)
            profile = UserProfile(
                id=session.user_id,
                username=session.email.split("@", 1)[0],
                full_name=session.email.split("@", 1)[0],
                role=Role.TEACHER,
                department="",
            )

        coordinator = Coordinator(
            user_id=session.user_id,
            students=self._students(session.client),
            attendance=self._attendance(session.client),
        )
        coordinator.load()
        logger.info(
            "Workspace opened for %s (%d students, %d attendance records)",
            profile.username,
            len(coordinator.state.students),
            len(coordinator.state.attendance),
        )
        return Workspace(
            session=session,
            profile=profile,
            coordinator=coordinator,
            students=StudentService(coordinator),
            attendance=AttendanceService(coordinator, clock=self._clock),
        )


class WorkspaceRegistry:
    """Open workspaces by opaque key; the Flask session stores only the key.

    A workspace unused for `idle_seconds` is evicted on the next `add` or
    `get` and handed to `on_evict` so its backend session can be closed.
    """

    def __init__(
        self,
        *,
        idle_seconds: float = WORKSPACE_IDLE_SECONDS,
        on_evict: Optional[Callable[[Workspace], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._items: dict[str, tuple[Workspace, float]] = {}
        self._idle_seconds = idle_seconds
        self._on_evict = on_evict
        self._clock = clock
        self._lock = threading.Lock()

    def add(self, workspace: Workspace) -> str:
        key = secrets.token_urlsafe(24)
        with self._lock:
            expired = self._expire()
            self._items[key] = (workspace, self._clock())
        self._evicted(expired)
        return key

    def get(self, key: Optional[str]) -> Optional[Workspace]:
        with self._lock:
            expired = self._expire()
            entry = self._items.get(key) if key else None
            if entry is not None:
                self._items[key] = (entry[0], self._clock())
        self._evicted(expired)
        return entry[0] if entry else None

    def discard(self, key: Optional[str]) -> Optional[Workspace]:
        if not key:
            return None
        with self._lock:
            entry = self._items.pop(key, None)
        return entry[0] if entry else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def _expire(self) -> list[Workspace]:
        # Caller holds the lock.
        cutoff = self._clock() - self._idle_seconds
        stale = [k for k, (_, last_used) in self._items.items() if last_used < cutoff]
        return [self._items.pop(k)[0] for k in stale]

    def _evicted(self, workspaces: list[Workspace]) -> None:
        for workspace in workspaces:
            logger.info("Closing idle workspace of %s", workspace.profile.username)
            if self._on_evict is not None:
                self._on_evict(workspace)
