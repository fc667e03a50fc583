from __future__ import annotations

import pytest

from src.college_attendance.college_attendance.state.coordinator import Coordinator
from src.college_attendance.college_attendance.users.model import AuthSession
from src.college_attendance.college_attendance.workspace import Workspace, WorkspaceFactory, WorkspaceRegistry


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def make_workspace(profile, students_repo, attendance_repo):
    def _make(user_id: str = "u1") -> Workspace:
        coordinator = Coordinator(user_id=user_id, students=students_repo(), attendance=attendance_repo())
        return Workspace(
            session=AuthSession(user_id=user_id, email=f"{user_id}@gasc.edu"),
            profile=profile,
            coordinator=coordinator,
            students=None,
            attendance=None,
        )

    return _make


def test_idle_workspaces_are_evicted_and_closed(make_workspace):
    clock = FakeClock()
    closed = []
    registry = WorkspaceRegistry(idle_seconds=60, on_evict=closed.append, clock=clock)

    old_key = registry.add(make_workspace("u1"))
    clock.now += 30
    fresh_key = registry.add(make_workspace("u2"))
    clock.now += 45

    assert registry.get(old_key) is None
    assert registry.get(fresh_key) is not None
    assert len(registry) == 1
    assert [w.session.user_id for w in closed] == ["u1"]


def test_access_keeps_a_workspace_alive(make_workspace):
    clock = FakeClock()
    registry = WorkspaceRegistry(idle_seconds=60, clock=clock)
    key = registry.add(make_workspace())

    for _ in range(5):
        clock.now += 50
        assert registry.get(key) is not None

    clock.now += 61
    assert registry.get(key) is None


def test_discard_and_unknown_keys(make_workspace):
    registry = WorkspaceRegistry()
    key = registry.add(make_workspace())

    assert registry.get(None) is None
    assert registry.get("missing") is None
    assert registry.discard(key).session.user_id == "u1"
    assert registry.discard(key) is None
    assert len(registry) == 0


def test_factory_falls_back_to_placeholder_profile(students_repo, attendance_repo):
    factory = WorkspaceFactory(
        profiles=lambda client: type("NoProfiles", (), {"get_by_id": lambda self, user_id: None})(),
        students=lambda client: students_repo(),
        attendance=lambda client: attendance_repo(),
    )

    workspace = factory.open(AuthSession(user_id="u5", email="ravi@gasc.edu"))

    assert workspace.profile.username == "ravi"
    assert workspace.coordinator.state.loaded
