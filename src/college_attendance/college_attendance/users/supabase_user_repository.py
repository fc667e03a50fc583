from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from supabase import AuthError, Client

from ..backend.base import backend_call, fetchall
from ..backend.client import BackendConnection
from ..common.datetime_utils import parse_backend_timestamp
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import AuthSession, UserProfile
from .repository import AuthGateway, ProfileRepository

logger = logging.getLogger(__name__)


class SupabaseAuthGateway(AuthGateway):
    def __init__(self, connection: BackendConnection):
        self._connection = connection

    def sign_in(self, email: str, password: str) -> AuthSession:
        client = self._connection.connect()
        try:
            res = client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as e:
            logger.info("Sign-in rejected for %s: %s", email, e.message)
            raise AuthenticationError(e.message) from e

        if res.user is None:
            raise AuthenticationError("Invalid login credentials")
        return AuthSession(user_id=str(res.user.id), email=res.user.email or email, client=client)

    def sign_up(self, email: str, password: str, metadata: Mapping[str, str]) -> None:
        client = self._connection.connect()
        try:
            client.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": dict(metadata)},
                }
            )
        except AuthError as e:
            logger.info("Sign-up rejected for %s: %s", email, e.message)
            raise AuthenticationError(e.message) from e

    def sign_out(self, session: AuthSession) -> None:
        if session.client is None:
            return
        try:
            session.client.auth.sign_out()
        except AuthError as e:
            # The local workspace is dropped regardless.
            logger.warning("Sign-out failed for %s: %s", session.email, e.message)


class SupabaseProfileRepository(ProfileRepository):
    def __init__(self, client: Client):
        self._client = client

    def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        with backend_call("fetch profile"):
            res = self._client.table("user_profiles").select("*").eq("id", user_id).limit(1).execute()
        rows = fetchall(res)
        if not rows:
            return None
        return _to_profile(rows[0])


def _to_profile(r: Mapping[str, Any]) -> UserProfile:
    return UserProfile(
        id=str(r["id"]),
        username=r.get("username") or "",
        full_name=r.get("full_name") or "",
        role=Role(r.get("role") or Role.TEACHER.value),
        department=r.get("department") or "",
        created_at=parse_backend_timestamp(r.get("created_at")),
        updated_at=parse_backend_timestamp(r.get("updated_at")),
    )
