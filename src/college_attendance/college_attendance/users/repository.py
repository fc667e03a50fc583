from __future__ import annotations

from typing import Mapping, Optional, Protocol

from .model import AuthSession, UserProfile


class AuthGateway(Protocol):
    """Backend authentication. Credentials never touch local storage."""

    def sign_in(self, email: str, password: str) -> AuthSession:
        raise NotImplementedError

    def sign_up(self, email: str, password: str, metadata: Mapping[str, str]) -> None:
        raise NotImplementedError

    def sign_out(self, session: AuthSession) -> None:
        raise NotImplementedError


class ProfileRepository(Protocol):
    def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        raise NotImplementedError
