from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..core.enums import Role


@dataclass(frozen=True)
class UserProfile:
    """Domain entity: profile row created by the backend at sign-up."""

    id: str
    username: str
    full_name: str
    role: Role
    department: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class AuthSession:
    """A signed-in backend identity.

    `client` is the backend client carrying the user's access token; the
    repositories of the user's workspace are built on it.
    """

    user_id: str
    email: str
    client: Any = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class SignUpForm:
    username: str
    password: str
    full_name: str
    role: Role
    department: str
