from __future__ import annotations

from ..common.validators import require_choice, require_min_length, require_non_empty
from ..core.constants import DEFAULT_EMAIL_DOMAIN, DEPARTMENTS, MIN_PASSWORD_LENGTH
from ..core.exceptions import AuthenticationError
from .model import AuthSession, SignUpForm
from .repository import AuthGateway


class AuthService:
    """Use case: sign in / sign up against the backend.

    The visible username maps to a synthetic e-mail on the institution's
    domain; the backend owns the credentials.
    """

    def __init__(self, gateway: AuthGateway, *, email_domain: str = DEFAULT_EMAIL_DOMAIN):
        self._gateway = gateway
        self._email_domain = email_domain.lstrip("@")

    def email_for(self, username: str) -> str:
        return f"{username.strip()}@{self._email_domain}"

    def sign_in(self, username: str, password: str) -> AuthSession:
        username = require_non_empty(username, "Username")
        if not password:
            raise AuthenticationError("Password is required")
        return self._gateway.sign_in(self.email_for(username), password)

    def sign_up(self, form: SignUpForm) -> None:
        department = require_choice(form.department, "Department", DEPARTMENTS)
        username = require_non_empty(form.username, "Username")
        full_name = require_non_empty(form.full_name, "Full name")
        require_min_length(form.password, "Password", MIN_PASSWORD_LENGTH)

        self._gateway.sign_up(
            self.email_for(username),
            form.password,
            {
                "username": username,
                "full_name": full_name,
                "role": form.role.value,
                "department": department,
            },
        )

    def sign_out(self, session: AuthSession) -> None:
        self._gateway.sign_out(session)
