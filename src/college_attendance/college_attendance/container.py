from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .backend.client import BackendConfig, BackendConnection
from .core.constants import DEFAULT_EMAIL_DOMAIN, WORKSPACE_IDLE_SECONDS
from .users.service import AuthService
from .users.supabase_user_repository import SupabaseAuthGateway
from .workspace import WorkspaceFactory, WorkspaceRegistry


@dataclass(frozen=True)
class Container:
    connection: Optional[BackendConnection]

    auth_service: AuthService
    workspace_factory: WorkspaceFactory
    workspaces: WorkspaceRegistry


def build_container(
    *,
    backend_config: dict,
    email_domain: str = DEFAULT_EMAIL_DOMAIN,
    workspace_idle_seconds: float = WORKSPACE_IDLE_SECONDS,
) -> Container:
    config = BackendConfig(
        url=str(backend_config["url"]),
        anon_key=str(backend_config["anon_key"]),
    )
    connection = BackendConnection.get_instance(config)

    auth_service = AuthService(SupabaseAuthGateway(connection), email_domain=email_domain)

    return Container(
        connection=connection,
        auth_service=auth_service,
        workspace_factory=WorkspaceFactory(),
        workspaces=WorkspaceRegistry(
            idle_seconds=workspace_idle_seconds,
            on_evict=lambda workspace: auth_service.sign_out(workspace.session),
        ),
    )
