from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from supabase import Client, create_client


@dataclass(frozen=True)
class BackendConfig:
    url: str
    anon_key: str


class BackendConnection:
    """Singleton-like backend client factory.

    Note: Every sign-in gets its own client so the user's session token is
    never shared between browser sessions.
    """

    _instance: Optional["BackendConnection"] = None

    def __init__(self, config: BackendConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: BackendConfig) -> "BackendConnection":
        if cls._instance is None or cls._instance._config != config:
            cls._instance = BackendConnection(config)
        return cls._instance

    @property
    def url(self) -> str:
        return self._config.url

    def connect(self) -> Client:
        return create_client(self._config.url, self._config.anon_key)
