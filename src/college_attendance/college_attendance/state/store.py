from __future__ import annotations

import threading
from typing import Optional

from .actions import Action, ErrorsCleared
from .model import AppState
from .reducer import reduce


class Store:
    """Holds the current AppState; `dispatch` is the only way to change it."""

    def __init__(self, state: Optional[AppState] = None):
        self._state = state or AppState()
        self._lock = threading.Lock()

    @property
    def state(self) -> AppState:
        return self._state

    def dispatch(self, action: Action) -> AppState:
        with self._lock:
            self._state = reduce(self._state, action)
            return self._state

    def drain_errors(self) -> tuple[str, ...]:
        """Return the queued errors and clear them in one step."""
        with self._lock:
            errors = self._state.errors
            if errors:
                self._state = reduce(self._state, ErrorsCleared())
            return errors
