from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List

import httpx
from postgrest.exceptions import APIError

from ..core.exceptions import BackendError

logger = logging.getLogger(__name__)


@contextmanager
def backend_call(operation: str) -> Iterator[None]:
    """Translate client/transport failures into BackendError.

    One call, no retry: the caller decides what a failure means.
    """

    try:
        yield
    except APIError as e:
        message = e.message or str(e)
        logger.error("Backend call %s failed: %s (code=%s)", operation, message, e.code)
        raise BackendError(operation, message) from e
    except httpx.HTTPError as e:
        logger.error("Backend call %s failed: %s", operation, e)
        raise BackendError(operation, str(e) or e.__class__.__name__) from e


def fetchall(response: Any) -> List[Dict[str, Any]]:
    return list(getattr(response, "data", None) or [])


def fetchone(response: Any, operation: str) -> Dict[str, Any]:
    rows = fetchall(response)
    if not rows:
        logger.error("Backend call %s returned no row", operation)
        raise BackendError(operation, "no row returned")
    return rows[0]
