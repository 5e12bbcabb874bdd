from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from benchdesk.api_client import ApiClient
from benchdesk.errors import ApiError


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Per-operation deadlines (seconds).
READ_TIMEOUT = 30
UPLOAD_TIMEOUT = 300
MULTI_UPLOAD_TIMEOUT = 600
DOWNLOAD_TIMEOUT = 120
EXPORT_TIMEOUT = 180
BULK_TIMEOUT = 60
SEARCH_TIMEOUT = 30


class ResourceClient:
    base_path = ""

    def __init__(self, api: ApiClient):
        self.api = api

    def path(self, *parts: Any) -> str:
        segments = [self.base_path.strip("/")] + [str(p).strip("/") for p in parts if str(p) != ""]
        return "/" + "/".join(s for s in segments if s)


def or_default(operation: str, call: Callable[[], T], default: T) -> T:
    """
    Run a secondary read; on failure log it and hand back `default`.

    Used where a missing result must not block the page (documents and
    activities on a detail view, optional dashboard widgets).
    """
    try:
        return call()
    except ApiError as e:
        logger.error("%s failed: %s", operation, e.message)
        return default


def friendly_error(operation: str, e: ApiError, message: str) -> ApiError:
    """Replace the transport message with `message`; 401s keep their own."""
    if e.code == "UNAUTHORIZED":
        message = e.message
    else:
        logger.error("%s failed: %s", operation, e.message)
    return ApiError(e.code, message, http_status=e.http_status, details=e.details, user_facing=True)
