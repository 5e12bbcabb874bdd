from __future__ import annotations

from typing import Any


_STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    409: "CONFLICT",
    413: "PAYLOAD_TOO_LARGE",
    422: "BAD_REQUEST",
}


class ApiError(Exception):
    """
    Error raised for every failed backend call and every client-side rejection.

    Codes:
    - NETWORK: the request never produced a response (DNS, refused, timeout)
    - UNAUTHORIZED: 401, credentials were cleared and login navigation fired
    - VALIDATION: rejected before any request was sent
    - BAD_REQUEST / FORBIDDEN / NOT_FOUND / CONFLICT / SERVER_ERROR: HTTP failures

    `user_facing` marks messages that can be shown as-is (server-provided text,
    validation output, rewritten resource messages).
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        http_status: int | None = None,
        details: Any = None,
        user_facing: bool = False,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details
        self.user_facing = user_facing

    def __repr__(self) -> str:
        return f"ApiError(code={self.code!r}, message={self.message!r}, http_status={self.http_status!r})"


class ThumbnailError(Exception):
    pass


class UploadStateError(Exception):
    pass


def code_for_status(status: int) -> str:
    if status in _STATUS_CODES:
        return _STATUS_CODES[status]
    if status >= 500:
        return "SERVER_ERROR"
    return "BAD_REQUEST"


def error_message(exc: BaseException, fallback: str) -> str:
    """Text to show for a failure, or `fallback` when nothing presentable is available."""
    if isinstance(exc, ApiError) and exc.user_facing:
        msg = str(exc.message or "").strip()
        if msg:
            return msg
    return fallback
