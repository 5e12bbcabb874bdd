"""
HTTP client wrapper.

Single point of outbound request configuration:
- JSON content type unless the request carries multipart parts
- `Authorization: Bearer <token>` when the session holds a token
- 401 clears credentials and fires login navigation before the error propagates

No retries and no backoff: failures reach the caller as ApiError.
"""
from __future__ import annotations

import logging
import re
from typing import Any

import requests

from benchdesk.blobs import Blob
from benchdesk.errors import ApiError, code_for_status
from benchdesk.session import SessionContext


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30

_FILENAME_RE = re.compile(r"""filename\*?=(?:UTF-8'')?["']?([^"';]+)["']?""", re.IGNORECASE)


def _filename_from_disposition(value: str) -> str:
    m = _FILENAME_RE.search(str(value or ""))
    return m.group(1).strip() if m else ""


class ApiClient:
    def __init__(
        self,
        ctx: SessionContext,
        *,
        session: requests.Session | None = None,
        default_timeout: float = DEFAULT_TIMEOUT,
        verify: bool = True,
    ):
        self.ctx = ctx
        self.http = session or requests.Session()
        self.default_timeout = default_timeout
        self.verify = verify
        ctx.on_close(self.http.close)

    def _headers(self, *, multipart: bool, extra: dict[str, str] | None) -> dict[str, str]:
        headers: dict[str, str] = {}
        if not multipart:
            headers["Content-Type"] = "application/json"
        token = self.ctx.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if extra:
            headers.update(extra)
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Any = None,
        json: Any = None,
        data: Any = None,
        files: Any = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        binary: bool = False,
    ) -> Any:
        """
        Send one request and return the decoded body.

        Returns parsed JSON (None for an empty body), or a Blob when `binary`.
        """
        method_u = method.upper()
        url = self.ctx.url_for(path)
        files = files or None
        multipart = files is not None or data is not None

        try:
            resp = self.http.request(
                method_u,
                url,
                params=params,
                json=json,
                data=data,
                files=files,
                headers=self._headers(multipart=multipart, extra=headers),
                timeout=timeout or self.default_timeout,
                verify=self.verify,
            )
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method_u, url, e)
            raise ApiError("NETWORK", f"Request failed: {e}") from e

        if resp.status_code == 401:
            logger.warning("%s %s returned 401, redirecting to %s", method_u, url, self.ctx.login_path)
            self.ctx.redirect_to_login()
            raise ApiError(
                "UNAUTHORIZED",
                "Your session has expired. Please sign in again.",
                http_status=401,
                user_facing=True,
            )

        if resp.status_code >= 400:
            raise self._http_error(method_u, url, resp)

        if binary:
            return Blob(
                data=resp.content or b"",
                content_type=resp.headers.get("Content-Type") or "application/octet-stream",
                filename=_filename_from_disposition(resp.headers.get("Content-Disposition", "")),
            )

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text

    def _http_error(self, method: str, url: str, resp: requests.Response) -> ApiError:
        body: Any = None
        server_msg = ""
        try:
            body = resp.json()
        except ValueError:
            body = resp.text or None
        if isinstance(body, dict):
            server_msg = str(body.get("message") or body.get("error") or "").strip()

        logger.info("%s %s -> %s %s", method, url, resp.status_code, server_msg or "")
        return ApiError(
            code_for_status(resp.status_code),
            server_msg or f"Request failed with status {resp.status_code}",
            http_status=resp.status_code,
            details=body,
            user_facing=bool(server_msg),
        )

    def get(self, path: str, **kwargs) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> Any:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        return self.request("DELETE", path, **kwargs)
