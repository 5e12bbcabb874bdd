"""
Session context for one signed-in client.

Holds what would otherwise be process-wide state:
- base URL of the REST API
- the credential store (bearer token)
- the login path and the navigation hook fired on 401
- the object URL registry for blobs created during the session
"""
from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Callable, Protocol

from benchdesk.blobs import ObjectUrlStore
from benchdesk.config import Config, get_config


logger = logging.getLogger(__name__)


class TokenStore(Protocol):
    def get(self) -> str | None: ...

    def set(self, token: str) -> None: ...

    def clear(self) -> None: ...


class MemoryTokenStore:
    def __init__(self, token: str | None = None):
        self._token = token or None

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = str(token or "").strip() or None

    def clear(self) -> None:
        self._token = None


class FileTokenStore:
    """Token persisted as `{"token": "..."}` in a JSON file."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)
        self._lock = threading.Lock()

    def get(self) -> str | None:
        with self._lock:
            try:
                raw = json.loads(self.path.read_text(encoding="utf-8"))
            except FileNotFoundError:
                return None
            except (OSError, ValueError):
                logger.warning("unreadable token file %s", self.path)
                return None
        token = str((raw or {}).get("token") or "").strip() if isinstance(raw, dict) else ""
        return token or None

    def set(self, token: str) -> None:
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({"token": str(token or "").strip()}), encoding="utf-8")

    def clear(self) -> None:
        with self._lock:
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass


def _log_navigation(path: str) -> None:
    logger.warning("navigation requested to %s", path)


class SessionContext:
    def __init__(
        self,
        base_url: str,
        *,
        tokens: TokenStore | None = None,
        login_path: str = "/login",
        navigate: Callable[[str], None] | None = None,
        blobs: ObjectUrlStore | None = None,
    ):
        self.base_url = str(base_url or "").rstrip("/")
        self.tokens = tokens if tokens is not None else MemoryTokenStore()
        self.login_path = login_path or "/login"
        self.navigate = navigate or _log_navigation
        self.blobs = blobs if blobs is not None else ObjectUrlStore()
        self._on_close: list[Callable[[], None]] = []
        self.closed = False

    @classmethod
    def from_config(cls, cfg: Config | None = None, **kwargs) -> "SessionContext":
        cfg = cfg or get_config()
        tokens = kwargs.pop("tokens", None)
        if tokens is None:
            tokens = FileTokenStore(cfg.TOKEN_FILE) if cfg.TOKEN_FILE else MemoryTokenStore()
        return cls(cfg.API_BASE_URL, tokens=tokens, login_path=cfg.LOGIN_PATH, **kwargs)

    @property
    def token(self) -> str | None:
        return self.tokens.get()

    def set_token(self, token: str) -> None:
        self.tokens.set(token)

    def clear_credentials(self) -> None:
        self.tokens.clear()

    def redirect_to_login(self) -> None:
        self.clear_credentials()
        self.navigate(self.login_path)

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def on_close(self, callback: Callable[[], None]) -> None:
        self._on_close.append(callback)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.blobs.revoke_all()
        for callback in self._on_close:
            callback()
        self._on_close.clear()

    def __enter__(self) -> "SessionContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
