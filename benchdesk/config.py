from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _env_str(name: str, default: str = "") -> str:
    return str(os.getenv(name, default) or default).strip()


def _env_int(name: str, default: int) -> int:
    try:
        return int(str(os.getenv(name, "") or "").strip() or default)
    except Exception:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = str(os.getenv(name, "") or "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "y", "on"}


DEFAULT_API_BASE_URL = "http://localhost:8080/api"


@dataclass
class Config:
    API_BASE_URL: str = DEFAULT_API_BASE_URL
    LOGIN_PATH: str = "/login"
    TOKEN_FILE: str = ""
    LOG_LEVEL: str = "INFO"
    MAX_UPLOAD_MB: int = 10
    VERIFY_TLS: bool = True

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_MB * 1024 * 1024


def load_config() -> Config:
    """Read configuration from the environment (and `.env` when present)."""
    load_dotenv()

    base_url = _env_str("BENCHDESK_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/")
    return Config(
        API_BASE_URL=base_url or DEFAULT_API_BASE_URL,
        LOGIN_PATH=_env_str("BENCHDESK_LOGIN_PATH", "/login") or "/login",
        TOKEN_FILE=_env_str("BENCHDESK_TOKEN_FILE", ""),
        LOG_LEVEL=_env_str("LOG_LEVEL", "INFO").upper() or "INFO",
        MAX_UPLOAD_MB=max(1, _env_int("BENCHDESK_MAX_UPLOAD_MB", 10)),
        VERIFY_TLS=_env_bool("BENCHDESK_VERIFY_TLS", True),
    )


@lru_cache(maxsize=1)
def get_config() -> Config:
    return load_config()
