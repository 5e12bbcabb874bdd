from __future__ import annotations

import platform
from datetime import datetime, timezone
from typing import Any

from benchdesk import __version__
from benchdesk.resources.base import ResourceClient


def iso_utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


class SystemClient(ResourceClient):
    base_path = "/system"

    def health(self) -> dict[str, Any]:
        return self.api.get(self.path("health")) or {}

    def version(self) -> dict[str, Any]:
        return self.api.get(self.path("version")) or {}

    def report_error(self, error_data: dict[str, Any]) -> Any:
        return self.api.post(
            self.path("error-report"),
            json={
                **error_data,
                "timestamp": iso_utc_now(),
                "userAgent": f"benchdesk/{__version__} python/{platform.python_version()}",
            },
        )

    def log_activity(self, activity: dict[str, Any]) -> Any:
        return self.api.post(self.path("activity-log"), json={**activity, "timestamp": iso_utc_now()})
