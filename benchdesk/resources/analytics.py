from __future__ import annotations

from typing import Any

from benchdesk.resources.base import ResourceClient, or_default


class AnalyticsClient(ResourceClient):
    base_path = "/dashboard"

    def overview(self) -> dict[str, Any]:
        return self.api.get(self.path("stats")) or {}

    def consultant_performance(self) -> dict[str, Any]:
        return or_default("consultant_performance", lambda: self.api.get(self.path("consultant-performance")), None) or {}

    def vendor_analytics(self) -> dict[str, Any]:
        return or_default("vendor_analytics", lambda: self.api.get(self.path("vendor-analytics")), None) or {}

    def submission_trends(self, days: int = 30) -> Any:
        return self.api.get(self.path("submission-trends"), params={"days": days})

    def skill_demand(self) -> Any:
        return self.api.get(self.path("skill-demand"))
