from __future__ import annotations

from typing import Any

from benchdesk.blobs import Blob
from benchdesk.errors import ApiError
from benchdesk.models import Activity
from benchdesk.resources.base import EXPORT_TIMEOUT, ResourceClient, friendly_error, or_default


def _activity_payload(data: Activity | dict[str, Any]) -> dict[str, Any]:
    if isinstance(data, Activity):
        return data.model_dump(mode="json", by_alias=True, exclude_none=True)
    return dict(data)


class ActivitiesClient(ResourceClient):
    base_path = "/candidate-activities"

    def list_for_candidate(self, candidate_id: int | str, *, strict: bool = False) -> list[Activity]:
        """Activities of a candidate; an empty list when the fetch fails unless `strict`."""
        def fetch():
            return self.api.get(self.path("candidate", candidate_id))

        payload = fetch() if strict else or_default("list_activities", fetch, [])
        return [Activity.model_validate(a) for a in (payload or [])]

    def create(self, data: Activity | dict[str, Any]) -> Activity:
        try:
            payload = self.api.post(self.path(), json=_activity_payload(data))
        except ApiError as e:
            raise friendly_error("create_activity", e, "Failed to save activity. Please try again.") from e
        return Activity.model_validate(payload or _activity_payload(data))

    def update(self, activity_id: int | str, data: Activity | dict[str, Any]) -> Activity:
        payload = self.api.put(self.path(activity_id), json=_activity_payload(data))
        return Activity.model_validate(payload or _activity_payload(data))

    def delete(self, activity_id: int | str) -> None:
        self.api.delete(self.path(activity_id))

    def summary(self, candidate_id: int | str) -> dict[str, Any]:
        return self.api.get(self.path("candidate", candidate_id, "summary")) or {}

    def export(self, candidate_id: int | str, export_format: str = "xlsx") -> Blob:
        return self.api.get(
            self.path("candidate", candidate_id, "export"),
            params={"format": export_format},
            binary=True,
            timeout=EXPORT_TIMEOUT,
        )
