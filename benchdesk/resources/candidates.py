"""
Bench candidate endpoints.

- /bench-candidates                       list, create (multipart)
- /bench-candidates/{id}                  get, update (multipart), delete
- /bench-candidates/search                field search
- /bench-candidates/advanced-search       criteria search
- /bench-candidates/{id}/resume           legacy resume download
- /bench-candidates/bulk                  bulk delete
- /bench-candidates/export                spreadsheet export
- /bench-candidates/statistics|count|recent|consultant/{id}
"""
from __future__ import annotations

from typing import Any, Iterable

from benchdesk.blobs import Blob
from benchdesk.errors import ApiError
from benchdesk.models import Candidate, CandidatePage
from benchdesk.resources.base import (
    BULK_TIMEOUT,
    DOWNLOAD_TIMEOUT,
    EXPORT_TIMEOUT,
    SEARCH_TIMEOUT,
    UPLOAD_TIMEOUT,
    ResourceClient,
    friendly_error,
)
from benchdesk.uploads import PendingUpload, build_multipart_parts, field_parts


def _page(payload: Any) -> CandidatePage:
    if payload is None:
        return CandidatePage()
    if isinstance(payload, list):
        return CandidatePage(content=payload, total_elements=len(payload), total_pages=1, size=len(payload))
    return CandidatePage.model_validate(payload)


def _candidates(payload: Any) -> list[Candidate]:
    return [Candidate.model_validate(c) for c in (payload or [])]


class CandidatesClient(ResourceClient):
    base_path = "/bench-candidates"

    def get_all(self, params: dict[str, Any] | None = None) -> CandidatePage:
        return _page(self.api.get(self.path(), params=params or {}))

    def get_by_id(self, candidate_id: int | str) -> Candidate:
        return Candidate.model_validate(self.api.get(self.path(candidate_id)))

    def _multipart(self, fields: dict[str, Any], uploads: Iterable[PendingUpload] | None) -> list:
        parts = field_parts(fields)
        parts.extend(build_multipart_parts(uploads or (), file_field="documents", type_field="documentTypes"))
        if not parts:
            raise ApiError("VALIDATION", "Candidate details are required", user_facing=True)
        return parts

    def create(self, fields: dict[str, Any], uploads: Iterable[PendingUpload] | None = None) -> Candidate:
        """Create a candidate; typed uploads travel in the same multipart body."""
        payload = self.api.post(self.path(), files=self._multipart(fields, uploads), timeout=UPLOAD_TIMEOUT)
        return Candidate.model_validate(payload or {})

    def update(
        self,
        candidate_id: int | str,
        fields: dict[str, Any],
        uploads: Iterable[PendingUpload] | None = None,
    ) -> Candidate:
        payload = self.api.put(
            self.path(candidate_id),
            files=self._multipart(fields, uploads),
            timeout=UPLOAD_TIMEOUT,
        )
        return Candidate.model_validate(payload or {})

    def delete(self, candidate_id: int | str) -> None:
        self.api.delete(self.path(candidate_id))

    def search(self, params: dict[str, Any]) -> CandidatePage:
        clean = {k: v for k, v in (params or {}).items() if v not in (None, "")}
        return _page(self.api.get(self.path("search"), params=clean))

    def advanced_search(self, criteria: dict[str, Any], *, page: int = 0, size: int = 10) -> CandidatePage:
        payload = self.api.post(
            self.path("advanced-search"),
            json=criteria,
            params={"page": page, "size": size},
            timeout=SEARCH_TIMEOUT,
        )
        return _page(payload)

    def download_resume(self, candidate_id: int | str) -> Blob:
        try:
            return self.api.get(
                self.path(candidate_id, "resume"),
                binary=True,
                timeout=DOWNLOAD_TIMEOUT,
                headers={"Accept": "application/octet-stream"},
            )
        except ApiError as e:
            raise friendly_error(
                "download_resume", e, "Failed to download resume. Please check if resume exists."
            ) from e

    def bulk_delete(self, candidate_ids: Iterable[int | str]) -> None:
        try:
            self.api.delete(self.path("bulk"), params={"ids": list(candidate_ids)}, timeout=BULK_TIMEOUT)
        except ApiError as e:
            raise friendly_error("bulk_delete", e, "Failed to delete candidates. Please try again.") from e

    def export(self, candidate_ids: Iterable[int | str], export_format: str = "xlsx") -> Blob:
        return self.api.post(
            self.path("export"),
            json={"candidateIds": list(candidate_ids), "format": export_format},
            binary=True,
            timeout=EXPORT_TIMEOUT,
        )

    def get_statistics(self) -> dict[str, Any]:
        return self.api.get(self.path("statistics")) or {}

    def count(self) -> int:
        return int(self.api.get(self.path("count")) or 0)

    def recent(self, limit: int = 5) -> list[Candidate]:
        return _candidates(self.api.get(self.path("recent"), params={"limit": limit}))

    def by_consultant(self, consultant_id: int | str) -> list[Candidate]:
        return _candidates(self.api.get(self.path("consultant", consultant_id)))
