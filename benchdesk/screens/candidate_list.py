from __future__ import annotations

import logging
from typing import Any, Iterable

from benchdesk.blobs import Blob
from benchdesk.client import BenchDesk
from benchdesk.errors import ApiError, error_message
from benchdesk.models import Candidate


logger = logging.getLogger(__name__)

FILTER_FIELDS = ("fullName", "visaStatus", "primarySkill", "state", "experienceYears", "email")


class CandidateListScreen:
    def __init__(self, desk: BenchDesk, *, page_size: int = 10):
        self.desk = desk
        self.page_size = page_size
        self.filters: dict[str, Any] = {k: "" for k in FILTER_FIELDS}
        self.candidates: list[Candidate] = []
        self.page = 0
        self.total_elements = 0
        self.total_pages = 0
        self.selected: Candidate | None = None
        self.loading = False
        self.error = ""
        self.notice = ""

    def set_filter(self, name: str, value: Any) -> None:
        if name not in self.filters:
            raise KeyError(name)
        self.filters[name] = value

    def search(self, filters: dict[str, Any]) -> list[Candidate]:
        """Apply `filters` on top of the current ones and reload from the first page."""
        for name, value in (filters or {}).items():
            self.set_filter(name, value)
        return self.load(0)

    def clear_filters(self) -> list[Candidate]:
        self.filters = {k: "" for k in FILTER_FIELDS}
        return self.load(0)

    def load(self, page: int = 0) -> list[Candidate]:
        """Fetch one page through the search endpoint with empty filters dropped."""
        params: dict[str, Any] = {"page": page, "size": self.page_size, **self.filters}
        params = {k: v for k, v in params.items() if v not in ("", None)}

        self.loading = True
        self.error = ""
        try:
            result = self.desk.candidates.search(params)
            self.candidates = list(result.content)
            self.page = result.number
            self.total_elements = result.total_elements
            self.total_pages = result.total_pages
        except ApiError as e:
            self.error = error_message(e, "Failed to load bench candidates")
        finally:
            self.loading = False
        return self.candidates

    def select(self, candidate_id: int) -> Candidate | None:
        self.selected = next((c for c in self.candidates if c.id == candidate_id), None)
        return self.selected

    def delete(self, candidate_id: int) -> bool:
        try:
            self.desk.candidates.delete(candidate_id)
        except ApiError as e:
            self.error = error_message(e, "Failed to delete bench candidate")
            return False
        self.candidates = [c for c in self.candidates if c.id != candidate_id]
        self.total_elements = max(0, self.total_elements - 1)
        if self.selected and self.selected.id == candidate_id:
            self.selected = None
        self.notice = "Bench candidate deleted successfully!"
        return True

    def bulk_delete(self, candidate_ids: Iterable[int]) -> bool:
        ids = list(candidate_ids)
        if not ids:
            return False
        try:
            self.desk.candidates.bulk_delete(ids)
        except ApiError as e:
            self.error = error_message(e, "Failed to delete candidates. Please try again.")
            return False
        self.notice = f"{len(ids)} candidate(s) deleted successfully!"
        self.load(self.page)
        return True

    def export(self, candidate_ids: Iterable[int] | None = None, export_format: str = "xlsx") -> Blob | None:
        ids = list(candidate_ids) if candidate_ids is not None else [c.id for c in self.candidates if c.id is not None]
        try:
            return self.desk.candidates.export(ids, export_format)
        except ApiError as e:
            self.error = error_message(e, "Failed to export candidates")
            return None
