"""
Candidate detail screen: profile, documents tab, activities tab.

The candidate fetch is primary; documents and activities are secondary
reads that fall back to empty lists so the profile still renders.
The open preview owns exactly one object URL, revoked on close.
"""
from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Any, Iterable

from benchdesk.client import BenchDesk
from benchdesk.errors import ApiError, error_message
from benchdesk.files import LocalFile, can_preview, file_extension, validate_file
from benchdesk.models import Activity, ActivityType, Candidate, CandidateDocument, DocumentType
from benchdesk.uploads import UploadBatch


logger = logging.getLogger(__name__)


def empty_activity_form() -> dict[str, Any]:
    return {
        "activityType": ActivityType.APPLIED.value,
        "clientName": "",
        "contactPerson": "",
        "contactPhone": "",
        "contactEmail": "",
        "submittedRate": "",
        "notes": "",
        "activityDate": date.today().isoformat(),
    }


def linkedin_profile_url(raw: str | None) -> str | None:
    """Normalize what people paste into the LinkedIn field into an https URL."""
    url = str(raw or "").strip()
    if not url:
        return None
    if url.startswith(("http://", "https://")):
        return url
    if url.startswith(("www.", "linkedin.com")):
        return "https://" + url
    if url.startswith("in/"):
        return "https://www.linkedin.com/" + url
    return "https://www.linkedin.com/in/" + url


class CandidateDetailScreen:
    def __init__(self, desk: BenchDesk, candidate_id: int):
        self.desk = desk
        self.candidate_id = candidate_id
        self.candidate: Candidate | None = None
        self.documents: list[CandidateDocument] = []
        self.activities: list[Activity] = []
        self.activity_form = empty_activity_form()
        self.preview: dict[str, Any] | None = None
        self.loading = False
        self.uploading = False
        self.error = ""
        self.notice = ""

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> bool:
        self.loading = True
        self.error = ""
        try:
            self.candidate = self.desk.candidates.get_by_id(self.candidate_id)
        except ApiError as e:
            self.error = error_message(e, "Failed to load candidate details")
            return False
        finally:
            self.loading = False
        self.refresh_activities()
        self.refresh_documents()
        return True

    def refresh_documents(self, *, keep_on_error: bool = False) -> list[CandidateDocument]:
        """Reload documents. With `keep_on_error` a failed fetch keeps the current list."""
        if not keep_on_error:
            self.documents = self.desk.documents.list(self.candidate_id)
            return self.documents
        try:
            self.documents = self.desk.documents.list(self.candidate_id, strict=True)
        except ApiError as e:
            logger.warning("document refresh failed, keeping %s cached rows: %s", len(self.documents), e.message)
        return self.documents

    def refresh_activities(self, *, keep_on_error: bool = False) -> list[Activity]:
        if not keep_on_error:
            self.activities = self.desk.activities.list_for_candidate(self.candidate_id)
            return self.activities
        try:
            self.activities = self.desk.activities.list_for_candidate(self.candidate_id, strict=True)
        except ApiError as e:
            logger.warning("activity refresh failed, keeping %s cached rows: %s", len(self.activities), e.message)
        return self.activities

    # ------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------

    def add_activity(self, form: dict[str, Any] | None = None) -> Activity | None:
        data = {**self.activity_form, **(form or {}), "candidateId": self.candidate_id}
        try:
            created = self.desk.activities.create(data)
        except ApiError as e:
            self.error = error_message(e, "Failed to add activity")
            return None
        self.notice = "Activity added successfully!"
        self.activity_form = empty_activity_form()
        self.refresh_activities(keep_on_error=True)
        return created

    def _count(self, *types: ActivityType) -> int:
        return sum(1 for a in self.activities if a.activity_type in types)

    @property
    def submissions(self) -> int:
        return self._count(ActivityType.SUBMITTED)

    @property
    def interviews(self) -> int:
        return self._count(ActivityType.INTERVIEW_SCHEDULED, ActivityType.INTERVIEW_COMPLETED)

    @property
    def rejections(self) -> int:
        return self._count(ActivityType.REJECTED)

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def upload_documents(
        self,
        files: Iterable[LocalFile],
        document_type: DocumentType | str = DocumentType.OTHER,
        *,
        max_file_size: int | None = None,
    ) -> int:
        """
        Upload files one request each, then refresh the list.

        Returns the number uploaded. Invalid files are rejected up front and
        nothing is sent. A failed refresh leaves the previous list in place.
        """
        batch = list(files)
        if not batch:
            return 0

        problems: list[str] = []
        for f in batch:
            problems.extend(f"{f.name}: {msg}" for msg in validate_file(f, max_size=max_file_size).errors)
        if problems:
            self.error = "; ".join(problems)
            return 0

        self.uploading = True
        uploaded = 0
        try:
            for f in batch:
                self.desk.documents.upload(self.candidate_id, f, document_type, max_size=max_file_size)
                uploaded += 1
        except ApiError as e:
            self.error = error_message(e, "Failed to upload documents")
        finally:
            self.uploading = False

        if uploaded:
            if uploaded == len(batch):
                self.notice = f"{uploaded} document(s) uploaded successfully!"
            self.refresh_documents(keep_on_error=True)
        return uploaded

    def upload_batch(self, batch: UploadBatch, *, max_file_size: int | None = None) -> list[CandidateDocument]:
        """Send every typed pending upload in a single multipart request."""
        problems = [f"Select a document type for {item.file.name}" for item in batch.untyped()]
        for item in batch.eligible():
            problems.extend(f"{item.file.name}: {msg}" for msg in validate_file(item.file, max_size=max_file_size).errors)
        if problems:
            self.error = "; ".join(problems)
            return []
        if not batch.eligible():
            return []

        self.uploading = True
        try:
            created = self.desk.documents.upload_multiple(
                self.candidate_id, batch.eligible(), max_size=max_file_size
            )
        except ApiError as e:
            self.error = error_message(e, "Failed to upload documents")
            return []
        finally:
            self.uploading = False

        batch.mark_submitted()
        self.notice = f"{len(created)} document(s) uploaded successfully!"
        self.refresh_documents(keep_on_error=True)
        return created

    def _document(self, document_id: int) -> CandidateDocument | None:
        return next((d for d in self.documents if d.id == document_id), None)

    def download(self, document_id: int, dest_dir: str | Path) -> Path | None:
        """Save a document under `dest_dir` using its original filename."""
        try:
            blob = self.desk.documents.download(self.candidate_id, document_id)
        except ApiError as e:
            self.error = error_message(e, "Failed to download document")
            return None

        doc = self._document(document_id)
        name = (doc.original_filename if doc else "") or blob.filename or f"document-{document_id}"
        target = Path(dest_dir) / Path(name).name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(blob.data)
        self.notice = "Document downloaded successfully!"
        return target

    def open_preview(self, document_id: int) -> dict[str, Any] | None:
        """Fetch a document and expose it as an object URL; replaces any open preview."""
        doc = self._document(document_id)
        filename = (doc.original_filename if doc else "") or ""
        try:
            blob = self.desk.documents.preview(self.candidate_id, document_id)
        except ApiError as e:
            self.error = error_message(e, "Failed to preview document")
            return None

        self.close_preview()
        name = filename or blob.filename
        self.preview = {
            "document_id": document_id,
            "url": self.desk.ctx.blobs.create(blob),
            "filename": name,
            "type": file_extension(name),
            "content_type": blob.content_type,
            "inline": can_preview(name),
        }
        return self.preview

    def close_preview(self) -> None:
        if self.preview:
            self.desk.ctx.blobs.revoke(self.preview["url"])
            self.preview = None

    def delete_document(self, document_id: int) -> bool:
        try:
            self.desk.documents.delete(self.candidate_id, document_id)
        except ApiError as e:
            self.error = error_message(e, "Failed to delete document")
            return False
        if self.preview and self.preview["document_id"] == document_id:
            self.close_preview()
        self.notice = "Document deleted successfully!"
        self.refresh_documents(keep_on_error=True)
        return True

    @property
    def linkedin_url(self) -> str | None:
        return linkedin_profile_url(self.candidate.linkedin_url if self.candidate else None)

    def close(self) -> None:
        self.close_preview()
