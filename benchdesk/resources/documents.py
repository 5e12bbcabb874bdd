"""
Per-candidate document sub-collection: /bench-candidates/{id}/documents.
"""
from __future__ import annotations

import logging
from typing import Iterable

from benchdesk.blobs import Blob
from benchdesk.errors import ApiError, UploadStateError
from benchdesk.files import LocalFile, validate_file
from benchdesk.models import CandidateDocument, DocumentType
from benchdesk.resources.base import (
    DOWNLOAD_TIMEOUT,
    MULTI_UPLOAD_TIMEOUT,
    UPLOAD_TIMEOUT,
    ResourceClient,
    friendly_error,
    or_default,
)
from benchdesk.uploads import PendingUpload, build_multipart_parts, coerce_document_type


logger = logging.getLogger(__name__)


def _check(files: Iterable[LocalFile], max_size: int | None) -> None:
    """Raise a VALIDATION error naming every rejected file; nothing is sent."""
    problems: list[str] = []
    for f in files:
        problems.extend(f"{f.name}: {msg}" for msg in validate_file(f, max_size=max_size).errors)
    if problems:
        raise ApiError("VALIDATION", "; ".join(problems), user_facing=True)


def _document_type(value: DocumentType | str | None) -> DocumentType:
    try:
        doc_type = coerce_document_type(value)
    except UploadStateError as e:
        raise ApiError("VALIDATION", str(e), user_facing=True) from e
    if doc_type is None:
        raise ApiError("VALIDATION", "Select a document type", user_facing=True)
    return doc_type


class DocumentsClient(ResourceClient):
    base_path = "/bench-candidates"

    def list(self, candidate_id: int | str, *, strict: bool = False) -> list[CandidateDocument]:
        """Documents of a candidate; an empty list when the fetch fails unless `strict`."""
        def fetch():
            return self.api.get(self.path(candidate_id, "documents"))

        payload = fetch() if strict else or_default("list_documents", fetch, [])
        return [CandidateDocument.model_validate(d) for d in (payload or [])]

    def upload(
        self,
        candidate_id: int | str,
        file: LocalFile,
        document_type: DocumentType | str = DocumentType.OTHER,
        *,
        max_size: int | None = None,
    ) -> CandidateDocument:
        doc_type = _document_type(document_type).value
        _check([file], max_size)
        payload = self.api.post(
            self.path(candidate_id, "documents"),
            params={"documentType": doc_type},
            files=[("file", (file.name, file.data, file.content_type))],
            timeout=UPLOAD_TIMEOUT,
        )
        logger.info("uploaded %s (%s) for candidate %s", file.name, doc_type, candidate_id)
        return CandidateDocument.model_validate(payload)

    def upload_multiple(
        self,
        candidate_id: int | str,
        uploads: Iterable[PendingUpload],
        *,
        max_size: int | None = None,
    ) -> list[CandidateDocument]:
        """One multipart request: `files` parts with a parallel `documentTypes` part each."""
        uploads = list(uploads)
        _check([u.file for u in uploads if u.eligible], max_size)
        parts = build_multipart_parts(uploads, file_field="files", type_field="documentTypes")
        if not parts:
            return []
        payload = self.api.post(
            self.path(candidate_id, "documents", "multiple"),
            files=parts,
            timeout=MULTI_UPLOAD_TIMEOUT,
        )
        return [CandidateDocument.model_validate(d) for d in (payload or [])]

    def download(self, candidate_id: int | str, document_id: int | str) -> Blob:
        try:
            return self.api.get(
                self.path(candidate_id, "documents", document_id),
                binary=True,
                timeout=DOWNLOAD_TIMEOUT,
                headers={"Accept": "application/octet-stream"},
            )
        except ApiError as e:
            raise friendly_error("download_document", e, "Failed to download document. Please try again.") from e

    def preview(self, candidate_id: int | str, document_id: int | str) -> Blob:
        try:
            return self.api.get(
                self.path(candidate_id, "documents", document_id),
                binary=True,
                timeout=DOWNLOAD_TIMEOUT,
                headers={"Accept": "application/pdf,image/*,text/*"},
            )
        except ApiError as e:
            raise friendly_error(
                "preview_document", e, "Failed to preview document. Please try downloading instead."
            ) from e

    def delete(self, candidate_id: int | str, document_id: int | str) -> None:
        try:
            self.api.delete(self.path(candidate_id, "documents", document_id))
        except ApiError as e:
            raise friendly_error("delete_document", e, "Failed to delete document. Please try again.") from e

    def info(self, candidate_id: int | str, document_id: int | str) -> CandidateDocument | None:
        payload = or_default(
            "document_info",
            lambda: self.api.get(self.path(candidate_id, "documents", document_id, "info")),
            None,
        )
        return CandidateDocument.model_validate(payload) if payload else None

    def batch_delete(self, candidate_id: int | str, document_ids: Iterable[int | str]) -> list[int | str]:
        """Delete each document in turn; returns the ids that could not be deleted."""
        failed: list[int | str] = []
        for document_id in document_ids:
            try:
                self.delete(candidate_id, document_id)
            except ApiError as e:
                if e.code == "UNAUTHORIZED":
                    raise
                failed.append(document_id)
        return failed
