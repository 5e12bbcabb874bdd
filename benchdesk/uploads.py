"""
Pending uploads: files picked in a form but not yet submitted.

Lifecycle of one item:
    SELECTED -> TYPED -> SUBMITTED
    SELECTED | TYPED -> REMOVED

Only TYPED items are serialized. Each file part is written right next to the
part carrying its document type (and its description, when any item in the
batch has one), so the n-th file always pairs with the n-th type on the
server side.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from benchdesk.errors import UploadStateError
from benchdesk.files import LocalFile
from benchdesk.models import DocumentType


class UploadState(str, Enum):
    SELECTED = "SELECTED"
    TYPED = "TYPED"
    SUBMITTED = "SUBMITTED"
    REMOVED = "REMOVED"


# requests `files=` entries: (field, (filename | None, content, content_type?))
MultipartPart = tuple


def coerce_document_type(value: DocumentType | str | None) -> DocumentType | None:
    """Case-insensitive tag lookup; blank is None, unknown raises UploadStateError."""
    if value is None or isinstance(value, DocumentType):
        return value
    raw = str(value).strip().upper()
    if not raw:
        return None
    try:
        return DocumentType(raw)
    except ValueError as e:
        raise UploadStateError(f"Unknown document type: {value}") from e


@dataclass
class PendingUpload:
    file: LocalFile
    document_type: DocumentType | None = None
    description: str = ""
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: UploadState = UploadState.SELECTED

    def __post_init__(self):
        self.document_type = coerce_document_type(self.document_type)
        if self.document_type is not None:
            self.state = UploadState.TYPED

    @property
    def eligible(self) -> bool:
        return self.state == UploadState.TYPED and self.document_type is not None

    def assign_type(self, document_type: DocumentType | str | None) -> None:
        if self.state in (UploadState.SUBMITTED, UploadState.REMOVED):
            raise UploadStateError(f"Cannot change type of a {self.state.value.lower()} upload")
        self.document_type = coerce_document_type(document_type)
        self.state = UploadState.TYPED if self.document_type is not None else UploadState.SELECTED

    def file_part(self, field_name: str) -> MultipartPart:
        return (field_name, (self.file.name, self.file.data, self.file.content_type))

    def type_part(self, field_name: str) -> MultipartPart:
        return (field_name, (None, self.document_type.value if self.document_type else ""))


class UploadBatch:
    def __init__(self, files: Iterable[LocalFile] = ()):
        self._items: list[PendingUpload] = []
        self.add(files)

    def add(self, files: Iterable[LocalFile], document_type: DocumentType | str | None = None) -> list[PendingUpload]:
        added = [PendingUpload(file=f, document_type=document_type) for f in files]
        self._items.extend(added)
        return added

    def get(self, upload_id: str) -> PendingUpload:
        for item in self._items:
            if item.id == upload_id and item.state != UploadState.REMOVED:
                return item
        raise UploadStateError(f"No pending upload with id {upload_id}")

    def set_type(self, upload_id: str, document_type: DocumentType | str | None) -> PendingUpload:
        item = self.get(upload_id)
        item.assign_type(document_type)
        return item

    def set_description(self, upload_id: str, description: str) -> PendingUpload:
        item = self.get(upload_id)
        item.description = str(description or "").strip()
        return item

    def remove(self, upload_id: str) -> None:
        item = self.get(upload_id)
        if item.state == UploadState.SUBMITTED:
            raise UploadStateError("Cannot remove an upload that was already submitted")
        item.state = UploadState.REMOVED
        self._items = [i for i in self._items if i.id != upload_id]

    @property
    def items(self) -> list[PendingUpload]:
        return [i for i in self._items if i.state in (UploadState.SELECTED, UploadState.TYPED)]

    def eligible(self) -> list[PendingUpload]:
        return [i for i in self._items if i.eligible]

    def untyped(self) -> list[PendingUpload]:
        return [i for i in self._items if i.state == UploadState.SELECTED]

    def multipart(
        self,
        file_field: str = "documents",
        type_field: str = "documentTypes",
        description_field: str | None = "documentDescriptions",
    ) -> list[MultipartPart]:
        return build_multipart_parts(
            self.eligible(), file_field=file_field, type_field=type_field, description_field=description_field
        )

    def mark_submitted(self) -> list[PendingUpload]:
        submitted = self.eligible()
        for item in submitted:
            item.state = UploadState.SUBMITTED
        self._items = [i for i in self._items if i.state != UploadState.SUBMITTED]
        return submitted

    def clear(self) -> None:
        for item in self._items:
            item.state = UploadState.REMOVED
        self._items = []

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


def build_multipart_parts(
    uploads: Iterable[PendingUpload],
    *,
    file_field: str = "documents",
    type_field: str = "documentTypes",
    description_field: str | None = "documentDescriptions",
) -> list[MultipartPart]:
    """
    Interleave file and type parts, one group per typed upload.

    When any upload carries a description, every group also gets a
    description part (empty when unset) so the three arrays stay aligned.
    """
    typed = [u for u in uploads if u.eligible]
    with_descriptions = bool(description_field) and any(u.description for u in typed)
    parts: list[MultipartPart] = []
    for upload in typed:
        parts.append(upload.file_part(file_field))
        parts.append(upload.type_part(type_field))
        if with_descriptions:
            parts.append((description_field, (None, upload.description)))
    return parts


def field_parts(fields: dict) -> list[MultipartPart]:
    """Text form fields as multipart parts; None and empty strings are omitted."""
    parts: list[MultipartPart] = []
    for key, value in fields.items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        parts.append((key, (None, str(value))))
    return parts
