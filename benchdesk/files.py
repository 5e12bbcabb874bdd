"""
Client-side file helpers for candidate documents.

Pure functions with no network access:
- pre-flight validation (type allow-list, size ceiling, empty files)
- human-readable sizes
- extension -> icon / category lookups
- preview URLs and JPEG thumbnails registered in an ObjectUrlStore
"""
from __future__ import annotations

import logging
import mimetypes
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from io import BytesIO
from pathlib import Path
from typing import Any, Iterable

from PIL import Image, UnidentifiedImageError

from benchdesk.blobs import Blob, ObjectUrlStore
from benchdesk.config import get_config
from benchdesk.errors import ThumbnailError


logger = logging.getLogger(__name__)


# ============================================================================
# Local files
# ============================================================================

@dataclass(frozen=True)
class LocalFile:
    name: str
    content_type: str
    data: bytes
    last_modified: datetime | None = None

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: str | os.PathLike, content_type: str | None = None) -> "LocalFile":
        p = Path(path)
        ctype = content_type or mimetypes.guess_type(p.name)[0] or "application/octet-stream"
        stat = p.stat()
        return cls(
            name=p.name,
            content_type=ctype,
            data=p.read_bytes(),
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        )

    def as_blob(self) -> Blob:
        return Blob(data=self.data, content_type=self.content_type, filename=self.name)


# ============================================================================
# Validation
# ============================================================================

COMMON_DOCUMENT_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "text/plain",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/zip",
    "application/x-zip-compressed",
)


@dataclass
class FileValidation:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    file_info: dict[str, Any] = field(default_factory=dict)


def validate_file(
    file: LocalFile,
    allowed_types: Iterable[str] | None = None,
    max_size: int | None = None,
) -> FileValidation:
    """
    Check a file before it is attached to a submission.

    Every violated rule is reported; nothing short-circuits.
    `max_size` defaults to the configured upload ceiling.
    """
    limit = max_size if max_size is not None else get_config().max_upload_bytes
    allowed = set(allowed_types or ()) or set(COMMON_DOCUMENT_TYPES)
    ctype = str(file.content_type or "").strip().lower()
    errors: list[str] = []

    if ctype not in allowed:
        errors.append(
            f'File type "{file.content_type}" is not supported. '
            "Please upload PDF, Word, Excel, or Image files."
        )

    if file.size > limit:
        errors.append(
            f"File size exceeds {round(limit / 1024 / 1024)}MB limit. "
            f"Current size: {format_file_size(file.size)}"
        )

    if file.size == 0:
        errors.append("File appears to be empty. Please select a valid file.")

    return FileValidation(
        is_valid=not errors,
        errors=errors,
        file_info={
            "name": file.name,
            "size": format_file_size(file.size),
            "type": file.content_type,
            "last_modified": file.last_modified.date().isoformat() if file.last_modified else "",
        },
    )


# ============================================================================
# Sizes, icons, categories
# ============================================================================

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


def format_file_size(size: float) -> str:
    if size == 0:
        return "0 Bytes"
    if size < 0:
        return "Invalid size"

    i = 0
    value = float(size)
    while value >= 1024 and i < len(_SIZE_UNITS) - 1:
        value /= 1024
        i += 1
    number = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{number} {_SIZE_UNITS[i]}"


DEFAULT_ICON = "📎"

_ICONS = {
    "pdf": "📄", "txt": "📄", "rtf": "📄",
    "doc": "📝", "docx": "📝",
    "xls": "📊", "xlsx": "📊", "csv": "📊",
    "ppt": "📽️", "pptx": "📽️",
    "jpg": "🖼️", "jpeg": "🖼️", "png": "🖼️", "gif": "🖼️", "bmp": "🖼️", "webp": "🖼️", "svg": "🖼️",
    "mp4": "🎥", "avi": "🎥", "mov": "🎥", "wmv": "🎥", "flv": "🎥", "webm": "🎥",
    "mp3": "🎵", "wav": "🎵", "flac": "🎵", "aac": "🎵",
    "zip": "🗜️", "rar": "🗜️", "7z": "🗜️", "tar": "🗜️", "gz": "🗜️",
    "js": "💻", "html": "💻", "css": "💻", "java": "💻", "py": "💻", "cpp": "💻", "c": "💻",
}

_CATEGORIES = {
    "document": {"pdf", "doc", "docx", "txt", "rtf"},
    "image": {"jpg", "jpeg", "png", "gif", "bmp", "webp", "svg"},
    "spreadsheet": {"xls", "xlsx", "csv"},
    "presentation": {"ppt", "pptx"},
    "video": {"mp4", "avi", "mov", "wmv", "flv", "webm"},
    "audio": {"mp3", "wav", "flac", "aac"},
    "archive": {"zip", "rar", "7z", "tar", "gz"},
}

PREVIEWABLE_EXTENSIONS = frozenset({"pdf", "jpg", "jpeg", "png", "gif", "webp", "txt"})


def file_extension(filename: str | None) -> str:
    name = str(filename or "").strip()
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1].lower()


def get_file_icon(filename: str | None) -> str:
    return _ICONS.get(file_extension(filename), DEFAULT_ICON)


def get_file_category(filename: str | None) -> str:
    ext = file_extension(filename)
    for category, extensions in _CATEGORIES.items():
        if ext in extensions:
            return category
    return "other"


def can_preview(filename: str | None) -> bool:
    return file_extension(filename) in PREVIEWABLE_EXTENSIONS


# ============================================================================
# Preview URLs and thumbnails
# ============================================================================

def get_preview_url(file: LocalFile, store: ObjectUrlStore) -> str | None:
    """Object URL for images and PDFs; None for anything else or on failure."""
    ctype = str(file.content_type or "").lower()
    if not (ctype.startswith("image/") or ctype == "application/pdf"):
        return None
    try:
        return store.create(file.as_blob())
    except Exception:
        logger.exception("failed to create preview url for %s", file.name)
        return None


def generate_thumbnail(file: LocalFile, store: ObjectUrlStore, max_size: int = 200) -> str:
    """
    Scale an image so its longer side is at most `max_size` and register
    the JPEG result (quality 80) as an object URL.

    Raises ThumbnailError for non-image input or undecodable data; nothing is
    registered in that case.
    """
    if not str(file.content_type or "").lower().startswith("image/"):
        raise ThumbnailError("Thumbnails only supported for images")

    try:
        with Image.open(BytesIO(file.data)) as img:
            img.load()
            width, height = img.size
            if width > height:
                thumb_w = min(max_size, width)
                thumb_h = max(1, round(thumb_w * height / width))
            else:
                thumb_h = min(max_size, height)
                thumb_w = max(1, round(thumb_h * width / height))

            thumb = img.convert("RGB").resize((thumb_w, thumb_h))
            out = BytesIO()
            thumb.save(out, format="JPEG", quality=80)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ThumbnailError(f"Failed to load image for thumbnail: {e}") from e

    data = out.getvalue()
    if not data:
        raise ThumbnailError("Failed to generate thumbnail")

    stem = os.path.splitext(file.name)[0] or "thumbnail"
    return store.create(Blob(data=data, content_type="image/jpeg", filename=f"{stem}_thumb.jpg"))
