"""
Object URL registry.

Binary payloads (downloads, previews, exports, thumbnails) are parked here
under a `blob:<uuid>` reference. Whoever creates a URL owns it and must
revoke it when the preview or download is dismissed.
"""
from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass


logger = logging.getLogger(__name__)

URL_PREFIX = "blob:"


@dataclass(frozen=True)
class Blob:
    data: bytes
    content_type: str = "application/octet-stream"
    filename: str = ""

    @property
    def size(self) -> int:
        return len(self.data)


class ObjectUrlStore:
    def __init__(self):
        self._items: dict[str, Blob] = {}
        self._lock = threading.RLock()

    def create(self, blob: Blob) -> str:
        url = f"{URL_PREFIX}{uuid.uuid4()}"
        with self._lock:
            self._items[url] = blob
        return url

    def resolve(self, url: str) -> Blob:
        """Return the blob behind `url`. Raises KeyError once revoked."""
        with self._lock:
            return self._items[url]

    def revoke(self, url: str | None) -> bool:
        if not url:
            return False
        with self._lock:
            return self._items.pop(url, None) is not None

    def revoke_all(self) -> int:
        with self._lock:
            count = len(self._items)
            self._items.clear()
        if count:
            logger.debug("revoked %s outstanding object urls", count)
        return count

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
