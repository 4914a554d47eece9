"""Addressable in-memory handles for converted bytes and media assets.

WHY: The editor references embedded images by URL, not by bytes. After a
conversion each media file needs a stable handle that the editor (or an
HTTP client) can resolve later, the same way object URLs work in a
browser. A long-running server cannot keep every handle forever, so
handles can be given a time-to-live.

HOW: BlobRegistry stores Blob records under generated "blob:x2t/<hex>"
URLs. A threading.Lock guards the dict because the HTTP server may resolve
URLs from worker threads while conversions register new ones.
cleanup_expired() drops blobs older than the registry's TTL.

RULES:
- URLs are unique per registry and never reused
- get() returns None for unknown, revoked or expired URLs
- revoke() is idempotent and returns whether something was removed
- ttl_seconds=None (the default) means blobs never expire; the HTTP
  server passes BLOB_TTL_S from config
- TTL is measured from created_at
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

logger = logging.getLogger(__name__)

BLOB_URL_PREFIX = "blob:x2t/"


@dataclass(frozen=True)
class Blob:
    data: bytes
    mime_type: str
    created_at: float


class BlobRegistry:
    """Thread-safe store of blobs addressable by URL.

    Args:
        ttl_seconds: Age after which cleanup_expired() removes a blob and
                     get() stops returning it. None disables expiry.
    """

    def __init__(self, ttl_seconds: Optional[float] = None) -> None:
        self._blobs: Dict[str, Blob] = {}
        self._lock = threading.Lock()
        self._ttl_seconds = ttl_seconds

    @property
    def ttl_seconds(self) -> Optional[float]:
        return self._ttl_seconds

    def create(self, data: bytes, mime_type: str = "application/octet-stream") -> str:
        url = BLOB_URL_PREFIX + uuid.uuid4().hex
        with self._lock:
            self._blobs[url] = Blob(
                data=bytes(data), mime_type=mime_type, created_at=time.time()
            )
        return url

    def get(self, url: str) -> Optional[Blob]:
        with self._lock:
            blob = self._blobs.get(url)
        if blob is None or self._is_expired(blob, time.time()):
            return None
        return blob

    def revoke(self, url: str) -> bool:
        with self._lock:
            return self._blobs.pop(url, None) is not None

    def cleanup_expired(self) -> int:
        """Remove every blob older than the TTL and return how many went."""
        if self._ttl_seconds is None:
            return 0

        now = time.time()
        with self._lock:
            expired = [url for url, blob in self._blobs.items() if self._is_expired(blob, now)]
            for url in expired:
                del self._blobs[url]

        if expired:
            logger.info("Expired %d blob(s) older than %.0fs", len(expired), self._ttl_seconds)
        return len(expired)

    def _is_expired(self, blob: Blob, now: float) -> bool:
        return self._ttl_seconds is not None and now - blob.created_at > self._ttl_seconds

    def __len__(self) -> int:
        with self._lock:
            return len(self._blobs)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._blobs


def blob_id(url: str) -> str:
    """The opaque id part of a blob URL (used in HTTP paths)."""
    if url.startswith(BLOB_URL_PREFIX):
        return url[len(BLOB_URL_PREFIX):]
    return url


def blob_url(blob_id_: str) -> str:
    return BLOB_URL_PREFIX + blob_id_
