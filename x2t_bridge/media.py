"""Collection of embedded media written by the engine during a conversion.

WHY: When the engine converts a document into its bin format it writes
every embedded image into the media staging directory. The editor needs
those images as addressable handles keyed by the relative path the bin
refers to ("media/image1.png"). The directory is shared by every
conversion, so images left behind by an earlier document must never be
reported as part of the next one.

HOW: MediaExtractor.clear() empties the media directory before the engine
runs. collect() lists it afterwards, reads each entry, and registers it in
a BlobRegistry. Read failures are absorbed: an unreadable file is skipped,
an unlistable directory means "no media".

RULES:
- The "." and ".." pseudo-entries are skipped
- Keys are "media/<file name>", values are blob URLs
- A failed read is recorded on .failures and logged, never raised
- A failed directory listing yields an empty mapping
- clear() raises StagingIOError when a stale file cannot be removed;
  a missing directory has nothing to clear
"""

from __future__ import annotations

import logging
from typing import Dict, List

from x2t_bridge.blobs import BlobRegistry
from x2t_bridge.config import MEDIA_DIR
from x2t_bridge.core.formats import image_mime_type
from x2t_bridge.core.sanitize import extension_of
from x2t_bridge.engine.interfaces import VirtualFileSystem
from x2t_bridge.errors import MediaReadError, StagingIOError

logger = logging.getLogger(__name__)

MEDIA_KEY_PREFIX = "media/"


class MediaExtractor:
    """Turns the media staging directory into a path → blob URL mapping."""

    def __init__(
        self,
        fs: VirtualFileSystem,
        blobs: BlobRegistry,
        media_dir: str = MEDIA_DIR,
    ) -> None:
        self._fs = fs
        self._blobs = blobs
        self._media_dir = media_dir.rstrip("/")
        self.failures: List[MediaReadError] = []

    def clear(self) -> int:
        """Remove every file in the media directory and return how many."""
        try:
            entries = self._fs.readdir(self._media_dir + "/")
        except FileNotFoundError:
            return 0
        except Exception as exc:
            raise StagingIOError(self._media_dir, exc) from exc

        removed = 0
        for name in entries:
            if name in (".", ".."):
                continue
            path = "{}/{}".format(self._media_dir, name)
            try:
                self._fs.unlink(path)
            except IsADirectoryError:
                continue
            except Exception as exc:
                raise StagingIOError(path, exc) from exc
            removed += 1

        if removed:
            logger.debug("Removed %d stale media file(s)", removed)
        return removed

    def collect(self) -> Dict[str, str]:
        self.failures = []
        media: Dict[str, str] = {}

        try:
            entries = self._fs.readdir(self._media_dir + "/")
        except Exception as exc:
            logger.warning("Failed to read media directory %s: %s", self._media_dir, exc)
            return media

        for name in entries:
            if name in (".", ".."):
                continue
            path = "{}/{}".format(self._media_dir, name)
            try:
                data = self._fs.read_file(path)
            except Exception as exc:
                failure = MediaReadError(path, exc)
                self.failures.append(failure)
                logger.warning("%s", failure)
                continue
            media[MEDIA_KEY_PREFIX + name] = self._blobs.create(
                data, image_mime_type(extension_of(name))
            )

        return media
