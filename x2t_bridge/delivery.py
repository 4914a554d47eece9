"""Persistence of converted documents.

WHY: Turning bytes into a saved file is the caller's environment's job
(a download, a save dialog, a directory). The orchestrator only picks the
name and type and hands the bytes over through a narrow protocol, so the
same conversion code serves the CLI, the HTTP API and tests.

HOW: ResultDelivery is a Protocol with one async method. DirectoryDelivery
writes into a local directory and asks before overwriting, which is where
a user can cancel.

RULES:
- deliver() raises SaveCancelled when the user aborts; that is not an error
- I/O failures while writing raise StagingIOError
- DirectoryDelivery never writes outside output_dir
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Optional, Protocol

from x2t_bridge.core.formats import MediaInfo
from x2t_bridge.errors import SaveCancelled, StagingIOError

logger = logging.getLogger(__name__)


class ResultDelivery(Protocol):
    async def deliver(self, data: bytes, file_name: str, info: MediaInfo) -> None:
        """Persist ``data`` under ``file_name``; raise SaveCancelled on user abort."""


class DirectoryDelivery:
    """Saves converted documents into a directory.

    Args:
        output_dir: Target directory (created if missing).
        confirm_overwrite: Called with the target path when a file already
            exists there. Returning False cancels the save. When omitted,
            existing files are overwritten.
    """

    def __init__(
        self,
        output_dir: Path,
        confirm_overwrite: Optional[Callable[[Path], bool]] = None,
    ) -> None:
        self.output_dir = Path(output_dir)
        self._confirm_overwrite = confirm_overwrite
        self.saved: list[Path] = []

    async def deliver(self, data: bytes, file_name: str, info: MediaInfo) -> None:
        target = self.output_dir / Path(file_name).name
        if target.exists() and self._confirm_overwrite is not None:
            if not self._confirm_overwrite(target):
                raise SaveCancelled(file_name)

        def write() -> None:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)

        try:
            await asyncio.to_thread(write)
        except OSError as exc:
            raise StagingIOError(str(target), exc) from exc

        self.saved.append(target)
        logger.info("Saved %s (%s, %d bytes)", target, info.description, len(data))
