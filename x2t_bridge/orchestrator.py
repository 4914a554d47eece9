"""End-to-end conversion between office documents and the engine's bin format.

WHY: The engine only understands a staged calling convention: input bytes
and a parameter document written into its virtual filesystem, one
entrypoint call with the parameter path, output read back from a path
named in that document. Getting any step wrong corrupts conversions
silently, so the whole sequence lives in one place.

HOW: ConversionOrchestrator borrows the engine from an EngineLifecycle for
each call (initializing it on first use) and runs the stage → write
params → invoke → collect sequence for either direction:

  document_to_binary: classify → sanitize → stage input → clear media
                      → params → main1 → read <input>.bin → collect media
  binary_to_document: sanitize → stage <base>.bin → params (PDF adds the
                      font dir) → main1 → read <base>.<ext> → deliver

RULES:
- Unsupported source formats fail before the engine is touched
- A non-zero entrypoint status raises ConversionError; no result returned
- Filesystem errors surface as StagingIOError naming the path
- Staging files (including params.xml) are rewritten per request
- Media left over from an earlier conversion is removed before the engine
  runs, so a result only carries its own media
- Conversions are not serialized here; concurrent use of one engine is
  the caller's responsibility
- No automatic retries
"""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Optional, Union

from x2t_bridge.blobs import BlobRegistry
from x2t_bridge.config import ENGINE_ENTRYPOINT, PARAMS_PATH, WORKING_DIR
from x2t_bridge.core.formats import classify, extension_for_mime, media_info
from x2t_bridge.core.models import BinConversionResult, ConversionResult
from x2t_bridge.core.params import ConversionRequest, build_params
from x2t_bridge.core.sanitize import extension_of, sanitize_file_name, strip_extension
from x2t_bridge.delivery import ResultDelivery
from x2t_bridge.engine.interfaces import EngineModule
from x2t_bridge.engine.lifecycle import EngineLifecycle
from x2t_bridge.errors import (
    ConversionError,
    SaveCancelled,
    StagingIOError,
    UnsupportedFormatError,
    X2TError,
)
from x2t_bridge.media import MediaExtractor

logger = logging.getLogger(__name__)

DEFAULT_TARGET_FORMAT = "DOCX"

_TARGET_FORMAT = re.compile(r"^[a-z0-9_]+$")


class ConversionOrchestrator:
    """Drives single conversions against the shared engine.

    Args:
        lifecycle: Provides the ready engine handle.
        blobs: Registry for media handles. A private one is created when
               omitted.
        delivery: Where binary_to_document() hands finished documents.
                  Without one, results are returned but not persisted.
        entrypoint: Name of the engine function to invoke.
    """

    def __init__(
        self,
        lifecycle: EngineLifecycle,
        *,
        blobs: Optional[BlobRegistry] = None,
        delivery: Optional[ResultDelivery] = None,
        entrypoint: str = ENGINE_ENTRYPOINT,
    ) -> None:
        self._lifecycle = lifecycle
        self._blobs = blobs if blobs is not None else BlobRegistry()
        self._delivery = delivery
        self._entrypoint = entrypoint

    @property
    def lifecycle(self) -> EngineLifecycle:
        return self._lifecycle

    @property
    def blobs(self) -> BlobRegistry:
        return self._blobs

    # ------------------------------------------------------------------
    # Document → bin
    # ------------------------------------------------------------------

    async def document_to_binary(
        self,
        data: bytes,
        file_name: str,
        mime_type: Optional[str] = None,
    ) -> ConversionResult:
        """Convert an office document into the engine's bin representation.

        The extension is taken from ``mime_type`` when it maps to a known
        type, otherwise from ``file_name``.

        Raises:
            UnsupportedFormatError: extension has no document category.
            ConversionError: the engine returned a non-zero status.
            StagingIOError: the virtual filesystem rejected a read or write.
            EngineLoadError / EngineInitTimeoutError: the engine is unavailable.
        """
        extension = extension_for_mime(mime_type) or extension_of(file_name or "")
        document_type = classify(extension)

        engine = await self._lifecycle.initialize()

        sanitized_name = sanitize_file_name(file_name)
        input_path = "{}/{}".format(WORKING_DIR, sanitized_name)
        output_path = "{}.bin".format(input_path)
        logger.info("Converting %s (%s) to bin", sanitized_name, document_type.value)

        extractor = MediaExtractor(engine.fs, self._blobs)
        self._write(engine, input_path, data)
        extractor.clear()
        self._execute(engine, ConversionRequest.create(input_path, output_path))

        result = self._read(engine, output_path)
        media = extractor.collect()

        return ConversionResult(
            file_name=sanitized_name,
            document_type=document_type,
            bin=result,
            media=media,
        )

    async def convert_file(self, path: Union[str, Path]) -> ConversionResult:
        """Read a local file and convert it with document_to_binary()."""
        path = Path(path)
        data = await asyncio.to_thread(path.read_bytes)
        return await self.document_to_binary(data, path.name)

    # ------------------------------------------------------------------
    # Bin → document
    # ------------------------------------------------------------------

    async def binary_to_document(
        self,
        bin_data: bytes,
        original_file_name: str,
        target_ext: str = DEFAULT_TARGET_FORMAT,
    ) -> BinConversionResult:
        """Convert a bin payload into ``target_ext`` and hand it to the delivery.

        ``target_ext`` is a format name such as ``"DOCX"`` or ``"PDF"``;
        the output extension is its lowercase form.
        """
        target = (target_ext or "").strip().lstrip(".").lower()
        if not _TARGET_FORMAT.match(target):
            raise UnsupportedFormatError(target_ext)

        engine = await self._lifecycle.initialize()

        base = strip_extension(sanitize_file_name(original_file_name))
        bin_path = "{}/{}.bin".format(WORKING_DIR, base)
        output_file_name = "{}.{}".format(base, target)
        output_path = "{}/{}".format(WORKING_DIR, output_file_name)
        logger.info("Converting bin to %s", output_file_name)

        self._write(engine, bin_path, bin_data)
        self._execute(engine, ConversionRequest.create(bin_path, output_path))
        data = self._read(engine, output_path)

        delivered = await self._deliver(data, output_file_name, target)
        return BinConversionResult(
            file_name=output_file_name,
            data=data,
            delivered=delivered,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _execute(self, engine: EngineModule, request: ConversionRequest) -> None:
        self._write(engine, PARAMS_PATH, build_params(request))
        status = engine.call(self._entrypoint, PARAMS_PATH)
        if status != 0:
            logger.error(
                "Engine returned %s converting %s to %s",
                status,
                request.source_path,
                request.destination_path,
            )
            raise ConversionError(status)

    @staticmethod
    def _write(engine: EngineModule, path: str, data: Union[bytes, str]) -> None:
        try:
            engine.fs.write_file(path, data)
        except X2TError:
            raise
        except Exception as exc:
            raise StagingIOError(path, exc) from exc

    @staticmethod
    def _read(engine: EngineModule, path: str) -> bytes:
        try:
            return bytes(engine.fs.read_file(path))
        except X2TError:
            raise
        except Exception as exc:
            raise StagingIOError(path, exc) from exc

    async def _deliver(self, data: bytes, file_name: str, extension: str) -> bool:
        if self._delivery is None:
            return False
        try:
            await self._delivery.deliver(data, file_name, media_info(extension))
        except SaveCancelled:
            logger.info("Save of %s cancelled by user", file_name)
            return False
        return True
