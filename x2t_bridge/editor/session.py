"""Bridge between the document editor's events and the conversion layer.

WHY: The editor never sees office files. It opens documents from bin
buffers, saves by emitting a bin plus a numeric output format code, and
asks the host to store pasted images. Something has to translate those
events into conversions and answer with the editor's commands.

HOW: EditorSession wraps one open document. It converts (or takes an
empty template for new documents), pushes media URLs and the bin buffer to
the editor, and handles the editor's save and write-file events. Commands
go out through an EditorChannel, so any transport (a websocket, an
embedded browser bridge, a test double) can carry them.

RULES:
- Media URLs are sent before the document buffer
- Save events map output format codes through OUTPUT_FORMATS
- A save answers asc_onSaveCallback with err_code 0, or 1 on failure
- A user-cancelled save is not a failure (err_code 0)
- Pasted images are tracked per session, never in process-global state
- Invalid write-file events are answered with success=False, not raised
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol

from x2t_bridge.blobs import BlobRegistry
from x2t_bridge.core.formats import (
    extension_for_mime,
    format_name_for_code,
    image_mime_type,
)
from x2t_bridge.core.models import BinConversionResult
from x2t_bridge.core.sanitize import extension_of
from x2t_bridge.errors import UnsupportedFormatError
from x2t_bridge.media import MEDIA_KEY_PREFIX
from x2t_bridge.orchestrator import ConversionOrchestrator

logger = logging.getLogger(__name__)

SAVE_OK = 0
SAVE_FAILED = 1


class EditorCommand(str, enum.Enum):
    """Command names understood by the editor SDK."""

    OPEN_DOCUMENT = "asc_openDocument"
    SET_IMAGE_URLS = "asc_setImageUrls"
    SAVE_CALLBACK = "asc_onSaveCallback"
    WRITE_FILE_CALLBACK = "asc_writeFileCallback"


class EditorChannel(Protocol):
    def send_command(self, command: str, data: Dict[str, Any]) -> None:
        ...


@dataclass
class EditorDocument:
    """The document currently loaded in the editor."""

    file_name: str
    file_type: str
    bin: bytes
    media: Dict[str, str] = field(default_factory=dict)


class EditorSession:
    """One editor instance and the document it is editing.

    Args:
        orchestrator: Performs the conversions.
        channel: Sends commands to the editor.
        templates: Empty-document bin templates keyed by ``".<ext>"``.
    """

    def __init__(
        self,
        orchestrator: ConversionOrchestrator,
        channel: EditorChannel,
        templates: Optional[Mapping[str, bytes]] = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._channel = channel
        self._templates = dict(templates or {})
        self.document: Optional[EditorDocument] = None
        self.media: Dict[str, str] = {}

    @property
    def blobs(self) -> BlobRegistry:
        return self._orchestrator.blobs

    def _send(self, command: EditorCommand, data: Dict[str, Any]) -> None:
        self._channel.send_command(command.value, data)

    async def open_document(
        self,
        file_name: str,
        data: Optional[bytes] = None,
        mime_type: Optional[str] = None,
        is_new: bool = False,
    ) -> EditorDocument:
        """Load a new (template) or existing document into the editor.

        Errors are logged with their message and re-raised to the caller.
        """
        try:
            file_type = (extension_for_mime(mime_type) or extension_of(file_name)).lower()

            if is_new:
                template = self._templates.get(".{}".format(file_type))
                if template is None:
                    raise UnsupportedFormatError(file_type)
                document = EditorDocument(file_name=file_name, file_type=file_type, bin=template)
            else:
                if data is None:
                    raise ValueError("No document data provided for {}".format(file_name))
                result = await self._orchestrator.document_to_binary(data, file_name, mime_type)
                document = EditorDocument(
                    file_name=file_name,
                    file_type=file_type,
                    bin=result.bin,
                    media=dict(result.media),
                )
        except Exception as exc:
            logger.error("Document operation failed for %s: %s", file_name, exc)
            raise

        self.document = document
        self.media = dict(document.media)
        if document.media:
            self._send(EditorCommand.SET_IMAGE_URLS, {"urls": dict(document.media)})
        self._send(EditorCommand.OPEN_DOCUMENT, {"buf": document.bin})
        logger.info("Opened %s in editor", file_name)
        return document

    async def handle_save(self, output_format: int, data: bytes) -> BinConversionResult:
        """Convert the editor's bin into the requested format and save it."""
        file_name = self.document.file_name if self.document else ""
        try:
            target = format_name_for_code(output_format)
            result = await self._orchestrator.binary_to_document(data, file_name, target)
        except Exception:
            logger.exception("Saving %s failed", file_name or "document")
            self._send(EditorCommand.SAVE_CALLBACK, {"err_code": SAVE_FAILED})
            raise

        self._send(EditorCommand.SAVE_CALLBACK, {"err_code": SAVE_OK})
        return result

    def handle_write_file(self, data: Any, file_name: Any) -> Optional[str]:
        """Register a pasted image and tell the editor where to find it.

        Returns the image URL, or None when the event was invalid.
        """
        try:
            if not isinstance(data, (bytes, bytearray, memoryview)):
                raise ValueError("Invalid image data: expected bytes")
            if not file_name or not isinstance(file_name, str):
                raise ValueError("Invalid file name")
        except ValueError as exc:
            logger.warning("Rejected write-file event: %s", exc)
            self._send(
                EditorCommand.WRITE_FILE_CALLBACK,
                {"success": False, "error": str(exc)},
            )
            return None

        mime_type = image_mime_type(extension_of(file_name) or "png")
        url = self.blobs.create(bytes(data), mime_type)
        self.media[MEDIA_KEY_PREFIX + file_name] = url

        self._send(EditorCommand.SET_IMAGE_URLS, {"urls": dict(self.media)})
        self._send(EditorCommand.WRITE_FILE_CALLBACK, {"path": url, "imgName": file_name})
        logger.info("Stored pasted image %s", file_name)
        return url
