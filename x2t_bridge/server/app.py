"""FastAPI application exposing document ↔ bin conversion over HTTP.

WHY: Web front-ends hosting the document editor need a backend that turns
uploaded office files into the editor's bin format (plus media URLs) and
turns saved bins back into downloadable documents.

HOW: A single FastAPI app with one shared EngineLifecycle, BlobRegistry
and ConversionOrchestrator. The engine is warmed up in the background on
startup so the first request does not pay the whole load time. Converted
bins and media are served from the blob registry.

RULES:
- The orchestrator is resolved through get_orchestrator() (overridable)
- Conversions are serialized with one asyncio.Lock; the engine and its
  staging directory are a single shared resource
- X2TError subclasses map to status codes in _ERROR_STATUS
- Blob URLs are exposed as /blobs/{blob_id} paths and expire after
  BLOB_TTL_S; expired blobs are swept periodically and on every upload
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Annotated, Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse, Response

from x2t_bridge import __version__
from x2t_bridge.blobs import BlobRegistry, blob_id, blob_url
from x2t_bridge.config import API_HOST, API_PORT, BLOB_CLEANUP_INTERVAL_S, BLOB_TTL_S
from x2t_bridge.core.formats import (
    DOCUMENT_CATEGORIES,
    OUTPUT_FORMATS,
    format_name_for_code,
    media_info,
)
from x2t_bridge.core.sanitize import extension_of
from x2t_bridge.engine.lifecycle import EngineLifecycle
from x2t_bridge.errors import (
    ConversionError,
    EngineInitTimeoutError,
    EngineLoadError,
    EngineNotReadyError,
    StagingIOError,
    UnsupportedFormatError,
    X2TError,
)
from x2t_bridge.orchestrator import ConversionOrchestrator
from x2t_bridge.server.models import (
    CategoryInfo,
    ConversionResponse,
    ErrorResponse,
    FormatsResponse,
    HealthResponse,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Shared state
# ---------------------------------------------------------------------------

blob_registry = BlobRegistry(ttl_seconds=BLOB_TTL_S)
orchestrator = ConversionOrchestrator(EngineLifecycle.from_config(), blobs=blob_registry)
_conversion_lock = asyncio.Lock()


def get_orchestrator() -> ConversionOrchestrator:
    return orchestrator


async def _warm_up(lifecycle: EngineLifecycle) -> None:
    try:
        await lifecycle.initialize()
    except X2TError as exc:
        logger.warning("Engine warm-up failed, will retry on first request: %s", exc)


async def _periodic_cleanup(blobs: BlobRegistry) -> None:
    """Expire old blobs every few minutes."""
    while True:
        await asyncio.sleep(BLOB_CLEANUP_INTERVAL_S)
        blobs.cleanup_expired()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start engine warm-up and blob cleanup on startup, cancel on shutdown."""
    converter = get_orchestrator()
    tasks = [
        asyncio.create_task(_warm_up(converter.lifecycle)),
        asyncio.create_task(_periodic_cleanup(converter.blobs)),
    ]
    yield
    for task in tasks:
        task.cancel()
    for task in tasks:
        try:
            await task
        except asyncio.CancelledError:
            pass


app = FastAPI(
    lifespan=lifespan,
    title="x2t-bridge Conversion API",
    description=(
        "Converts office documents (text, spreadsheet, presentation) into the "
        "editor's binary representation and back. Upload a document to get a "
        "bin payload and its media, or upload a bin to export a document."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

_ERROR_STATUS = (
    (UnsupportedFormatError, 400),
    (ConversionError, 422),
    (EngineInitTimeoutError, 503),
    (EngineLoadError, 503),
    (EngineNotReadyError, 503),
    (StagingIOError, 500),
)


@app.exception_handler(X2TError)
async def _conversion_error_handler(request: Request, exc: X2TError) -> JSONResponse:
    status_code = 500
    for error_type, code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            status_code = code
            break
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def _api_path(url: str) -> str:
    return "/blobs/{}".format(blob_id(url))


# ---------------------------------------------------------------------------
# Endpoints: Documents
# ---------------------------------------------------------------------------


@app.post(
    "/documents",
    response_model=ConversionResponse,
    tags=["documents"],
    summary="Convert an office document to bin",
    description=(
        "Upload a text, spreadsheet or presentation file. Returns a download "
        "path for the bin payload and paths for every embedded media file."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Unsupported file format"},
        422: {"model": ErrorResponse, "description": "Engine reported a conversion failure"},
        503: {"model": ErrorResponse, "description": "Conversion engine unavailable"},
    },
)
async def convert_document(
    file: Annotated[UploadFile, File(description="Office document to convert")],
    converter: Annotated[ConversionOrchestrator, Depends(get_orchestrator)],
) -> ConversionResponse:
    converter.blobs.cleanup_expired()
    data = await file.read()
    async with _conversion_lock:
        result = await converter.document_to_binary(
            data, file.filename or "", file.content_type
        )

    bin_ref = converter.blobs.create(result.bin, "application/octet-stream")
    return ConversionResponse(
        file_name=result.file_name,
        document_type=result.document_type.value,
        bin_url=_api_path(bin_ref),
        size=len(result.bin),
        media={path: _api_path(url) for path, url in result.media.items()},
    )


@app.post(
    "/documents/export",
    tags=["documents"],
    summary="Convert a bin payload to an office document",
    description=(
        "Upload a bin payload with the original file name and a target format "
        "(a name such as DOCX or PDF, or the editor's numeric output format "
        "code). Returns the converted document as an attachment."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Unknown target format"},
        422: {"model": ErrorResponse, "description": "Engine reported a conversion failure"},
        503: {"model": ErrorResponse, "description": "Conversion engine unavailable"},
    },
)
async def export_document(
    file: Annotated[UploadFile, File(description="Bin payload produced by the editor")],
    converter: Annotated[ConversionOrchestrator, Depends(get_orchestrator)],
    file_name: Annotated[str, Form(description="Original document file name.")],
    target: Annotated[
        Optional[str],
        Form(description="Target format name (e.g. 'DOCX', 'PDF') or numeric format code."),
    ] = "DOCX",
) -> Response:
    target = (target or "DOCX").strip()
    if target.isdigit():
        target = format_name_for_code(int(target))

    data = await file.read()
    async with _conversion_lock:
        result = await converter.binary_to_document(data, file_name, target)

    info = media_info(extension_of(result.file_name))
    return Response(
        content=result.data,
        media_type=info.mime_type,
        headers={"Content-Disposition": 'attachment; filename="{}"'.format(result.file_name)},
    )


# ---------------------------------------------------------------------------
# Endpoints: Blobs
# ---------------------------------------------------------------------------


@app.get(
    "/blobs/{blob_ref}",
    tags=["blobs"],
    summary="Download a bin payload or media file",
    responses={404: {"model": ErrorResponse, "description": "Blob not found"}},
)
async def get_blob(
    blob_ref: str,
    converter: Annotated[ConversionOrchestrator, Depends(get_orchestrator)],
) -> Response:
    blob = converter.blobs.get(blob_url(blob_ref))
    if blob is None:
        raise HTTPException(status_code=404, detail="Blob not found: {}".format(blob_ref))
    return Response(content=blob.data, media_type=blob.mime_type)


@app.delete(
    "/blobs/{blob_ref}",
    status_code=204,
    tags=["blobs"],
    summary="Release a bin payload or media file",
    responses={404: {"model": ErrorResponse, "description": "Blob not found"}},
)
async def delete_blob(
    blob_ref: str,
    converter: Annotated[ConversionOrchestrator, Depends(get_orchestrator)],
) -> Response:
    if not converter.blobs.revoke(blob_url(blob_ref)):
        raise HTTPException(status_code=404, detail="Blob not found: {}".format(blob_ref))
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Endpoints: Formats and health
# ---------------------------------------------------------------------------


@app.get(
    "/formats",
    response_model=FormatsResponse,
    tags=["formats"],
    summary="List supported formats",
)
async def list_formats() -> FormatsResponse:
    inputs = []
    for extension, category in sorted(DOCUMENT_CATEGORIES.items()):
        info = media_info(extension)
        inputs.append(CategoryInfo(
            extension=extension,
            document_type=category.value,
            mime_type=info.mime_type,
            description=info.description,
        ))
    return FormatsResponse(input_formats=inputs, output_formats=dict(OUTPUT_FORMATS))


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
)
async def health_check(
    converter: Annotated[ConversionOrchestrator, Depends(get_orchestrator)],
) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        engine=converter.lifecycle.state.value,
    )


def run_api(host: str = API_HOST, port: int = API_PORT) -> None:
    """Entry point for the x2t-bridge-api console script."""
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=host, port=port)
