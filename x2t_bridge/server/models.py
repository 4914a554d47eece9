"""Pydantic response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for response serialization
and automatic OpenAPI documentation.

HOW: One model per response shape, every field with a description.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Blob references are exposed as API paths (/blobs/{id}), never as the
  internal blob: URLs
- detail in ErrorResponse is always a human-readable message
"""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field


class ConversionResponse(BaseModel):
    """Result of converting an uploaded office document to bin.

    RULES:
    - bin_url downloads the engine's binary representation
    - media maps the relative path used inside the bin to a download path
    """

    file_name: str = Field(description="Sanitized name the document was staged under.")
    document_type: str = Field(description="Document category: 'word', 'cell' or 'slide'.")
    bin_url: str = Field(description="Path to download the converted bin payload.")
    size: int = Field(description="Size of the bin payload in bytes.")
    media: Dict[str, str] = Field(
        default_factory=dict,
        description="Embedded media, keyed by relative path (e.g. 'media/image1.png').",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "file_name": "report.docx",
                "document_type": "word",
                "bin_url": "/blobs/3f2b8c1d9e4a4f7b8c6d5e4f3a2b1c0d",
                "size": 48211,
                "media": {"media/image1.png": "/blobs/0a1b2c3d4e5f46a7b8c9d0e1f2a3b4c5"},
            }
        ]
    }}


class CategoryInfo(BaseModel):
    extension: str = Field(description="File extension (lowercase, no dot).")
    document_type: str = Field(description="Document category for the extension.")
    mime_type: str = Field(description="MIME type used when saving this format.")
    description: str = Field(description="Human-readable format description.")


class FormatsResponse(BaseModel):
    """Supported input formats and the editor's output format codes."""

    input_formats: List[CategoryInfo] = Field(description="Extensions accepted for conversion to bin.")
    output_formats: Dict[str, int] = Field(description="Output format names and their numeric codes.")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response.

    WHY: Load balancers need a liveness check, operators want to see
    whether the engine finished loading.
    """

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
    engine: str = Field(description="Engine lifecycle state.", json_schema_extra={"example": "ready"})
