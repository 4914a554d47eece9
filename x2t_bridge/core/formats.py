"""Document categories, MIME metadata, and editor output format codes.

WHY: Whether a file may be converted at all is decided by its extension;
what a save target looks like (MIME type, human-readable description) is
a separate, presentation-only question. The editor and the engine also
share a closed table of numeric output format codes. All three are plain
data so extending them is a data change, not a behavior change.

HOW: Module-level dicts keyed by lowercase extension or format name.
classify() is strict and raises; media_info() is lenient and falls back
to a generic binary type.

RULES:
- classify() raises UnsupportedFormatError for unknown extensions
- media_info() never raises; unknown extensions get octet-stream/"Document"
- Lookups are case-insensitive and tolerate a leading dot
- OUTPUT_FORMATS codes must match the editor SDK and engine exactly
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from x2t_bridge.errors import UnsupportedFormatError


class DocumentCategory(str, enum.Enum):
    """Coarse document kind derived from a file extension.

    Values are the document-type strings the editor expects.
    """

    TEXT = "word"
    SPREADSHEET = "cell"
    PRESENTATION = "slide"


DOCUMENT_CATEGORIES: dict[str, DocumentCategory] = {
    "docx": DocumentCategory.TEXT,
    "doc": DocumentCategory.TEXT,
    "odt": DocumentCategory.TEXT,
    "rtf": DocumentCategory.TEXT,
    "txt": DocumentCategory.TEXT,
    "xlsx": DocumentCategory.SPREADSHEET,
    "xls": DocumentCategory.SPREADSHEET,
    "ods": DocumentCategory.SPREADSHEET,
    "csv": DocumentCategory.SPREADSHEET,
    "pptx": DocumentCategory.PRESENTATION,
    "ppt": DocumentCategory.PRESENTATION,
    "odp": DocumentCategory.PRESENTATION,
}

# ---------------------------------------------------------------------------
# Save-target metadata (independent of DOCUMENT_CATEGORIES)
# ---------------------------------------------------------------------------

DEFAULT_MIME_TYPE = "application/octet-stream"
DEFAULT_DESCRIPTION = "Document"

MIME_TYPES: dict[str, str] = {
    # Text documents
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "doc": "application/msword",
    "odt": "application/vnd.oasis.opendocument.text",
    "rtf": "application/rtf",
    "txt": "text/plain",
    "pdf": "application/pdf",
    # Spreadsheets
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "xls": "application/vnd.ms-excel",
    "ods": "application/vnd.oasis.opendocument.spreadsheet",
    "csv": "text/csv",
    # Presentations
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "ppt": "application/vnd.ms-powerpoint",
    "odp": "application/vnd.oasis.opendocument.presentation",
    # Images
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "webp": "image/webp",
    "svg": "image/svg+xml",
}

DESCRIPTIONS: dict[str, str] = {
    "docx": "Word Document",
    "doc": "Word 97-2003 Document",
    "odt": "OpenDocument Text",
    "pdf": "PDF Document",
    "xlsx": "Excel Workbook",
    "xls": "Excel 97-2003 Workbook",
    "ods": "OpenDocument Spreadsheet",
    "pptx": "PowerPoint Presentation",
    "ppt": "PowerPoint 97-2003 Presentation",
    "odp": "OpenDocument Presentation",
    "txt": "Text Document",
    "rtf": "Rich Text Format",
    "csv": "CSV File",
}

DEFAULT_IMAGE_MIME_TYPE = "image/png"

IMAGE_MIME_TYPES: dict[str, str] = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "ico": "image/x-icon",
    "tiff": "image/tiff",
    "tif": "image/tiff",
}

# ---------------------------------------------------------------------------
# Output format codes shared by the editor and the engine
# ---------------------------------------------------------------------------

OUTPUT_FORMATS: dict[str, int] = {
    "UNKNOWN": 0,
    "PDF": 513,
    "PDFA": 521,
    "DJVU": 515,
    "XPS": 516,
    "DOCX": 65,
    "DOC": 66,
    "ODT": 67,
    "RTF": 68,
    "TXT": 69,
    "HTML": 70,
    "MHT": 71,
    "EPUB": 72,
    "FB2": 73,
    "MOBI": 74,
    "DOCM": 75,
    "DOTX": 76,
    "DOTM": 77,
    "FODT": 78,
    "OTT": 79,
    "DOC_FLAT": 80,
    "DOCX_FLAT": 81,
    "HTML_IN_CONTAINER": 82,
    "DOCX_PACKAGE": 84,
    "OFORM": 85,
    "DOCXF": 86,
    "DOCY": 4097,
    "CANVAS_WORD": 8193,
    "JSON": 2056,
    "XLSX": 257,
    "XLS": 258,
    "ODS": 259,
    "CSV": 260,
    "XLSM": 261,
    "XLTX": 262,
    "XLTM": 263,
    "XLSB": 264,
    "FODS": 265,
    "OTS": 266,
    "XLSX_FLAT": 267,
    "XLSX_PACKAGE": 268,
    "XLSY": 4098,
    "PPTX": 129,
    "PPT": 130,
    "ODP": 131,
    "PPSX": 132,
    "PPTM": 133,
    "PPSM": 134,
    "POTX": 135,
    "POTM": 136,
    "FODP": 137,
    "OTP": 138,
    "PPTX_PACKAGE": 139,
    "IMG": 1024,
    "JPG": 1025,
    "TIFF": 1026,
    "TGA": 1027,
    "GIF": 1028,
    "PNG": 1029,
    "EMF": 1030,
    "WMF": 1031,
    "BMP": 1032,
    "CR2": 1033,
    "PCX": 1034,
    "RAS": 1035,
    "PSD": 1036,
    "ICO": 1037,
}

_FORMAT_NAMES_BY_CODE: dict[int, str] = {code: name for name, code in OUTPUT_FORMATS.items()}


@dataclass(frozen=True)
class MediaInfo:
    """MIME type and human-readable description for a save target."""

    mime_type: str
    description: str


def _normalize(extension: str) -> str:
    return extension.strip().lstrip(".").lower()


def classify(extension: str) -> DocumentCategory:
    """Map a file extension to its document category.

    RULES:
    - Case-insensitive; a leading dot is ignored
    - Raises UnsupportedFormatError naming the extension when unknown
    """
    category = DOCUMENT_CATEGORIES.get(_normalize(extension))
    if category is None:
        raise UnsupportedFormatError(extension)
    return category


def is_supported(extension: str) -> bool:
    return _normalize(extension) in DOCUMENT_CATEGORIES


def media_info(extension: str) -> MediaInfo:
    """Return save-dialog metadata for an extension, defaulting when unknown."""
    key = _normalize(extension)
    return MediaInfo(
        mime_type=MIME_TYPES.get(key, DEFAULT_MIME_TYPE),
        description=DESCRIPTIONS.get(key, DEFAULT_DESCRIPTION),
    )


def extension_for_mime(mime_type: str | None) -> str | None:
    """Reverse MIME lookup for uploads that carry a content type.

    Returns the first matching extension in table order, or None for
    missing, generic or unknown types.
    """
    if not mime_type:
        return None
    mime = mime_type.split(";", 1)[0].strip().lower()
    if mime == DEFAULT_MIME_TYPE:
        return None
    for extension, candidate in MIME_TYPES.items():
        if candidate == mime:
            return extension
    return None


def image_mime_type(extension: str) -> str:
    """MIME type for a pasted or extracted image, defaulting to PNG."""
    return IMAGE_MIME_TYPES.get(_normalize(extension), DEFAULT_IMAGE_MIME_TYPE)


def format_name_for_code(code: int) -> str:
    """Translate an editor output format code into its format name.

    Raises UnsupportedFormatError for codes outside the shared table.
    """
    name = _FORMAT_NAMES_BY_CODE.get(code)
    if name is None:
        raise UnsupportedFormatError(str(code))
    return name


def format_code_for_name(name: str) -> int:
    code = OUTPUT_FORMATS.get(name.strip().upper())
    if code is None:
        raise UnsupportedFormatError(name)
    return code
