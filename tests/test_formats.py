"""Tests for format classification, save metadata and output format codes.

WHY: classify() is the gate in front of every conversion, media_info()
decides what a saved file is labelled as, and the output format table is
shared with the editor and the engine. A wrong entry in any of them shows
up as a refused upload or a mislabelled download.

HOW: Table-driven checks per function, plus the asymmetry
between strict classification and lenient save metadata.
"""

from __future__ import annotations

import pytest

from x2t_bridge.core.formats import (
    DEFAULT_DESCRIPTION,
    DEFAULT_MIME_TYPE,
    DOCUMENT_CATEGORIES,
    OUTPUT_FORMATS,
    DocumentCategory,
    classify,
    extension_for_mime,
    format_code_for_name,
    format_name_for_code,
    image_mime_type,
    is_supported,
    media_info,
)
from x2t_bridge.errors import UnsupportedFormatError, X2TError


# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------


class TestClassify:

    @pytest.mark.parametrize("extension", ["docx", "doc", "odt", "rtf", "txt"])
    def test_text_documents(self, extension):
        assert classify(extension) is DocumentCategory.TEXT

    @pytest.mark.parametrize("extension", ["xlsx", "xls", "ods", "csv"])
    def test_spreadsheets(self, extension):
        assert classify(extension) is DocumentCategory.SPREADSHEET

    @pytest.mark.parametrize("extension", ["pptx", "ppt", "odp"])
    def test_presentations(self, extension):
        assert classify(extension) is DocumentCategory.PRESENTATION

    def test_case_insensitive(self):
        assert classify("DOCX") is DocumentCategory.TEXT
        assert classify("PpTx") is DocumentCategory.PRESENTATION

    def test_leading_dot_ignored(self):
        assert classify(".xlsx") is DocumentCategory.SPREADSHEET

    def test_category_values_match_editor_document_types(self):
        assert DocumentCategory.TEXT.value == "word"
        assert DocumentCategory.SPREADSHEET.value == "cell"
        assert DocumentCategory.PRESENTATION.value == "slide"

    def test_unknown_extension_raises(self):
        with pytest.raises(UnsupportedFormatError) as exc_info:
            classify("xyz")
        assert exc_info.value.extension == "xyz"
        assert str(exc_info.value) == "Unsupported file format: xyz"

    def test_empty_extension_raises(self):
        with pytest.raises(UnsupportedFormatError):
            classify("")

    def test_unsupported_is_a_value_error_and_x2t_error(self):
        with pytest.raises(ValueError):
            classify("xyz")
        with pytest.raises(X2TError):
            classify("xyz")

    def test_pdf_is_not_an_input_format(self):
        with pytest.raises(UnsupportedFormatError):
            classify("pdf")

    def test_is_supported(self):
        assert is_supported("docx")
        assert is_supported(".CSV")
        assert not is_supported("xyz")
        assert all(is_supported(ext) for ext in DOCUMENT_CATEGORIES)


# ---------------------------------------------------------------------------
# media_info
# ---------------------------------------------------------------------------


class TestMediaInfo:

    def test_docx(self):
        info = media_info("docx")
        assert info.mime_type == (
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
        )
        assert info.description == "Word Document"

    def test_pdf_has_metadata_even_though_not_classifiable(self):
        info = media_info("pdf")
        assert info.mime_type == "application/pdf"
        assert info.description == "PDF Document"

    def test_unknown_extension_defaults(self):
        info = media_info("xyz")
        assert info.mime_type == DEFAULT_MIME_TYPE == "application/octet-stream"
        assert info.description == DEFAULT_DESCRIPTION == "Document"

    def test_image_has_mime_but_default_description(self):
        info = media_info("png")
        assert info.mime_type == "image/png"
        assert info.description == "Document"

    def test_case_insensitive(self):
        assert media_info("XLSX") == media_info("xlsx")

    def test_every_category_has_a_mime_type(self):
        for extension in DOCUMENT_CATEGORIES:
            assert media_info(extension).mime_type != DEFAULT_MIME_TYPE


# ---------------------------------------------------------------------------
# MIME helpers
# ---------------------------------------------------------------------------


class TestMimeHelpers:

    def test_extension_for_known_mime(self):
        assert extension_for_mime(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        ) == "xlsx"

    def test_extension_for_mime_ignores_parameters(self):
        assert extension_for_mime("text/csv; charset=utf-8") == "csv"

    @pytest.mark.parametrize("mime", [None, "", "application/octet-stream", "foo/bar"])
    def test_extension_for_generic_or_unknown_mime(self, mime):
        assert extension_for_mime(mime) is None

    @pytest.mark.parametrize("extension,expected", [
        ("png", "image/png"),
        ("JPG", "image/jpeg"),
        ("jpeg", "image/jpeg"),
        ("svg", "image/svg+xml"),
        ("tif", "image/tiff"),
    ])
    def test_image_mime_type(self, extension, expected):
        assert image_mime_type(extension) == expected

    def test_image_mime_type_defaults_to_png(self):
        assert image_mime_type("emf") == "image/png"
        assert image_mime_type("") == "image/png"


# ---------------------------------------------------------------------------
# Output format codes
# ---------------------------------------------------------------------------


class TestOutputFormats:

    @pytest.mark.parametrize("name,code", [
        ("DOCX", 65),
        ("PDF", 513),
        ("XLSX", 257),
        ("PPTX", 129),
        ("ODT", 67),
        ("CSV", 260),
        ("PNG", 1029),
    ])
    def test_known_codes(self, name, code):
        assert OUTPUT_FORMATS[name] == code
        assert format_name_for_code(code) == name
        assert format_code_for_name(name) == code

    def test_codes_are_unique(self):
        assert len(set(OUTPUT_FORMATS.values())) == len(OUTPUT_FORMATS)

    def test_name_lookup_is_case_insensitive(self):
        assert format_code_for_name("pdf") == 513

    def test_unknown_code_raises(self):
        with pytest.raises(UnsupportedFormatError) as exc_info:
            format_name_for_code(9999)
        assert exc_info.value.extension == "9999"

    def test_unknown_name_raises(self):
        with pytest.raises(UnsupportedFormatError):
            format_code_for_name("WORDPERFECT")
