"""Unit tests for file name sanitizing.

WHY: Sanitized names become staging paths and are inserted unescaped into
the engine's XML parameter document. A character slipping through can
redirect a write or break the engine's parser.

HOW: Tests cover the documented example, every stripped character class,
the fallbacks, truncation, and idempotency over a set of hostile names.
"""

import pytest

from x2t_bridge.config import MAX_BASE_NAME_LENGTH
from x2t_bridge.core.sanitize import (
    extension_of,
    sanitize_file_name,
    strip_extension,
)

UNSAFE_CHARACTERS = set('/?<>\\:*|"&\'%!{}[]') | {chr(c) for c in range(0x00, 0x20)} | {
    chr(c) for c in range(0x80, 0xA0)
}

HOSTILE_NAMES = [
    "résumé/v1.docx",
    "../../etc/passwd.docx",
    "a<b>c.xlsx",
    'quote"d.pptx',
    "tab\there.docx",
    "nul\x00byte.doc",
    "c1\x85control.odt",
    "{braces}[brackets].csv",
    "100%!&'.txt",
    "C:\\Users\\me\\report.docx",
    "...",
    ".....docx",
    " ... .docx",
    "name.d<o>cx",
    "name.???",
    "x" * 250 + ".pptx",
    " " + "y" * 199 + " z.docx",
    "noextension",
    "trailingdot.",
    "   padded   .docx",
]


class TestDocumentedExamples:

    def test_path_separator_is_stripped(self):
        assert sanitize_file_name("résumé/v1.docx") == "résumév1.docx"

    def test_plain_name_is_unchanged(self):
        assert sanitize_file_name("report.docx") == "report.docx"

    def test_inner_dots_are_kept(self):
        assert sanitize_file_name("q3.final.xlsx") == "q3.final.xlsx"


class TestFallbacks:

    @pytest.mark.parametrize("raw", ["", "   ", None, 42, b"bytes.docx"])
    def test_blank_or_non_string_yields_file_bin(self, raw):
        assert sanitize_file_name(raw) == "file.bin"

    def test_only_dots_yields_fallback(self):
        assert sanitize_file_name("...") == "file.bin"

    def test_dots_base_collapses_to_file(self):
        assert sanitize_file_name(".....docx") == "file.docx"

    def test_empty_base_becomes_file(self):
        assert sanitize_file_name("<>.docx") == "file.docx"

    def test_missing_extension_defaults_to_bin(self):
        assert sanitize_file_name("noextension") == "noextension.bin"

    def test_empty_extension_defaults_to_bin(self):
        assert sanitize_file_name("trailingdot.") == "trailingdot.bin"


class TestStripping:

    @pytest.mark.parametrize("char", list('/?<>\\:*|"'))
    def test_illegal_characters(self, char):
        assert sanitize_file_name("a{}b.docx".format(char)) == "ab.docx"

    @pytest.mark.parametrize("char", list("&'%!{}[]"))
    def test_unsafe_characters(self, char):
        assert sanitize_file_name("a{}b.docx".format(char)) == "ab.docx"

    @pytest.mark.parametrize("code", [0x00, 0x09, 0x1F, 0x80, 0x9F])
    def test_control_characters(self, code):
        assert sanitize_file_name("a{}b.docx".format(chr(code))) == "ab.docx"

    def test_whitespace_is_trimmed(self):
        assert sanitize_file_name("   padded   .docx") == "padded.docx"

    def test_extension_is_cleaned_too(self):
        assert sanitize_file_name("name.d<o>cx") == "name.docx"


class TestTruncation:

    def test_long_base_is_truncated(self):
        result = sanitize_file_name("x" * 250 + ".pptx")
        assert result == "x" * MAX_BASE_NAME_LENGTH + ".pptx"

    def test_base_at_limit_is_kept(self):
        name = "y" * MAX_BASE_NAME_LENGTH + ".docx"
        assert sanitize_file_name(name) == name


class TestProperties:

    @pytest.mark.parametrize("raw", HOSTILE_NAMES)
    def test_output_has_no_unsafe_characters(self, raw):
        result = sanitize_file_name(raw)
        assert not (set(result) & UNSAFE_CHARACTERS)

    @pytest.mark.parametrize("raw", HOSTILE_NAMES)
    def test_idempotent(self, raw):
        once = sanitize_file_name(raw)
        assert sanitize_file_name(once) == once

    @pytest.mark.parametrize("raw", HOSTILE_NAMES)
    def test_shape(self, raw):
        base, _, extension = sanitize_file_name(raw).rpartition(".")
        assert base
        assert extension
        assert len(base) <= MAX_BASE_NAME_LENGTH


class TestHelpers:

    def test_strip_extension(self):
        assert strip_extension("report.final.docx") == "report.final"

    def test_strip_extension_without_extension(self):
        assert strip_extension("report") == "report"

    def test_extension_of(self):
        assert extension_of("a.b.PDF") == "PDF"
        assert extension_of("none") == ""
