"""File name sanitizing for staging paths.

WHY: Uploaded file names are attacker-controlled and end up both as paths
in the engine's virtual filesystem and, unescaped, inside the XML parameter
document. Anything that could change the path, break the XML or confuse the
engine has to go before the name is used.

HOW: The name is split on its last dot. Unsafe characters are removed from
both halves, the base is trimmed and truncated, and empty results fall back
to fixed names. The function is pure and never touches a filesystem.

RULES:
- Output always has the form <base>.<extension>
- Base is at most MAX_BASE_NAME_LENGTH characters and never empty ("file")
- Missing or empty extension becomes "bin"
- Non-string or blank input yields "file.bin"
- sanitize_file_name(sanitize_file_name(x)) == sanitize_file_name(x)
"""

from __future__ import annotations

import re

from x2t_bridge.config import MAX_BASE_NAME_LENGTH

FALLBACK_NAME = "file.bin"
FALLBACK_BASE = "file"
DEFAULT_EXTENSION = "bin"

_ILLEGAL_CHARS = re.compile(r'[/?<>\\:*|"]')
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x80-\x9f]")
_UNSAFE_CHARS = re.compile(r"[&'%!\"{}\[\]]")
_ONLY_DOTS = re.compile(r"^\.+$")
_TRAILING_EXTENSION = re.compile(r"\.[^/.]+$")


def _strip_unsafe(value: str) -> str:
    value = _ILLEGAL_CHARS.sub("", value)
    value = _CONTROL_CHARS.sub("", value)
    return _UNSAFE_CHARS.sub("", value)


def sanitize_file_name(raw: object) -> str:
    """Turn an arbitrary file name into a safe staging name.

    Example: ``"résumé/v1.docx"`` becomes ``"résumév1.docx"``.
    """
    if not isinstance(raw, str) or not raw.strip():
        return FALLBACK_NAME

    base, dot, extension = raw.rpartition(".")
    if not dot:
        base, extension = raw, ""

    extension = _strip_unsafe(extension).strip() or DEFAULT_EXTENSION

    base = _strip_unsafe(base).strip()
    base = base[:MAX_BASE_NAME_LENGTH].strip()
    if _ONLY_DOTS.match(base):
        base = ""

    return "{}.{}".format(base or FALLBACK_BASE, extension)


def strip_extension(name: str) -> str:
    """Remove a trailing ``.ext`` from a name, if there is one."""
    return _TRAILING_EXTENSION.sub("", name)


def extension_of(name: str) -> str:
    """Return the text after the last dot of ``name`` ("" when there is none)."""
    _, dot, extension = name.rpartition(".")
    return extension if dot else ""
