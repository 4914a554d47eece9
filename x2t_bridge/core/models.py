"""Result dataclasses handed back to callers.

WHY: Both conversion directions return plain data that the CLI, the HTTP
API and the editor bridge consume the same way.

RULES:
- ConversionResult.media maps "media/<name>" to a blob URL
- Ownership of the bytes passes to the caller; staging files stay behind
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from x2t_bridge.core.formats import DocumentCategory


@dataclass
class ConversionResult:
    """Outcome of converting an office document into the engine's bin format.

    Attributes:
        file_name: Sanitized name the input was staged under.
        document_type: Category of the source document.
        bin: The engine's binary representation.
        media: Embedded assets, keyed by ``media/<file name>``.
    """

    file_name: str
    document_type: DocumentCategory
    bin: bytes
    media: Dict[str, str] = field(default_factory=dict)


@dataclass
class BinConversionResult:
    """Outcome of converting a bin payload back into an office document.

    Attributes:
        file_name: Output name, ``<sanitized base>.<target extension>``.
        data: The converted document bytes.
        delivered: True when a delivery persisted the file; False when no
                   delivery is configured or the user cancelled the save.
    """

    file_name: str
    data: bytes
    delivered: bool = False
