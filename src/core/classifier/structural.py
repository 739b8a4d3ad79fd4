"""
Structural scratch classifier.

Inspects the fields an editor writes:
- annotations carry a version path plus numeric offset and len
- cortex and corcode carry a version id, a body and a format tag, TEXT for
  cortex and STIL for corcode (flat or packed)
"""

from numbers import Number
from typing import Any

from src.core.classifier.base import Classifier
from src.models.archive import ArchiveFormat
from src.models.scratch import DocumentKind

CORTEX_FORMATS = {ArchiveFormat.TEXT.value, ArchiveFormat.MVD_TEXT.value}
CORCODE_FORMATS = {ArchiveFormat.STIL.value, ArchiveFormat.MVD_STIL.value}


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


class StructuralClassifier(Classifier):
    """Default classifier keyed on field presence and format tags."""

    def classify(self, document: dict[str, Any]) -> DocumentKind:
        if not isinstance(document, dict) or not _is_text(document.get("docid")):
            return DocumentKind.UNKNOWN

        vpath = document.get("vpath", document.get("version1"))
        if _is_text(vpath) and _is_number(document.get("offset")) and _is_number(document.get("len")):
            return DocumentKind.ANNOTATION

        if not _is_text(document.get("version1")) or not isinstance(document.get("body"), str):
            return DocumentKind.UNKNOWN

        fmt = document.get("format")
        if fmt in CORTEX_FORMATS:
            return DocumentKind.CORTEX
        if fmt in CORCODE_FORMATS:
            return DocumentKind.CORCODE
        return DocumentKind.UNKNOWN
