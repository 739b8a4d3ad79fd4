"""
Persisted archive models.

An archive document holds every committed version of one cortex or corcode
document, either flat (a single version, stored as-is) or packed (several
versions in the merge engine's multi-version form).
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

PACKED_PREFIX = "MVD"


class ArchiveFormat(str, Enum):
    """Known archive format tags."""

    TEXT = "TEXT"
    STIL = "STIL"
    MVD_TEXT = "MVD/TEXT"
    MVD_STIL = "MVD/STIL"


FLAT_FORMATS = {ArchiveFormat.TEXT.value, ArchiveFormat.STIL.value}
PACKED_FORMATS = {ArchiveFormat.MVD_TEXT.value, ArchiveFormat.MVD_STIL.value}


def is_packed_format(fmt: str) -> bool:
    """True if the tag names a packed multi-version format."""
    return fmt.startswith(PACKED_PREFIX)


def to_flat_format(fmt: str) -> str:
    """MVD/TEXT -> TEXT, MVD/STIL -> STIL; any other tag passes through."""
    if fmt in PACKED_FORMATS:
        return fmt[len(PACKED_PREFIX) + 1 :]
    return fmt


def to_packed_format(fmt: str) -> str:
    """TEXT -> MVD/TEXT, STIL -> MVD/STIL; any other tag passes through."""
    if fmt in FLAT_FORMATS:
        return f"{PACKED_PREFIX}/{fmt}"
    return fmt


class ArchiveDocument(BaseModel):
    """Stored form of a cortex or corcode archive."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    docid: str | None = Field(default=None, description="Document identity")
    version1: str | None = Field(default=None, description="Primary version key")
    style: str = Field(default="default", description="Style tag")
    format: str = Field(..., description="Flat or packed format tag")
    body: str = Field(..., description="Version content or packed multi-version data")
    description: str | None = None

    @property
    def is_packed(self) -> bool:
        return is_packed_format(self.format)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
