"""
Scratch entry models.

A scratch entry is a transient document written by an editor and read once
per reconciliation pass. Its kind is decided once, at ingestion, and carried
with it as a ClassifiedEntry.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DocumentKind(str, Enum):
    """Kinds of scratch entries the reconciler understands."""

    CORTEX = "cortex"  # Plain transcribed text layer
    CORCODE = "corcode"  # Markup layer parallel to cortex
    ANNOTATION = "annotation"  # Offset/length note into one version
    UNKNOWN = "unknown"  # Anything else; discarded at the end of a pass


class ScratchEntry(BaseModel):
    """
    A raw document found in the scratch collection.

    Type-specific fields are optional; fields the model doesn't name are kept
    as extras so annotations survive the trip into the permanent store intact.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    key: str = Field(..., exclude=True, description="Scratch key the entry was listed under")
    docid: str | None = Field(default=None, description="Logical document identity")
    version1: str | None = Field(default=None, description="Version id or vpath")
    body: str | None = None
    format: str | None = None
    store_id: str | None = Field(default=None, alias="_id")
    offset: int | None = None
    length: int | None = Field(default=None, alias="len")

    @field_validator("store_id", mode="before")
    @classmethod
    def _stringify_store_id(cls, value: Any) -> Any:
        return None if value is None else str(value)

    @classmethod
    def from_document(cls, key: str, document: dict[str, Any]) -> "ScratchEntry":
        """Build an entry from a stored scratch document."""
        return cls.model_validate({**document, "key": key})

    @classmethod
    def unparsed(cls, key: str, document: dict[str, Any]) -> "ScratchEntry":
        """
        Build a minimal entry for a document whose fields can't be trusted.

        Only the scratch key and the stored identity are kept; that is all
        that is needed to delete it.
        """
        return cls(key=key, store_id=document.get("_id"))

    def to_document(self) -> dict[str, Any]:
        """Dump back to the stored field names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ClassifiedEntry(BaseModel):
    """A scratch entry tagged with its kind."""

    kind: DocumentKind
    entry: ScratchEntry

    @property
    def key(self) -> str:
        return self.entry.key
