"""
Annotation record model.

Annotations anchor a note to an offset/length span of one named version of a
document. Reconciliation attaches the ids of every version sharing that span.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from src.utils.keys import split_vpath


class AnnotationRecord(BaseModel):
    """An annotation as stored in scratch and in the annotations collection."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    docid: str = Field(..., description="Annotated document identity")
    vpath: str = Field(
        ...,
        validation_alias=AliasChoices("vpath", "version1"),
        serialization_alias="vpath",
        description="groupPath/shortName of the version the offsets refer to",
    )
    offset: int = Field(..., description="Start of the span in the named version")
    length: int = Field(..., alias="len", description="Length of the span")
    version_ids: list[str] = Field(
        default_factory=list,
        alias="versions",
        description="Versions sharing the span, filled in on commit",
    )
    store_id: str | None = Field(default=None, alias="_id")
    record_id: str | None = Field(default=None, alias="id")

    @field_validator("store_id", "record_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value: Any) -> Any:
        return None if value is None else str(value)

    def split_vpath(self) -> tuple[str, str]:
        """(group_path, short_name) of the anchoring version."""
        return split_vpath(self.vpath)

    def to_document(self, strip_identity: bool = False) -> dict[str, Any]:
        """
        Dump to stored field names.

        Args:
            strip_identity: Drop "_id" and "id" so the record is inserted fresh
        """
        document = self.model_dump(by_alias=True, exclude_none=True)
        if strip_identity:
            document.pop("_id", None)
            document.pop("id", None)
        return document
