"""
Reference merge engine.

Stores each version's full text in a JSON package and answers span queries
by aligning the base version against every other version with difflib.
Good enough for archives of a handful of versions; the alignment is computed
on demand rather than stored.
"""

import difflib
import json

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from src.core.merge.base import NO_BACKUP, MergeEngine
from src.utils.exceptions import MergeEngineError
from src.utils.keys import join_vpath

PACKAGE_MARKER = "mvd"
PACKAGE_VERSION = 1


class PackedVersion(BaseModel):
    """One version inside a packed document."""

    short_name: str
    long_name: str
    group_path: str = ""
    backup: int = NO_BACKUP
    partial: bool = False
    direct: bool = True
    content: str = ""


class PackedDocument(BaseModel):
    """Handle type of SimpleMergeEngine."""

    description: str = ""
    versions: list[PackedVersion] = Field(default_factory=list)


def _span_covered(blocks: list[difflib.Match], start: int, end: int) -> bool:
    """True if [start, end) of the base lies inside the matching blocks."""
    if start == end:
        return any(block.size > 0 and block.a <= start <= block.a + block.size for block in blocks)

    position = start
    for block in blocks:
        if block.size == 0 or block.a + block.size <= position:
            continue
        if block.a > position:
            return False
        position = block.a + block.size
        if position >= end:
            return True
    return False


class SimpleMergeEngine(MergeEngine):
    """difflib-backed merge engine with a JSON packed format."""

    def create(self, description: str = "") -> PackedDocument:
        return PackedDocument(description=description or "")

    def parse(self, data: str) -> PackedDocument:
        try:
            raw = json.loads(data)
        except (TypeError, ValueError) as e:
            raise MergeEngineError(f"Packed document is not valid JSON: {e}") from e

        if not isinstance(raw, dict) or raw.get(PACKAGE_MARKER) != PACKAGE_VERSION:
            raise MergeEngineError(
                "Not a packed multi-version document",
                context={"marker": raw.get(PACKAGE_MARKER) if isinstance(raw, dict) else None},
            )

        try:
            return PackedDocument.model_validate(raw)
        except PydanticValidationError as e:
            raise MergeEngineError(f"Malformed packed document: {e}") from e

    def serialize(self, handle: PackedDocument) -> str:
        package = {PACKAGE_MARKER: PACKAGE_VERSION, **handle.model_dump()}
        return json.dumps(package, ensure_ascii=False)

    def _version(self, handle: PackedDocument, version_id: int) -> PackedVersion:
        if version_id < 1 or version_id > len(handle.versions):
            raise MergeEngineError(
                f"No version {version_id}",
                context={"version_id": version_id, "num_versions": len(handle.versions)},
            )
        return handle.versions[version_id - 1]

    def new_version(
        self,
        handle: PackedDocument,
        short_name: str,
        long_name: str,
        group_path: str,
        backup: int = NO_BACKUP,
        partial: bool = False,
    ) -> int:
        handle.versions.append(
            PackedVersion(
                short_name=short_name,
                long_name=long_name,
                group_path=group_path,
                backup=backup,
                partial=partial,
            )
        )
        return len(handle.versions)

    def align(
        self, handle: PackedDocument, version_id: int, content: str, direct: bool = True
    ) -> None:
        version = self._version(handle, version_id)
        version.content = content
        version.direct = direct

    def num_versions(self, handle: PackedDocument) -> int:
        return len(handle.versions)

    def get_version_content(self, handle: PackedDocument, version_id: int) -> str:
        return self._version(handle, version_id).content

    def get_group_path(self, handle: PackedDocument, version_id: int) -> str:
        return self._version(handle, version_id).group_path

    def get_short_name(self, handle: PackedDocument, version_id: int) -> str:
        return self._version(handle, version_id).short_name

    def get_long_name(self, handle: PackedDocument, version_id: int) -> str:
        return self._version(handle, version_id).long_name

    def get_description(self, handle: PackedDocument) -> str:
        return handle.description

    def set_description(self, handle: PackedDocument, description: str) -> None:
        handle.description = description or ""

    def find_version(
        self, handle: PackedDocument, group_path: str, short_name: str
    ) -> int | None:
        for index, version in enumerate(handle.versions, start=1):
            if version.group_path == group_path and version.short_name == short_name:
                return index
        return None

    def versions_overlapping(
        self, handle: PackedDocument, version_id: int, offset: int, length: int
    ) -> list[str]:
        base = self._version(handle, version_id)
        start = min(offset, len(base.content))
        end = min(offset + length, len(base.content))

        shared = []
        for index, version in enumerate(handle.versions, start=1):
            if index != version_id:
                matcher = difflib.SequenceMatcher(None, base.content, version.content, autojunk=False)
                if not _span_covered(matcher.get_matching_blocks(), start, end):
                    continue
            shared.append(join_vpath(version.group_path, version.short_name))
        return shared
