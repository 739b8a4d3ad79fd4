"""
Version aggregate ("archive") for one logical document.

Holds every version of a cortex or corcode document keyed by its
"groupPath/shortName" version key, plus the metadata needed to write it
back. A single-version aggregate persists flat; as soon as it holds a
second version it persists as a packed multi-version document built by the
merge engine.
"""

import time
from typing import Any

from src.core.merge.base import NO_BACKUP, MergeEngine
from src.models.archive import (
    ArchiveDocument,
    to_flat_format,
    to_packed_format,
)
from src.utils.exceptions import ArchiveError, MergeEngineError
from src.utils.keys import canonical_vpath, default_long_name, join_vpath, split_vpath
from src.utils.logger import get_logger

logger = get_logger(__name__)


class VersionAggregate:
    """
    All versions of one document, with their metadata.

    Attributes:
        versions: Ordered mapping of canonical version key ("/v1", "A/v1") -> content
        name_map: Version key -> human-readable long name
        description: Document description
        style: Style tag
        format: Format tag (flat or packed; normalized on persist)
        version1: Key of the primary version
        log: Append-only record of merge activity
    """

    def __init__(
        self,
        engine: MergeEngine,
        format: str,
        description: str | None = None,
        style: str = "default",
        version1: str | None = None,
        direct_align: bool = True,
    ):
        self.engine = engine
        self.format = format
        self.description = description
        self.style = style
        self.version1 = canonical_vpath(version1) if version1 is not None else None
        self.direct_align = direct_align
        self.versions: dict[str, str] = {}
        self.name_map: dict[str, str] = {}
        self.log: list[str] = []

    def __len__(self) -> int:
        return len(self.versions)

    def __contains__(self, key: str) -> bool:
        return canonical_vpath(key) in self.versions

    def keys(self) -> list[str]:
        return list(self.versions.keys())

    def get(self, key: str) -> str | None:
        return self.versions.get(canonical_vpath(key))

    def put(self, key: str, content: str) -> None:
        """Insert or overwrite one version's content; "v1" and "/v1" are the same version."""
        self.versions[canonical_vpath(key)] = content

    def add_long_name(self, key: str, long_name: str) -> None:
        """Record a long name for later use when the archive is packed."""
        self.name_map[canonical_vpath(key)] = long_name
        logger.debug(f"Setting long name for {key} to {long_name}")

    # ═══════════════════════════════════════════════════════════
    # PERSISTED FORM
    # ═══════════════════════════════════════════════════════════

    @classmethod
    def from_persisted(
        cls, document: ArchiveDocument, engine: MergeEngine, direct_align: bool = True
    ) -> "VersionAggregate":
        """
        Rebuild an aggregate from its stored form.

        Args:
            document: Stored archive
            engine: Merge engine used to unpack (and later repack) versions
            direct_align: Alignment mode used when the archive is repacked

        Returns:
            Aggregate holding every stored version

        Raises:
            MergeEngineError: If a packed body can't be read
        """
        aggregate = cls(
            engine=engine,
            format=document.format,
            style=document.style,
            version1=document.version1,
            direct_align=direct_align,
        )

        if document.is_packed:
            handle = engine.parse(document.body)
            try:
                aggregate.description = engine.get_description(handle)
                for version_id in range(1, engine.num_versions(handle) + 1):
                    key = join_vpath(
                        engine.get_group_path(handle, version_id),
                        engine.get_short_name(handle, version_id),
                    )
                    aggregate.put(key, engine.get_version_content(handle, version_id))
                    aggregate.name_map[key] = engine.get_long_name(handle, version_id)
            except MergeEngineError:
                raise
            except Exception as e:
                raise MergeEngineError(
                    f"Failed to unpack archive {document.docid}: {e}",
                    context={"docid": document.docid},
                ) from e
        else:
            if document.version1 is None:
                raise ArchiveError(
                    f"Flat archive {document.docid} has no primary version",
                    context={"docid": document.docid},
                )
            aggregate.description = document.description
            aggregate.put(document.version1, document.body)
            if document.description is not None:
                aggregate.add_long_name(document.version1, document.description)

        return aggregate

    def build_handle(self, name: str) -> Any:
        """
        Build a fresh multi-version document from every version, in map order.

        Args:
            name: Document name, for the merge log

        Returns:
            Engine handle holding all versions

        Raises:
            MergeEngineError: If the engine fails to register or align a version
        """
        start = time.perf_counter()
        try:
            handle = self.engine.create(self.description or "")
            for key, content in self.versions.items():
                group_path, short_name = split_vpath(key)
                if self.version1 is None:
                    self.version1 = key
                long_name = self.name_map.get(key) or default_long_name(group_path, short_name)
                version_id = self.engine.new_version(
                    handle, short_name, long_name, group_path, NO_BACKUP, False
                )
                self.engine.align(handle, version_id, content, self.direct_align)
        except MergeEngineError:
            raise
        except Exception as e:
            raise MergeEngineError(
                f"Failed to merge {name}: {e}", context={"docid": name}
            ) from e

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        self.log.append(f"merged: {name} in {elapsed_ms} milliseconds")
        logger.info(
            f"Merged {len(self.versions)} versions of {name} in {elapsed_ms}ms",
            extra={"docid": name, "versions": len(self.versions), "elapsed_ms": elapsed_ms},
        )
        return handle

    def to_persisted(self, name: str) -> ArchiveDocument:
        """
        Convert to the stored form.

        One version persists flat; more persist packed.

        Args:
            name: Document id the archive is stored under

        Returns:
            Stored archive

        Raises:
            ArchiveError: If the aggregate holds no versions
            MergeEngineError: If packing fails or yields no output
        """
        if not self.versions:
            raise ArchiveError(f"Archive {name} has no versions", context={"docid": name})

        if len(self.versions) == 1:
            key, content = next(iter(self.versions.items()))
            self.format = to_flat_format(self.format)
            body = content
            if self.version1 is None:
                self.version1 = key
            if self.version1 in self.name_map:
                self.description = self.name_map[self.version1]
        else:
            handle = self.build_handle(name)
            try:
                body = self.engine.serialize(handle)
            except Exception as e:
                raise MergeEngineError(
                    f"Failed to serialize {name}: {e}", context={"docid": name}
                ) from e
            if not body:
                raise MergeEngineError("failed to create MVD", context={"docid": name})
            self.format = to_packed_format(self.format)

        return ArchiveDocument(
            docid=name,
            version1=self.version1,
            style=self.style,
            format=self.format,
            body=body,
            description=self.description,
        )

    def get_log(self) -> str:
        """Merge activity as one newline-terminated string per entry."""
        return "".join(f"{line}\n" for line in self.log)
