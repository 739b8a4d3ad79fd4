"""
Annotation Committer - anchors scratch annotations to every version sharing their span.

Annotations are written against one version of a document. On commit, the
span is projected onto the committed cortex archive to find every version
containing the same text, and the record is upserted with that version list.

Only the first annotation per docid (after a stable sort on docid) is
committed in a pass; the others wait in scratch for a later pass.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from src.core.archive.range_resolver import RangeResolver
from src.core.archive.repository import ArchiveRepository
from src.core.document_store.base import DocumentStore
from src.models.annotation import AnnotationRecord
from src.models.reconciliation import AnnotationResult
from src.models.scratch import ScratchEntry
from src.utils.exceptions import CommitError, NotFoundError, ValidationError
from src.utils.logger import get_logger

logger = get_logger(__name__)


class AnnotationCommitter:
    """Resolves and upserts annotations from one reconciliation pass."""

    def __init__(
        self,
        store: DocumentStore,
        repository: ArchiveRepository,
        resolver: RangeResolver,
        cortex_collection: str = "cortex",
        annotations_collection: str = "annotations",
    ):
        """
        Initialize annotation committer.

        Args:
            store: Document store holding the annotations collection
            repository: Archive repository used to load cortex archives
            resolver: Span resolver over the merge engine
            cortex_collection: Permanent cortex collection
            annotations_collection: Permanent annotations collection
        """
        self.store = store
        self.repository = repository
        self.resolver = resolver
        self.cortex_collection = cortex_collection
        self.annotations_collection = annotations_collection

    async def commit(self, entries: list[ScratchEntry]) -> AnnotationResult:
        """
        Commit the first annotation of each document.

        Args:
            entries: Scratch entries classified as annotations

        Returns:
            AnnotationResult with committed docids and skip count

        Raises:
            CommitError: If reading the archive or writing the record fails
        """
        result = AnnotationResult()
        seen: set[str] = set()

        for entry in sorted(entries, key=lambda e: e.docid):
            if entry.docid in seen:
                # TODO: commit every annotation of a docid once callers confirm they rely on it
                logger.debug(
                    f"Annotation {entry.key} deferred: {entry.docid} already handled this pass",
                    extra={"docid": entry.docid, "key": entry.key},
                )
                result.skipped += 1
                continue
            seen.add(entry.docid)

            if await self.commit_annotation(entry):
                result.committed.append(entry.docid)
            else:
                result.skipped += 1

        return result

    async def commit_annotation(self, entry: ScratchEntry) -> bool:
        """
        Resolve one annotation's versions and upsert it.

        Args:
            entry: Scratch annotation entry

        Returns:
            True if the record was written
        """
        try:
            record = AnnotationRecord.model_validate(entry.to_document())
        except PydanticValidationError as e:
            logger.bind(key=entry.key).warning(f"Annotation {entry.key} is malformed: {e}")
            return False

        if record.store_id is None:
            logger.info(
                f"Annotation for {record.docid} has no stored identity; not committed",
                extra={"docid": record.docid, "key": entry.key},
            )
            return False

        try:
            record.version_ids = await self.resolve_versions(record)
        except (NotFoundError, ValidationError) as e:
            logger.bind(**{"docid": record.docid, "vpath": record.vpath, **e.context}).warning(
                f"Skipping annotation for {record.docid}: {e}"
            )
            return False

        await self.upsert(record)
        logger.info(
            f"Committed annotation for {record.docid} across {len(record.version_ids)} versions",
            extra={"docid": record.docid, "versions": record.version_ids},
        )
        return True

    async def resolve_versions(self, record: AnnotationRecord) -> list[str]:
        """
        Find the versions of the committed cortex sharing the record's span.

        Raises:
            NotFoundError: If there is no cortex archive or no such version
            ValidationError: If the span is invalid
            CommitError: If the archive can't be read
        """
        try:
            handle: Any = await self.repository.load_handle(self.cortex_collection, record.docid)
        except Exception as e:
            raise CommitError(
                f"Failed to load cortex for {record.docid}: {e}",
                context={"docid": record.docid, "collection": self.cortex_collection},
            ) from e

        if handle is None:
            raise NotFoundError(
                f"No committed cortex for {record.docid}", context={"docid": record.docid}
            )

        group_path, short_name = record.split_vpath()
        try:
            return self.resolver.resolve(
                handle, group_path, short_name, record.offset, record.length
            )
        except (NotFoundError, ValidationError):
            raise
        except Exception as e:
            raise CommitError(
                f"Failed to resolve span for {record.docid}: {e}",
                context={"docid": record.docid, "vpath": record.vpath},
            ) from e

    async def upsert(self, record: AnnotationRecord) -> None:
        """Replace the stored record: delete by old identity, insert fresh under docid."""
        try:
            await self.store.delete_by_field(self.annotations_collection, "_id", record.store_id)
            await self.store.put(
                self.annotations_collection,
                record.docid,
                record.to_document(strip_identity=True),
            )
        except Exception as e:
            raise CommitError(
                f"Failed to store annotation for {record.docid}: {e}",
                context={"docid": record.docid, "collection": self.annotations_collection},
            ) from e
