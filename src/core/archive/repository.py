"""
Archive repository - loads and saves version aggregates.

Thin facade over the document store for the cortex and corcode collections,
so committers never handle raw stored documents.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from src.core.archive.aggregate import VersionAggregate
from src.core.document_store.base import DocumentStore
from src.core.merge.base import MergeEngine
from src.models.archive import ArchiveDocument
from src.utils.exceptions import ArchiveError
from src.utils.logger import get_logger

logger = get_logger(__name__)


class ArchiveRepository:
    """Reads and writes archives in a document store."""

    def __init__(self, store: DocumentStore, engine: MergeEngine, direct_align: bool = True):
        """
        Initialize repository.

        Args:
            store: Document store holding the archive collections
            engine: Merge engine for packed archives
            direct_align: Alignment mode used when repacking
        """
        self.store = store
        self.engine = engine
        self.direct_align = direct_align

    async def get_document(self, collection: str, docid: str) -> ArchiveDocument | None:
        """
        Fetch a stored archive.

        Raises:
            ArchiveError: If the stored document isn't a valid archive
        """
        raw = await self.store.get(collection, docid)
        if raw is None:
            return None

        try:
            document = ArchiveDocument.model_validate(raw)
        except PydanticValidationError as e:
            raise ArchiveError(
                f"Stored archive {collection}/{docid} is malformed: {e}",
                context={"collection": collection, "docid": docid},
            ) from e

        if document.docid is None:
            document.docid = docid
        return document

    async def load(self, collection: str, docid: str) -> VersionAggregate | None:
        """Load an archive as an aggregate, or None if there isn't one."""
        document = await self.get_document(collection, docid)
        if document is None:
            return None
        return VersionAggregate.from_persisted(document, self.engine, self.direct_align)

    async def save(self, collection: str, docid: str, aggregate: VersionAggregate) -> ArchiveDocument:
        """Persist an aggregate with a single put keyed by docid."""
        document = aggregate.to_persisted(docid)
        await self.store.put(collection, docid, document.to_document())
        logger.debug(
            f"Saved {collection}/{docid} ({len(aggregate)} versions, {document.format})",
            extra={"collection": collection, "docid": docid, "format": document.format},
        )
        return document

    async def load_handle(self, collection: str, docid: str) -> Any | None:
        """
        Load an archive as a merge engine handle.

        Packed archives are parsed directly; a flat archive is wrapped in a
        one-version document so span queries work the same way.
        """
        document = await self.get_document(collection, docid)
        if document is None:
            return None
        if document.is_packed:
            return self.engine.parse(document.body)

        aggregate = VersionAggregate.from_persisted(document, self.engine, self.direct_align)
        return aggregate.build_handle(docid)

    async def list_documents(self, collection: str, pattern: str = ".*") -> list[str]:
        """
        List committed docids whose key matches a regular expression.

        Args:
            collection: Archive collection
            pattern: Regex the whole key must match, e.g. "english/harpur/.*"
        """
        return await self.store.list_matching_keys(collection, pattern, "docid")
