"""
Pairing Committer - merges paired cortex/corcode scratch entries into archives.

A cortex entry is only committed together with the corcode entry for the same
document version, and vice versa. Each side is a read-modify-write of the
committed archive:
1. Load the archive for the docid (no archive -> nothing to merge into)
2. Rebuild the version aggregate
3. Insert/overwrite the entry's version
4. Repack and write back with one put
"""

from src.core.archive.repository import ArchiveRepository
from src.models.reconciliation import PairingResult
from src.models.scratch import ScratchEntry
from src.utils.exceptions import CommitError
from src.utils.keys import pair_key
from src.utils.logger import get_logger

logger = get_logger(__name__)


class PairingCommitter:
    """Commits cortex/corcode pairs from one reconciliation pass."""

    def __init__(
        self,
        repository: ArchiveRepository,
        cortex_collection: str = "cortex",
        corcode_collection: str = "corcode",
    ):
        """
        Initialize pairing committer.

        Args:
            repository: Archive repository over the permanent store
            cortex_collection: Permanent cortex collection
            corcode_collection: Permanent corcode collection
        """
        self.repository = repository
        self.cortex_collection = cortex_collection
        self.corcode_collection = corcode_collection

    @staticmethod
    def build_pair_map(entries: list[ScratchEntry]) -> dict[str, ScratchEntry]:
        """
        Index entries by pair key. A later entry with the same key wins.
        """
        pair_map: dict[str, ScratchEntry] = {}
        for entry in entries:
            pair_map[pair_key(entry.docid, entry.version1)] = entry
        return pair_map

    async def commit(
        self, cortex_entries: list[ScratchEntry], corcode_entries: list[ScratchEntry]
    ) -> PairingResult:
        """
        Commit every pair present on both sides.

        Args:
            cortex_entries: Scratch entries classified as cortex
            corcode_entries: Scratch entries classified as corcode

        Returns:
            PairingResult with matched/unmatched keys and commit counts

        Raises:
            CommitError: On the first failed commit; the rest are not attempted
        """
        cortex_map = self.build_pair_map(cortex_entries)
        corcode_map = self.build_pair_map(corcode_entries)
        result = PairingResult()

        for key, cortex in cortex_map.items():
            corcode = corcode_map.get(key)
            if corcode is None:
                result.unmatched.append(key)
                continue

            result.matched.append(key)
            for collection, entry in (
                (self.cortex_collection, cortex),
                (self.corcode_collection, corcode),
            ):
                log = await self.commit_entry(collection, entry)
                if log is None:
                    result.skipped += 1
                else:
                    result.committed += 1
                    result.merge_log.extend(log)

        result.unmatched.extend(key for key in corcode_map if key not in cortex_map)

        if result.unmatched:
            logger.info(
                f"{len(result.unmatched)} scratch entries have no counterpart this pass",
                extra={"unmatched": result.unmatched},
            )
        return result

    async def commit_entry(self, collection: str, entry: ScratchEntry) -> list[str] | None:
        """
        Merge one entry's version into its committed archive.

        Args:
            collection: Permanent collection to write into
            entry: Cortex or corcode scratch entry

        Returns:
            The aggregate's merge log, or None if there was no archive to merge into

        Raises:
            CommitError: If loading, merging or writing fails
        """
        try:
            aggregate = await self.repository.load(collection, entry.docid)
            if aggregate is None:
                logger.info(
                    f"No committed {collection} archive for {entry.docid}; skipping",
                    extra={"collection": collection, "docid": entry.docid},
                )
                return None

            aggregate.put(entry.version1, entry.body)
            await self.repository.save(collection, entry.docid, aggregate)
        except Exception as e:
            logger.bind(
                collection=collection,
                docid=entry.docid,
                version=entry.version1,
                error_type=type(e).__name__,
            ).error(f"Failed to commit {collection}/{entry.docid} version {entry.version1}: {e}")
            raise CommitError(
                f"Failed to commit {collection}/{entry.docid}: {e}",
                context={"collection": collection, "docid": entry.docid, "version": entry.version1},
            ) from e

        logger.info(
            f"Committed {collection}/{entry.docid} version {entry.version1}",
            extra={"collection": collection, "docid": entry.docid, "versions": len(aggregate)},
        )
        return aggregate.log
