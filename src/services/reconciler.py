"""
Reconciliation Scheduler - drains the scratch collection into the permanent archive.

Loop:
- Idle: list scratch; if empty, release the autosave guard and sleep
- Draining: classify every listed entry once, commit cortex/corcode pairs,
  commit annotations, discard what couldn't be classified, release the guard

Cortex and corcode entries leave scratch as soon as they are classified,
before their commit is attempted (unless delete_after_commit is set): if the
commit then fails, that update is lost. Any failure escaping a pass stops the
loop for good, unless supervised restarts are configured.
"""

import asyncio
import time
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from src.config import Config
from src.core.archive.range_resolver import RangeResolver
from src.core.archive.repository import ArchiveRepository
from src.core.classifier.base import Classifier
from src.core.classifier.structural import StructuralClassifier
from src.core.document_store.base import DocumentStore
from src.core.merge.base import MergeEngine
from src.models.reconciliation import ReconciliationReport, SchedulerState
from src.models.scratch import ClassifiedEntry, DocumentKind, ScratchEntry
from src.services.annotation_committer import AnnotationCommitter
from src.services.autosave import AutosaveGuard, autosave_guard
from src.services.pairing_committer import PairingCommitter
from src.utils.logger import get_logger

logger = get_logger(__name__)


class ReconciliationScheduler:
    """
    Background reconciler for the scratch collection.

    Single worker, no internal parallelism. Use run() directly, or start()/stop()
    to run it as a task on the current event loop.
    """

    def __init__(
        self,
        store: DocumentStore,
        engine: MergeEngine,
        config: Config | None = None,
        classifier: Classifier | None = None,
        guard: AutosaveGuard | None = None,
    ):
        """
        Initialize reconciler.

        Args:
            store: Document store holding scratch and the permanent collections
            engine: Merge engine for packed archives
            config: Configuration (defaults if omitted)
            classifier: Scratch classifier (structural by default)
            guard: Autosave guard (process-wide one by default)
        """
        self.config = config or Config()
        self.store = store
        self.engine = engine
        self.classifier = classifier or StructuralClassifier()
        self.guard = guard or autosave_guard

        store_config = self.config.store
        self.scratch = store_config.scratch_collection
        self.repository = ArchiveRepository(store, engine, self.config.merge.direct_align)
        self.pairing = PairingCommitter(
            self.repository,
            cortex_collection=store_config.cortex_collection,
            corcode_collection=store_config.corcode_collection,
        )
        self.annotations = AnnotationCommitter(
            store,
            self.repository,
            RangeResolver(engine),
            cortex_collection=store_config.cortex_collection,
            annotations_collection=store_config.annotations_collection,
        )

        self.state = SchedulerState.IDLE
        self.last_report: ReconciliationReport | None = None
        self.last_error: Exception | None = None
        self.restarts = 0
        self._task: asyncio.Task | None = None

    @property
    def owner(self) -> str:
        return self.config.reconciler.owner

    # ═══════════════════════════════════════════════════════════
    # LOOP
    # ═══════════════════════════════════════════════════════════

    async def run(self) -> None:
        """
        Reconcile until cancelled or until a pass fails.

        A failure is logged once here. With max_restarts = 0 the loop then
        ends permanently; otherwise it restarts with exponential backoff
        until the restart budget is spent. The budget counts consecutive
        failures: a clean pass resets it.
        """
        settings = self.config.reconciler
        logger.info(
            f"Reconciler started (poll every {settings.poll_interval}s)",
            extra={"owner": self.owner, "scratch": self.scratch},
        )

        while True:
            try:
                while True:
                    report = await self.run_once()
                    if self.restarts:
                        logger.info(f"Reconciler recovered after {self.restarts} restart(s)")
                        self.restarts = 0
                    if report is None:
                        await asyncio.sleep(settings.poll_interval)
                    else:
                        await asyncio.sleep(settings.drain_interval)
            except asyncio.CancelledError:
                self._halt()
                logger.info("Reconciler cancelled")
                raise
            except Exception as e:
                self.last_error = e
                self.guard.release(self.owner)
                logger.bind(error_type=type(e).__name__, restarts=self.restarts).exception(
                    f"Reconciliation failed: {e}"
                )

                if self.restarts >= settings.max_restarts:
                    self._halt()
                    logger.error("Reconciler stopped; no restart will be attempted")
                    return

                delay = settings.restart_backoff * (2**self.restarts)
                self.restarts += 1
                self.state = SchedulerState.IDLE
                logger.warning(
                    f"Restarting reconciler in {delay}s "
                    f"(restart {self.restarts}/{settings.max_restarts})"
                )
                await asyncio.sleep(delay)

    async def run_once(self) -> ReconciliationReport | None:
        """
        One Idle check, followed by a Draining pass if scratch isn't empty.

        Returns:
            The pass report, or None if scratch was empty
        """
        keys = await self.store.list_keys(self.scratch)
        if not keys:
            self.guard.release(self.owner)
            self.state = SchedulerState.IDLE
            return None

        await self.guard.acquire(self.owner, self.config.reconciler.guard_poll_interval)
        self.state = SchedulerState.DRAINING
        report = await self.drain(keys)
        self.guard.release(self.owner)
        self.state = SchedulerState.IDLE
        return report

    def _halt(self) -> None:
        self.guard.release(self.owner)
        self.state = SchedulerState.STOPPED

    def start(self) -> asyncio.Task:
        """Run the loop as a background task."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="reconciler")
        return self._task

    async def stop(self) -> None:
        """Cancel the background task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    # ═══════════════════════════════════════════════════════════
    # DRAINING PASS
    # ═══════════════════════════════════════════════════════════

    async def drain(self, keys: list[str]) -> ReconciliationReport:
        """
        Process one batch of scratch keys.

        Args:
            keys: Scratch keys listed at the start of the pass

        Returns:
            ReconciliationReport for the pass

        Raises:
            CommitError: If a pair or annotation can't be committed
            StoreError: If scratch can't be read or cleaned up
        """
        started = time.perf_counter()
        report = ReconciliationReport(entries_seen=len(keys))

        classified = await self.ingest(keys)
        by_kind: dict[DocumentKind, list[ScratchEntry]] = {kind: [] for kind in DocumentKind}
        for item in classified:
            by_kind[item.kind].append(item.entry)

        cortex = by_kind[DocumentKind.CORTEX]
        corcode = by_kind[DocumentKind.CORCODE]
        annotations = by_kind[DocumentKind.ANNOTATION]
        unknown = by_kind[DocumentKind.UNKNOWN]
        report.cortex_count = len(cortex)
        report.corcode_count = len(corcode)
        report.annotation_count = len(annotations)
        report.unknown_count = len(unknown)

        delete_after_commit = self.config.reconciler.delete_after_commit
        if not delete_after_commit:
            report.scratch_deleted += await self.discard(cortex + corcode)

        pairing = await self.pairing.commit(cortex, corcode)
        report.pairs_matched = len(pairing.matched)
        report.archives_committed = pairing.committed
        report.archives_skipped = pairing.skipped
        report.merge_log.extend(pairing.merge_log)

        if delete_after_commit:
            report.scratch_deleted += await self.discard(cortex + corcode)

        annotation_result = await self.annotations.commit(annotations)
        report.annotations_committed = len(annotation_result.committed)
        report.annotations_skipped = annotation_result.skipped

        report.scratch_deleted += await self.discard_unknown(unknown)

        report.duration_ms = (time.perf_counter() - started) * 1000
        self.last_report = report
        logger.info(
            f"Reconciled {report.entries_seen} scratch entries: "
            f"{report.archives_committed} archives, "
            f"{report.annotations_committed} annotations committed in {report.duration_ms:.0f}ms",
            extra={
                "cortex": report.cortex_count,
                "corcode": report.corcode_count,
                "annotations": report.annotation_count,
                "unknown": report.unknown_count,
                "pairs": report.pairs_matched,
            },
        )
        return report

    async def ingest(self, keys: list[str]) -> list[ClassifiedEntry]:
        """
        Fetch and classify every listed scratch entry.

        Entries that vanished since listing are ignored. An entry the
        classifier accepts but whose fields don't validate is UNKNOWN.
        """
        classified = []
        for key in keys:
            document = await self.store.get(self.scratch, key)
            if document is None:
                continue

            kind = self.classifier.classify(document)
            try:
                entry = ScratchEntry.from_document(key, document)
            except PydanticValidationError as e:
                logger.bind(key=key).warning(f"Scratch entry {key} is malformed: {e}")
                kind = DocumentKind.UNKNOWN
                entry = ScratchEntry.unparsed(key, document)

            classified.append(ClassifiedEntry(kind=kind, entry=entry))
        return classified

    async def discard(self, entries: list[ScratchEntry]) -> int:
        """Delete entries from scratch by key."""
        for entry in entries:
            await self.store.delete(self.scratch, entry.key)
        return len(entries)

    async def discard_unknown(self, entries: list[ScratchEntry]) -> int:
        """Delete unclassifiable entries, by stored identity where they have one."""
        for entry in entries:
            if entry.store_id is not None:
                await self.store.delete_by_field(self.scratch, "_id", entry.store_id)
            else:
                await self.store.delete(self.scratch, entry.key)
        if entries:
            logger.info(
                f"Discarded {len(entries)} unclassifiable scratch entries",
                extra={"keys": [entry.key for entry in entries]},
            )
        return len(entries)

    def status(self) -> dict[str, Any]:
        """Snapshot of the reconciler for status reporting."""
        return {
            "state": self.state.value,
            "busy": self.guard.in_progress,
            "holder": self.guard.holder,
            "restarts": self.restarts,
            "last_error": str(self.last_error) if self.last_error else None,
            "last_report": self.last_report.model_dump(mode="json") if self.last_report else None,
        }
