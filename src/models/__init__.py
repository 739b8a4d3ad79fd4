"""
Data models for Palimpsest.

Core models:
- ScratchEntry, ClassifiedEntry, DocumentKind: transient scratch documents
- ArchiveDocument, ArchiveFormat: persisted cortex/corcode archives
- AnnotationRecord: text-anchored annotations
- ReconciliationReport, SchedulerState: reconciler bookkeeping
"""

from src.models.annotation import AnnotationRecord
from src.models.archive import (
    ArchiveDocument,
    ArchiveFormat,
    is_packed_format,
    to_flat_format,
    to_packed_format,
)
from src.models.reconciliation import (
    AnnotationResult,
    PairingResult,
    ReconciliationReport,
    SchedulerState,
)
from src.models.scratch import ClassifiedEntry, DocumentKind, ScratchEntry

__all__ = [
    # Scratch models
    "ScratchEntry",
    "ClassifiedEntry",
    "DocumentKind",
    # Archive models
    "ArchiveDocument",
    "ArchiveFormat",
    "is_packed_format",
    "to_flat_format",
    "to_packed_format",
    # Annotation models
    "AnnotationRecord",
    # Reconciliation models
    "ReconciliationReport",
    "PairingResult",
    "AnnotationResult",
    "SchedulerState",
]
