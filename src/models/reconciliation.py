"""
Reconciliation bookkeeping models.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class SchedulerState(str, Enum):
    """Reconciler lifecycle states."""

    IDLE = "idle"
    DRAINING = "draining"
    STOPPED = "stopped"


class ReconciliationReport(BaseModel):
    """Outcome of one draining pass."""

    started_at: datetime = Field(default_factory=datetime.now)
    entries_seen: int = 0
    cortex_count: int = 0
    corcode_count: int = 0
    annotation_count: int = 0
    unknown_count: int = 0
    pairs_matched: int = 0
    archives_committed: int = 0
    archives_skipped: int = 0
    annotations_committed: int = 0
    annotations_skipped: int = 0
    scratch_deleted: int = 0
    merge_log: list[str] = Field(default_factory=list)
    duration_ms: float = 0.0


class PairingResult(BaseModel):
    """Outcome of committing the cortex/corcode pairs of one pass."""

    matched: list[str] = Field(default_factory=list, description="Pair keys present on both sides")
    unmatched: list[str] = Field(default_factory=list, description="Pair keys present on one side")
    committed: int = 0  # archives written
    skipped: int = 0  # sides with no committed archive to merge into
    merge_log: list[str] = Field(default_factory=list)


class AnnotationResult(BaseModel):
    """Outcome of committing the annotations of one pass."""

    committed: list[str] = Field(default_factory=list, description="Docids whose annotation was stored")
    skipped: int = 0
