"""
Services for Palimpsest.

- ReconciliationScheduler: background loop draining scratch into the archive
- PairingCommitter: commits paired cortex/corcode entries
- AnnotationCommitter: resolves and upserts annotations
- AutosaveGuard: advisory busy flag shared with direct writers
"""

from src.services.annotation_committer import AnnotationCommitter
from src.services.autosave import AutosaveGuard, autosave_guard
from src.services.pairing_committer import PairingCommitter
from src.services.reconciler import ReconciliationScheduler

__all__ = [
    "ReconciliationScheduler",
    "PairingCommitter",
    "AnnotationCommitter",
    "AutosaveGuard",
    "autosave_guard",
]
