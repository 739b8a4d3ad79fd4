"""Fixtures for service tests.

Everything runs against the in-memory store and the reference merge engine,
so no external services are needed.
"""

import pytest

from src.core.archive.range_resolver import RangeResolver
from src.core.archive.repository import ArchiveRepository
from src.services.annotation_committer import AnnotationCommitter
from src.services.pairing_committer import PairingCommitter
from src.services.reconciler import ReconciliationScheduler


@pytest.fixture
def repository(memory_store, engine):
    """Archive repository over the in-memory store."""
    return ArchiveRepository(memory_store, engine)


@pytest.fixture
def pairing(repository):
    """Pairing committer with default collection names."""
    return PairingCommitter(repository)


@pytest.fixture
def annotation_committer(memory_store, repository, engine):
    """Annotation committer with default collection names."""
    return AnnotationCommitter(memory_store, repository, RangeResolver(engine))


@pytest.fixture
def reconciler(memory_store, engine, fast_config, guard):
    """Reconciler with fast intervals and a private guard."""
    return ReconciliationScheduler(memory_store, engine, config=fast_config, guard=guard)


@pytest.fixture
def flat_archive():
    """Build a flat committed archive document."""

    def _build(docid: str, version1: str, body: str, fmt: str = "TEXT") -> dict:
        return {"docid": docid, "version1": version1, "format": fmt, "body": body}

    return _build
