"""
Shared test fixtures for all test modules.
"""

import pytest

from src.config import Config, ReconcilerConfig, StoreConfig
from src.core.document_store.memory_store import InMemoryDocumentStore
from src.core.merge.simple import SimpleMergeEngine
from src.services.autosave import AutosaveGuard


@pytest.fixture
def memory_store():
    """Create an empty in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def engine():
    """Create the reference merge engine."""
    return SimpleMergeEngine()


@pytest.fixture
def guard():
    """Create a private autosave guard so tests don't share state."""
    return AutosaveGuard()


@pytest.fixture
def fast_config():
    """Config with near-zero sleeps for loop tests."""
    return Config(
        reconciler=ReconcilerConfig(
            poll_interval=0.01,
            drain_interval=0.0,
            guard_poll_interval=0.01,
            restart_backoff=0.0,
        ),
        store=StoreConfig(backend="memory"),
    )


@pytest.fixture(autouse=True)
def _isolate_environ():
    """Restore os.environ after each test (load_dotenv writes to it directly)."""
    import os

    saved = dict(os.environ)
    yield
    os.environ.clear()
    os.environ.update(saved)
