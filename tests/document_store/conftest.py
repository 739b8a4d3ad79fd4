"""Fixtures for document store tests."""

from collections.abc import AsyncGenerator

import pytest

from src.core.document_store.base import DocumentStore
from src.core.document_store.memory_store import InMemoryDocumentStore
from src.core.document_store.sqlite_store import SQLiteDocumentStore


@pytest.fixture(params=["memory", "sqlite"])
async def store(request, tmp_path) -> AsyncGenerator[DocumentStore, None]:
    """Each store backend, initialized and closed around the test."""
    if request.param == "memory":
        backend: DocumentStore = InMemoryDocumentStore()
    else:
        backend = SQLiteDocumentStore(db_path=str(tmp_path / "store" / "test.db"))

    await backend.initialize()
    yield backend
    await backend.close()
