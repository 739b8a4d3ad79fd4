"""
Document store implementations for Palimpsest.

Provides abstract base and concrete implementations for document storage.

Available backends:
- SQLiteDocumentStore: Local persistent storage (aiosqlite)
- InMemoryDocumentStore: Process-local storage for tests and dry runs
"""

from src.core.document_store.base import DocumentStore
from src.core.document_store.memory_store import InMemoryDocumentStore
from src.core.document_store.sqlite_store import SQLiteDocumentStore

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "SQLiteDocumentStore",
]
