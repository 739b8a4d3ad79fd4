"""
Base interface for document storage.

Collections hold JSON-shaped documents addressed by key. The reconciler uses
four of them: scratch, cortex, corcode and annotations.
"""

from abc import ABC, abstractmethod
from typing import Any


class DocumentStore(ABC):
    """Abstract base class for document storage implementations."""

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the store (open connections, create schema)."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release any held resources."""
        pass

    @abstractmethod
    async def list_keys(self, collection: str) -> list[str]:
        """
        List the keys of every document in a collection.

        Args:
            collection: Collection name

        Returns:
            Keys in insertion order
        """
        pass

    @abstractmethod
    async def get(self, collection: str, key: str) -> dict[str, Any] | None:
        """
        Fetch one document.

        Args:
            collection: Collection name
            key: Document key

        Returns:
            Document or None if absent
        """
        pass

    @abstractmethod
    async def put(self, collection: str, key: str, document: dict[str, Any]) -> None:
        """
        Insert or replace the document stored under key.

        A document without "_id" is given one.

        Args:
            collection: Collection name
            key: Document key
            document: Document to store
        """
        pass

    @abstractmethod
    async def delete(self, collection: str, key: str) -> None:
        """
        Delete the document stored under key (no-op if absent).

        Args:
            collection: Collection name
            key: Document key
        """
        pass

    @abstractmethod
    async def delete_by_field(self, collection: str, field: str, value: Any) -> int:
        """
        Delete every document whose field equals value.

        Args:
            collection: Collection name
            field: Top-level field name
            value: Value to match (compared as strings)

        Returns:
            Number of documents deleted
        """
        pass

    @abstractmethod
    async def list_matching_keys(
        self, collection: str, key_pattern: str, field: str
    ) -> list[Any]:
        """
        Collect a field from every document whose key matches a pattern.

        Args:
            collection: Collection name
            key_pattern: Regular expression the whole key must match
            field: Field whose value is returned

        Returns:
            Field values of matching documents that have the field
        """
        pass


def field_matches(document: dict[str, Any], field: str, value: Any) -> bool:
    """Compare a stored field with a value the way delete_by_field does."""
    if field not in document:
        return False
    return str(document[field]) == str(value)
