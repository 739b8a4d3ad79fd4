"""
In-memory document store.

Keeps each collection in an insertion-ordered dict. Used for tests and for
running the reconciler without a database.
"""

import copy
import re
from typing import Any

from src.core.document_store.base import DocumentStore, field_matches
from src.utils.exceptions import DocumentStoreError
from src.utils.keys import generate_store_id


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed document store. Documents are copied in and out."""

    def __init__(self):
        self.collections: dict[str, dict[str, dict[str, Any]]] = {}

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        pass

    def _collection(self, collection: str) -> dict[str, dict[str, Any]]:
        return self.collections.setdefault(collection, {})

    async def list_keys(self, collection: str) -> list[str]:
        return list(self._collection(collection).keys())

    async def get(self, collection: str, key: str) -> dict[str, Any] | None:
        document = self._collection(collection).get(key)
        return copy.deepcopy(document) if document is not None else None

    async def put(self, collection: str, key: str, document: dict[str, Any]) -> None:
        if not isinstance(document, dict):
            raise DocumentStoreError(
                f"Cannot store {type(document).__name__} in {collection}",
                context={"collection": collection, "key": key},
            )
        stored = copy.deepcopy(document)
        stored.setdefault("_id", generate_store_id())
        self._collection(collection)[key] = stored

    async def delete(self, collection: str, key: str) -> None:
        self._collection(collection).pop(key, None)

    async def delete_by_field(self, collection: str, field: str, value: Any) -> int:
        documents = self._collection(collection)
        doomed = [key for key, doc in documents.items() if field_matches(doc, field, value)]
        for key in doomed:
            del documents[key]
        return len(doomed)

    async def list_matching_keys(
        self, collection: str, key_pattern: str, field: str
    ) -> list[Any]:
        try:
            pattern = re.compile(key_pattern)
        except re.error as e:
            raise DocumentStoreError(
                f"Invalid key pattern {key_pattern!r}: {e}",
                context={"collection": collection, "pattern": key_pattern},
            ) from e

        return [
            doc[field]
            for key, doc in self._collection(collection).items()
            if pattern.fullmatch(key) and field in doc
        ]
