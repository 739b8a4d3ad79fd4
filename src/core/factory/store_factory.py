"""
Factory for creating document store backends.
"""

from src.config import StoreConfig
from src.core.document_store.base import DocumentStore
from src.core.document_store.memory_store import InMemoryDocumentStore
from src.core.document_store.sqlite_store import SQLiteDocumentStore
from src.utils.exceptions import ConfigurationError


class DocumentStoreFactory:
    """Factory for creating document store backends from configuration."""

    @staticmethod
    def create(config: StoreConfig) -> DocumentStore:
        """
        Create document store from configuration.

        Args:
            config: Store configuration

        Returns:
            Document store instance

        Raises:
            ConfigurationError: If backend is not supported (a ValueError)
        """
        if config.backend == "sqlite":
            return SQLiteDocumentStore(db_path=config.db_path)
        elif config.backend == "memory":
            return InMemoryDocumentStore()
        else:
            raise ConfigurationError(
                f"Unsupported store backend: {config.backend}", context={"backend": config.backend}
            )
