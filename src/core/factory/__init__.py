"""
Factory modules for creating Palimpsest components.

Provides modular factories for the document store and the merge engine.
"""

from src.core.factory.merge_factory import MergeEngineFactory
from src.core.factory.store_factory import DocumentStoreFactory

__all__ = [
    "DocumentStoreFactory",
    "MergeEngineFactory",
]
