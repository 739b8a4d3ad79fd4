"""
Merge engine implementations for Palimpsest.

Available engines:
- SimpleMergeEngine: JSON packed format with difflib span alignment
"""

from src.core.merge.base import NO_BACKUP, MergeEngine
from src.core.merge.simple import PackedDocument, SimpleMergeEngine

__all__ = [
    "NO_BACKUP",
    "MergeEngine",
    "PackedDocument",
    "SimpleMergeEngine",
]
