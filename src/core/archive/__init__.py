"""Archive components: version aggregates, span resolution and persistence."""

from src.core.archive.aggregate import VersionAggregate
from src.core.archive.range_resolver import RangeResolver
from src.core.archive.repository import ArchiveRepository

__all__ = [
    "VersionAggregate",
    "RangeResolver",
    "ArchiveRepository",
]
