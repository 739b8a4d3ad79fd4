"""Utility modules for Palimpsest."""

from src.utils.exceptions import (
    ArchiveError,
    CommitError,
    ConfigurationError,
    DocumentStoreError,
    MergeEngineError,
    NotFoundError,
    PalimpsestError,
    StoreError,
    ValidationError,
)
from src.utils.keys import (
    DEFAULT_SUFFIX,
    default_long_name,
    generate_store_id,
    canonical_vpath,
    join_vpath,
    normalize_docid,
    pair_key,
    split_vpath,
)
from src.utils.logger import get_logger, setup_logging

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # Keys
    "DEFAULT_SUFFIX",
    "normalize_docid",
    "pair_key",
    "split_vpath",
    "join_vpath",
    "canonical_vpath",
    "default_long_name",
    "generate_store_id",
    # Exceptions
    "PalimpsestError",
    "StoreError",
    "DocumentStoreError",
    "MergeEngineError",
    "ArchiveError",
    "CommitError",
    "ValidationError",
    "NotFoundError",
    "ConfigurationError",
]
