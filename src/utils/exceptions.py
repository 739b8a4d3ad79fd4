"""
Custom exception hierarchy for Palimpsest.

Provides structured error types for the reconciliation engine.
All exceptions inherit from PalimpsestError for easy catching.
"""


class PalimpsestError(Exception):
    """
    Base exception for all Palimpsest errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize Palimpsest error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class StoreError(PalimpsestError):
    """
    Base exception for store operations.
    Used for errors related to data storage operations.
    """

    pass


class DocumentStoreError(StoreError):
    """
    Document store operation errors.
    Raised when a read, write or delete against a collection fails.
    """

    pass


class MergeEngineError(PalimpsestError):
    """
    Merge engine errors.
    Raised when alignment, parsing or serialization of a multi-version
    document fails, including an empty result after a merge.
    """

    pass


class ArchiveError(PalimpsestError):
    """
    Archive errors.
    Raised when a version aggregate cannot be built or persisted.
    """

    pass


class CommitError(StoreError):
    """
    Commit errors.
    Raised when a scratch entry cannot be committed into a permanent collection.
    """

    pass


class ValidationError(PalimpsestError):
    """
    Validation errors.
    Raised when input validation fails or data is invalid.
    """

    pass


class NotFoundError(PalimpsestError):
    """
    Resource not found errors.
    Raised when a referenced archive or version doesn't exist.
    """

    pass


class ConfigurationError(PalimpsestError, ValueError):
    """
    Configuration errors.
    Raised when configuration names an unknown backend or holds invalid values.
    Also a ValueError, so callers validating settings can catch either.
    """

    pass
