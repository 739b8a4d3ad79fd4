"""
Base interface for multi-version merge engines.

A merge engine owns the packed multi-version representation of a document:
it registers versions, aligns their content against each other, serializes
the result and answers which versions share a span of text. Handles are
opaque to callers.
"""

from abc import ABC, abstractmethod
from typing import Any

NO_BACKUP = 0


class MergeEngine(ABC):
    """Abstract base class for merge/alignment engines."""

    @abstractmethod
    def create(self, description: str = "") -> Any:
        """Create an empty multi-version document and return its handle."""
        pass

    @abstractmethod
    def parse(self, data: str) -> Any:
        """
        Load a packed multi-version document.

        Raises:
            MergeEngineError: If data isn't a valid packed document
        """
        pass

    @abstractmethod
    def serialize(self, handle: Any) -> str:
        """Serialize a handle to its packed textual form."""
        pass

    @abstractmethod
    def new_version(
        self,
        handle: Any,
        short_name: str,
        long_name: str,
        group_path: str,
        backup: int = NO_BACKUP,
        partial: bool = False,
    ) -> int:
        """
        Register a new, empty version.

        Returns:
            The new version id (1-based, in registration order)
        """
        pass

    @abstractmethod
    def align(self, handle: Any, version_id: int, content: str, direct: bool = True) -> None:
        """Align content into the document as the given version."""
        pass

    @abstractmethod
    def num_versions(self, handle: Any) -> int:
        pass

    @abstractmethod
    def get_version_content(self, handle: Any, version_id: int) -> str:
        pass

    @abstractmethod
    def get_group_path(self, handle: Any, version_id: int) -> str:
        pass

    @abstractmethod
    def get_short_name(self, handle: Any, version_id: int) -> str:
        pass

    @abstractmethod
    def get_long_name(self, handle: Any, version_id: int) -> str:
        pass

    @abstractmethod
    def get_description(self, handle: Any) -> str:
        pass

    @abstractmethod
    def set_description(self, handle: Any, description: str) -> None:
        pass

    @abstractmethod
    def find_version(self, handle: Any, group_path: str, short_name: str) -> int | None:
        """
        Look up a version by group path and short name.

        Returns:
            Version id, or None if no such version exists
        """
        pass

    @abstractmethod
    def versions_overlapping(
        self, handle: Any, version_id: int, offset: int, length: int
    ) -> list[str]:
        """
        Find the versions sharing a span of one version.

        Args:
            handle: Loaded document
            version_id: Version the offsets refer to
            offset: Start of the span
            length: Length of the span

        Returns:
            Version paths ("groupPath/shortName") in engine order, base included
        """
        pass
