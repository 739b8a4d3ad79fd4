"""
Base interface for scratch classifiers.
"""

from abc import ABC, abstractmethod
from typing import Any

from src.models.scratch import DocumentKind


class Classifier(ABC):
    """Decides what kind of document a raw scratch entry is."""

    @abstractmethod
    def classify(self, document: dict[str, Any]) -> DocumentKind:
        """
        Classify a raw scratch document.

        Must be side-effect free; anything not recognised is UNKNOWN.

        Args:
            document: Document as read from the scratch collection

        Returns:
            The document's kind
        """
        pass
