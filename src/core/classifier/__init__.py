"""
Scratch classifiers for Palimpsest.
"""

from src.core.classifier.base import Classifier
from src.core.classifier.structural import StructuralClassifier

__all__ = [
    "Classifier",
    "StructuralClassifier",
]
