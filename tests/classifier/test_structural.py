"""
Tests for the structural scratch classifier.
"""

import pytest

from src.core.classifier.structural import StructuralClassifier
from src.models.scratch import DocumentKind


@pytest.fixture
def classifier():
    return StructuralClassifier()


class TestStructuralClassifier:
    """Test classification of scratch documents."""

    @pytest.mark.parametrize("fmt", ["TEXT", "MVD/TEXT"])
    def test_cortex(self, classifier, fmt):
        document = {"docid": "w1", "version1": "A/v1", "body": "text", "format": fmt}

        assert classifier.classify(document) == DocumentKind.CORTEX

    @pytest.mark.parametrize("fmt", ["STIL", "MVD/STIL"])
    def test_corcode(self, classifier, fmt):
        document = {"docid": "w1", "version1": "A/v1", "body": "{}", "format": fmt}

        assert classifier.classify(document) == DocumentKind.CORCODE

    def test_annotation_with_version1(self, classifier):
        document = {"docid": "w1", "version1": "A/v1", "offset": 10, "len": 4}

        assert classifier.classify(document) == DocumentKind.ANNOTATION

    def test_annotation_with_vpath(self, classifier):
        document = {"docid": "w1", "vpath": "A/v1", "offset": 0, "len": 0, "content": "note"}

        assert classifier.classify(document) == DocumentKind.ANNOTATION

    @pytest.mark.parametrize(
        "document",
        [
            {},
            {"body": "text", "format": "TEXT", "version1": "v1"},
            {"docid": "w1", "version1": "v1", "body": "text", "format": "HTML"},
            {"docid": "w1", "version1": "v1", "format": "TEXT"},
            {"docid": "w1", "body": "text", "format": "TEXT"},
            {"docid": "w1", "version1": "v1", "offset": "3", "len": 4},
            {"docid": "w1", "version1": "v1", "offset": True, "len": 4},
            {"docid": "", "version1": "v1", "body": "text", "format": "TEXT"},
        ],
    )
    def test_unknown(self, classifier, document):
        assert classifier.classify(document) == DocumentKind.UNKNOWN
