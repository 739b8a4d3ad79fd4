"""
Tests for the reference merge engine.

Tests cover:
1. Version registration and metadata accessors
2. Packed serialization and parsing
3. Span overlap queries
"""

import json

import pytest

from src.core.merge.base import NO_BACKUP
from src.core.merge.simple import SimpleMergeEngine
from src.utils.exceptions import MergeEngineError


def build(engine: SimpleMergeEngine, versions: list[tuple[str, str, str]], description: str = ""):
    """Create a handle from (group, short, content) triples."""
    handle = engine.create(description)
    for group, short, content in versions:
        version_id = engine.new_version(handle, short, f"Version {short}", group, NO_BACKUP, False)
        engine.align(handle, version_id, content, True)
    return handle


class TestVersions:
    """Test version registration and accessors."""

    def test_new_version_ids_are_sequential(self, engine):
        handle = engine.create("poem")

        first = engine.new_version(handle, "v1", "Version v1", "A")
        second = engine.new_version(handle, "v2", "Version v2", "A")

        assert (first, second) == (1, 2)
        assert engine.num_versions(handle) == 2

    def test_accessors(self, engine):
        handle = build(engine, [("A", "v1", "hello")], description="poem")

        assert engine.get_version_content(handle, 1) == "hello"
        assert engine.get_group_path(handle, 1) == "A"
        assert engine.get_short_name(handle, 1) == "v1"
        assert engine.get_long_name(handle, 1) == "Version v1"
        assert engine.get_description(handle) == "poem"

    def test_set_description(self, engine):
        handle = engine.create()

        engine.set_description(handle, "new")

        assert engine.get_description(handle) == "new"

    def test_unknown_version_id_raises(self, engine):
        handle = build(engine, [("A", "v1", "hello")])

        with pytest.raises(MergeEngineError):
            engine.get_version_content(handle, 2)
        with pytest.raises(MergeEngineError):
            engine.align(handle, 0, "x")

    def test_find_version(self, engine):
        handle = build(engine, [("A", "v1", "x"), ("B", "v1", "y"), ("", "v0", "z")])

        assert engine.find_version(handle, "B", "v1") == 2
        assert engine.find_version(handle, "", "v0") == 3
        assert engine.find_version(handle, "C", "v1") is None


class TestSerialization:
    """Test packed form."""

    def test_serialize_parse(self, engine):
        handle = build(engine, [("A", "v1", "one"), ("A", "v2", "two")], description="d")

        data = engine.serialize(handle)
        parsed = engine.parse(data)

        assert json.loads(data)["mvd"] == 1
        assert engine.num_versions(parsed) == 2
        assert engine.get_version_content(parsed, 2) == "two"
        assert engine.get_description(parsed) == "d"

    @pytest.mark.parametrize("data", ["not json", "[]", '{"versions": []}', '{"mvd": 2}'])
    def test_parse_rejects_foreign_data(self, engine, data):
        with pytest.raises(MergeEngineError):
            engine.parse(data)

    def test_parse_rejects_malformed_versions(self, engine):
        with pytest.raises(MergeEngineError):
            engine.parse('{"mvd": 1, "versions": [{"content": "x"}]}')


class TestVersionsOverlapping:
    """Test span queries."""

    def test_shared_span(self, engine):
        handle = build(
            engine,
            [
                ("A", "v1", "The quick brown fox"),
                ("A", "v2", "The quick red fox"),
                ("A", "v3", "A slow brown fox"),
            ],
        )

        # "quick" is in v1 and v2 only
        assert engine.versions_overlapping(handle, 1, 4, 5) == ["A/v1", "A/v2"]
        # "brown" is in v1 and v3 only
        assert engine.versions_overlapping(handle, 1, 10, 5) == ["A/v1", "A/v3"]

    def test_base_always_included(self, engine):
        handle = build(engine, [("A", "v1", "abc"), ("A", "v2", "xyz")])

        assert engine.versions_overlapping(handle, 2, 0, 3) == ["A/v2"]

    def test_zero_length_span(self, engine):
        handle = build(engine, [("A", "v1", "hello"), ("A", "v2", "hello")])

        assert engine.versions_overlapping(handle, 1, 2, 0) == ["A/v1", "A/v2"]

    def test_span_past_end_is_clamped(self, engine):
        handle = build(engine, [("A", "v1", "hello"), ("A", "v2", "hello world")])

        assert engine.versions_overlapping(handle, 1, 0, 100) == ["A/v1", "A/v2"]

    def test_ungrouped_versions(self, engine):
        handle = build(engine, [("", "v0", "same"), ("A", "v1", "same")])

        assert engine.versions_overlapping(handle, 1, 0, 4) == ["/v0", "A/v1"]
