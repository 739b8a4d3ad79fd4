"""
Tests for RangeResolver.
"""

import pytest

from src.core.archive.range_resolver import RangeResolver
from src.utils.exceptions import NotFoundError, ValidationError


@pytest.fixture
def handle(engine):
    handle = engine.create("")
    for short, content in [("v1", "The quick brown fox"), ("v2", "The quick red fox")]:
        version_id = engine.new_version(handle, short, f"Version {short} of A", "A")
        engine.align(handle, version_id, content)
    return handle


class TestRangeResolver:
    """Test span resolution."""

    def test_resolves_shared_span(self, engine, handle):
        resolver = RangeResolver(engine)

        assert resolver.resolve(handle, "A", "v1", 0, 9) == ["A/v1", "A/v2"]

    def test_zero_length_includes_base(self, engine, handle):
        resolver = RangeResolver(engine)

        versions = resolver.resolve(handle, "A", "v2", 0, 0)

        assert "A/v2" in versions

    def test_unknown_version(self, engine, handle):
        resolver = RangeResolver(engine)

        with pytest.raises(NotFoundError):
            resolver.resolve(handle, "B", "v1", 0, 3)

    @pytest.mark.parametrize("offset,length", [(-1, 3), (0, -2)])
    def test_negative_span(self, engine, handle, offset, length):
        resolver = RangeResolver(engine)

        with pytest.raises(ValidationError):
            resolver.resolve(handle, "A", "v1", offset, length)
