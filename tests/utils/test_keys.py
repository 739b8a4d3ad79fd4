"""
Tests for identifier utilities.

Tests cover:
1. Default-suffix normalization and pair keys
2. Version path split/join
3. Default long names
4. Store id generation
"""

import pytest

from src.utils import (
    canonical_vpath,
    default_long_name,
    generate_store_id,
    join_vpath,
    normalize_docid,
    pair_key,
    split_vpath,
)


class TestPairKey:
    """Tests for docid normalization and pair keys."""

    def test_strips_default_suffix(self):
        assert normalize_docid("book1/default") == "book1"

    def test_leaves_other_docids(self):
        assert normalize_docid("book1") == "book1"
        assert normalize_docid("book1/defaults") == "book1/defaults"

    def test_strips_only_one_suffix(self):
        assert normalize_docid("book1/default/default") == "book1/default"

    def test_default_and_bare_docid_pair(self):
        """Test "book1/default" and "book1" produce the same key."""
        assert pair_key("book1/default", "v1") == pair_key("book1", "v1")

    def test_concatenation(self):
        assert pair_key("english/harpur/h642", "/A/v1") == "english/harpur/h642/A/v1"


class TestVpath:
    """Tests for version path handling."""

    @pytest.mark.parametrize(
        "vpath,expected",
        [
            ("A/v1", ("A", "v1")),
            ("Base/first/v2", ("Base/first", "v2")),
            ("v0", ("", "v0")),
            ("/Base/v1", ("/Base", "v1")),
        ],
    )
    def test_split(self, vpath, expected):
        assert split_vpath(vpath) == expected

    @pytest.mark.parametrize("vpath", ["A/v1", "Base/first/v2", "/v1", "/Base/v1"])
    def test_split_join_lossless(self, vpath):
        assert join_vpath(*split_vpath(vpath)) == vpath

    def test_join_without_group(self):
        assert join_vpath("", "v3") == "/v3"

    @pytest.mark.parametrize(
        "version_id,expected",
        [("v1", "/v1"), ("/v1", "/v1"), ("A/v1", "A/v1"), ("/Base/v1", "/Base/v1")],
    )
    def test_canonical(self, version_id, expected):
        assert canonical_vpath(version_id) == expected


class TestDefaultLongName:
    """Tests for generated long names."""

    def test_with_group(self):
        assert default_long_name("A", "v1") == "Version v1 of A"

    def test_without_group(self):
        assert default_long_name("", "v1") == "Version v1"


class TestGenerateStoreId:
    """Tests for store id generation."""

    def test_format(self):
        store_id = generate_store_id()

        assert len(store_id) == 24
        int(store_id, 16)

    def test_uniqueness(self):
        ids = [generate_store_id() for _ in range(1000)]
        assert len(ids) == len(set(ids))
