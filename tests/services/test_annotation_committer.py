"""
Tests for AnnotationCommitter.

Tests cover:
1. First-per-docid commit rule
2. Version resolution against committed cortex archives
3. Upsert semantics
4. Skips versus failures
"""

from unittest.mock import AsyncMock

import pytest

from src.core.archive.aggregate import VersionAggregate
from src.models.scratch import ScratchEntry
from src.utils.exceptions import CommitError


def annotation(key: str, docid: str = "w1", store_id: str | None = "a1", **fields) -> ScratchEntry:
    document = {"docid": docid, "vpath": "A/v1", "offset": 0, "len": 9, **fields}
    if store_id is not None:
        document["_id"] = store_id
    return ScratchEntry.from_document(key, document)


@pytest.fixture
async def packed_cortex(repository, engine):
    """Commit a two-version cortex archive for w1."""
    aggregate = VersionAggregate(engine, format="TEXT")
    aggregate.put("A/v1", "The quick brown fox")
    aggregate.put("A/v2", "The quick red fox")
    await repository.save("cortex", "w1", aggregate)
    return aggregate


@pytest.mark.asyncio
class TestAnnotationCommit:
    """Test committing annotations."""

    async def test_commits_with_shared_versions(self, annotation_committer, memory_store, packed_cortex):
        result = await annotation_committer.commit([annotation("k1", content="a note")])

        assert result.committed == ["w1"]
        stored = await memory_store.get("annotations", "w1")
        assert stored["versions"] == ["A/v1", "A/v2"]
        assert stored["vpath"] == "A/v1"
        assert stored["content"] == "a note"

    async def test_span_in_one_version_only(self, annotation_committer, memory_store, packed_cortex):
        await annotation_committer.commit([annotation("k1", offset=10, len=5)])

        stored = await memory_store.get("annotations", "w1")
        assert stored["versions"] == ["A/v1"]

    async def test_only_first_per_docid(self, annotation_committer, memory_store, packed_cortex):
        """Test a second annotation on the same docid waits for a later pass."""
        result = await annotation_committer.commit(
            [
                annotation("k1", store_id="a1", content="first"),
                annotation("k2", store_id="a2", content="second"),
            ]
        )

        assert result.committed == ["w1"]
        assert result.skipped == 1
        assert (await memory_store.get("annotations", "w1"))["content"] == "first"

    async def test_sorted_by_docid(self, annotation_committer, memory_store, repository, engine):
        for docid in ["w2", "w1"]:
            aggregate = VersionAggregate(engine, format="TEXT", version1="A/v1")
            aggregate.put("A/v1", "some text here")
            await repository.save("cortex", docid, aggregate)

        result = await annotation_committer.commit(
            [annotation("k1", docid="w2", store_id="b"), annotation("k2", docid="w1", store_id="a")]
        )

        assert result.committed == ["w1", "w2"]

    async def test_no_store_id_not_committed(self, annotation_committer, memory_store, packed_cortex):
        result = await annotation_committer.commit([annotation("k1", store_id=None)])

        assert result.committed == []
        assert result.skipped == 1
        assert await memory_store.list_keys("annotations") == []

    async def test_missing_cortex_skipped(self, annotation_committer, memory_store):
        result = await annotation_committer.commit([annotation("k1", docid="nothing")])

        assert result.committed == []
        assert result.skipped == 1

    async def test_missing_version_skipped(self, annotation_committer, memory_store, packed_cortex):
        result = await annotation_committer.commit([annotation("k1", vpath="B/v9")])

        assert result.committed == []
        assert await memory_store.list_keys("annotations") == []

    async def test_negative_span_skipped(self, annotation_committer, packed_cortex):
        result = await annotation_committer.commit([annotation("k1", offset=-3)])

        assert result.skipped == 1


@pytest.mark.asyncio
class TestAnnotationUpsert:
    """Test replacing stored annotations."""

    async def test_replaces_previous_record(self, annotation_committer, memory_store, packed_cortex):
        await memory_store.put("annotations", "old-key", {"_id": "a1", "docid": "w1", "stale": True})

        await annotation_committer.commit([annotation("k1", store_id="a1", id="n-1")])

        assert await memory_store.get("annotations", "old-key") is None
        stored = await memory_store.get("annotations", "w1")
        assert stored["_id"] != "a1"
        assert "id" not in stored
        assert "stale" not in stored

    async def test_store_failure_raises(self, annotation_committer, memory_store, packed_cortex):
        memory_store.delete_by_field = AsyncMock(side_effect=RuntimeError("locked"))

        with pytest.raises(CommitError) as exc_info:
            await annotation_committer.commit([annotation("k1")])

        assert exc_info.value.context["collection"] == "annotations"

    async def test_archive_read_failure_raises(self, annotation_committer, repository):
        repository.load_handle = AsyncMock(side_effect=RuntimeError("corrupt"))

        with pytest.raises(CommitError):
            await annotation_committer.commit([annotation("k1")])
