"""
Tests for ArchiveRepository.
"""

import pytest

from src.core.archive.aggregate import VersionAggregate
from src.core.archive.repository import ArchiveRepository
from src.utils.exceptions import ArchiveError


@pytest.fixture
def repository(memory_store, engine):
    return ArchiveRepository(memory_store, engine)


@pytest.mark.asyncio
class TestArchiveRepository:
    """Test loading and saving archives."""

    async def test_load_missing(self, repository):
        assert await repository.load("cortex", "w1") is None
        assert await repository.load_handle("cortex", "w1") is None

    async def test_save_and_load(self, repository, memory_store, engine):
        aggregate = VersionAggregate(engine, format="TEXT")
        aggregate.put("A/v1", "one")
        aggregate.put("A/v2", "two")

        await repository.save("cortex", "w1", aggregate)
        loaded = await repository.load("cortex", "w1")

        stored = await memory_store.get("cortex", "w1")
        assert stored["format"] == "MVD/TEXT"
        assert stored["docid"] == "w1"
        assert loaded.keys() == ["A/v1", "A/v2"]

    async def test_fills_missing_docid(self, repository, memory_store):
        await memory_store.put("cortex", "w1", {"version1": "v0", "format": "TEXT", "body": "x"})

        document = await repository.get_document("cortex", "w1")

        assert document.docid == "w1"

    async def test_malformed_archive_raises(self, repository, memory_store):
        await memory_store.put("cortex", "w1", {"docid": "w1", "body": "no format"})

        with pytest.raises(ArchiveError):
            await repository.load("cortex", "w1")

    async def test_load_handle_flat(self, repository, memory_store, engine):
        """Test a flat archive is wrapped as a one-version document."""
        await memory_store.put(
            "cortex", "w1", {"docid": "w1", "version1": "A/v1", "format": "TEXT", "body": "hi"}
        )

        handle = await repository.load_handle("cortex", "w1")

        assert engine.num_versions(handle) == 1
        assert engine.find_version(handle, "A", "v1") == 1

    async def test_load_handle_packed(self, repository, engine):
        aggregate = VersionAggregate(engine, format="TEXT")
        aggregate.put("A/v1", "one")
        aggregate.put("A/v2", "two")
        await repository.save("cortex", "w1", aggregate)

        handle = await repository.load_handle("cortex", "w1")

        assert engine.num_versions(handle) == 2

    async def test_list_documents(self, repository, memory_store):
        for docid in ["english/harpur/h1", "english/harpur/h2", "english/other/o1"]:
            await memory_store.put(
                "cortex", docid, {"docid": docid, "version1": "v0", "format": "TEXT", "body": ""}
            )

        assert await repository.list_documents("cortex", "english/harpur/.*") == [
            "english/harpur/h1",
            "english/harpur/h2",
        ]
        assert len(await repository.list_documents("cortex")) == 3
