"""Tests for the SQLite chunk store."""

import sqlite3
from pathlib import Path

import pytest

from src.models.chunk import Chunk
from src.storage.chunk_store import ChunkStore


@pytest.fixture
def store(tmp_path: Path) -> ChunkStore:
    return ChunkStore(tmp_path / "db" / "chunks.db")


def _chunk(chunk_id: str, content: str = "text", page_number: int | None = None) -> Chunk:
    return Chunk(
        id=chunk_id,
        title="Colosseum",
        section="History",
        chunk_index=0,
        content=content,
        source_page_url="https://en.wikipedia.org/wiki/Colosseum",
        page_number=page_number,
    )


class TestSave:
    def test_save_and_fetch(self, store: ChunkStore) -> None:
        chunk = _chunk("a", page_number=4)
        store.save(chunk)
        assert store.get_by_ids(["a"]) == [chunk]

    def test_save_is_upsert(self, store: ChunkStore) -> None:
        store.save(_chunk("a", content="old"))
        store.save(_chunk("a", content="new"))
        assert store.count() == 1
        assert store.get_by_ids(["a"])[0].content == "new"

    def test_save_many(self, store: ChunkStore) -> None:
        written = store.save_many([_chunk("a"), _chunk("b"), _chunk("c")])
        assert written == 3
        assert store.count() == 3

    def test_save_many_empty(self, store: ChunkStore) -> None:
        assert store.save_many([]) == 0

    def test_creates_database_file(self, tmp_path: Path) -> None:
        ChunkStore(tmp_path / "nested" / "chunks.db")
        assert (tmp_path / "nested" / "chunks.db").exists()


class TestGetByIds:
    def test_unknown_ids_omitted(self, store: ChunkStore) -> None:
        store.save(_chunk("a"))
        assert [c.id for c in store.get_by_ids(["a", "gone"])] == ["a"]

    def test_empty_request_returns_empty(self, store: ChunkStore) -> None:
        assert store.get_by_ids([]) == []

    def test_blank_and_repeated_ids_ignored(self, store: ChunkStore) -> None:
        store.save(_chunk("a"))
        result = store.get_by_ids(["a", "", "a"])
        assert [c.id for c in result] == ["a"]

    def test_preserve_order(self, store: ChunkStore) -> None:
        store.save_many([_chunk("a"), _chunk("b"), _chunk("c")])
        result = store.get_by_ids(["c", "missing", "a", "b"], preserve_order=True)
        assert [c.id for c in result] == ["c", "a", "b"]

    def test_large_batches(self, store: ChunkStore) -> None:
        store.save_many([_chunk(f"id-{i}") for i in range(1200)])
        ids = [f"id-{i}" for i in reversed(range(1200))]
        result = store.get_by_ids(ids, preserve_order=True)
        assert [c.id for c in result] == ids

    def test_single_connection_per_lookup(
        self, store: ChunkStore, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        store.save_many([_chunk("a"), _chunk("b")])
        opened: list[str] = []

        import src.storage.chunk_store as chunk_store_module

        original = chunk_store_module.get_connection

        def counting_connection(path: Path) -> sqlite3.Connection:
            opened.append(str(path))
            return original(path)

        monkeypatch.setattr(chunk_store_module, "get_connection", counting_connection)
        store.get_by_ids(["a", "b"])
        assert len(opened) == 1


class TestDeleteAndCount:
    def test_delete(self, store: ChunkStore) -> None:
        store.save_many([_chunk("a"), _chunk("b")])
        assert store.delete(["a", "missing"]) == 1
        assert store.count() == 1
        assert store.get_by_ids(["a"]) == []

    def test_ids_for_title(self, store: ChunkStore) -> None:
        store.save_many([_chunk("b"), _chunk("a")])
        assert store.ids_for_title("Colosseum") == ["a", "b"]
        assert store.ids_for_title("Unknown") == []

    def test_delete_nothing(self, store: ChunkStore) -> None:
        assert store.delete([]) == 0

    def test_count_empty(self, store: ChunkStore) -> None:
        assert store.count() == 0
