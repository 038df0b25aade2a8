"""Tests for the directory walk and full reindex."""

from __future__ import annotations

from pathlib import Path

import pytest

from memdex.memory.document import render_document
from memdex.memory.reindex import collect_documents
from memdex.memory.store import IndexStore

PROJECT = "reindex-project"


@pytest.fixture
def store(tmp_path: Path) -> IndexStore:
    return IndexStore(tmp_path / "memory")


def _write(root: Path, rel: str, metadata: dict, body: str) -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_document(metadata, body), encoding="utf-8")


class TestCollectDocuments:
    def test_walks_nested_dirs_in_order(self, tmp_path: Path):
        for rel in ["b.md", "a/z.md", "a/deep/er/x.md", "c/y.md", "a/notes.txt"]:
            (tmp_path / rel).parent.mkdir(parents=True, exist_ok=True)
            (tmp_path / rel).write_text("x", encoding="utf-8")
        found = [p.relative_to(tmp_path).as_posix() for p in collect_documents(tmp_path)]
        assert found == ["b.md", "a/z.md", "a/deep/er/x.md", "c/y.md"]

    def test_skips_hidden(self, tmp_path: Path):
        (tmp_path / ".hidden").mkdir()
        (tmp_path / ".hidden" / "secret.md").write_text("x", encoding="utf-8")
        (tmp_path / ".draft.md").write_text("x", encoding="utf-8")
        (tmp_path / ".index.json").write_text("{}", encoding="utf-8")
        (tmp_path / "visible.md").write_text("x", encoding="utf-8")
        assert [p.name for p in collect_documents(tmp_path)] == ["visible.md"]

    def test_extension_filter(self, tmp_path: Path):
        (tmp_path / "a.md").write_text("x", encoding="utf-8")
        (tmp_path / "b.MD").write_text("x", encoding="utf-8")
        (tmp_path / "c.markdown").write_text("x", encoding="utf-8")
        names = [p.name for p in collect_documents(tmp_path, (".md", ".markdown"))]
        assert names == ["a.md", "b.MD", "c.markdown"]

    def test_deep_hierarchy(self, tmp_path: Path):
        current = tmp_path
        for i in range(200):
            current = current / f"d{i}"
        current.mkdir(parents=True)
        (current / "leaf.md").write_text("x", encoding="utf-8")
        assert [p.name for p in collect_documents(tmp_path)] == ["leaf.md"]

    def test_missing_root(self, tmp_path: Path):
        assert collect_documents(tmp_path / "nope") == []

    def test_symlink_cycle_not_followed(self, tmp_path: Path):
        (tmp_path / "codebase").mkdir()
        (tmp_path / "codebase" / "auth.md").write_text("x", encoding="utf-8")
        (tmp_path / "codebase" / "loop").symlink_to(tmp_path, target_is_directory=True)
        (tmp_path / "back").symlink_to(tmp_path / "codebase", target_is_directory=True)
        found = [p.relative_to(tmp_path).as_posix() for p in collect_documents(tmp_path)]
        assert found == ["codebase/auth.md"]


class TestReindexAll:
    def test_rebuilds_from_disk(self, store: IndexStore):
        root = store.memory_root(PROJECT)
        _write(root, "codebase/file1.md", {"title": "File One", "tags": ["test"]}, "# File One")
        _write(root, "codebase/file2.md", {"title": "File Two", "tags": ["test"]}, "# File Two")

        result = store.reindex_all(PROJECT)
        assert result == "2 of 2 files reindexed"
        index = store.get_index(PROJECT)
        assert set(index.entries) == {"codebase/file1.md", "codebase/file2.md"}
        assert index.tag_index["test"] == ["codebase/file1.md", "codebase/file2.md"]

    def test_relationships_from_frontmatter(self, store: IndexStore):
        root = store.memory_root(PROJECT)
        _write(root, "a.md", {"title": "A", "related": ["sub/b.md"]}, "")
        _write(root, "sub/b.md", {"title": "B"}, "")
        store.reindex_all(PROJECT)
        index = store.get_index(PROJECT)
        assert index.relationship_graph["a.md"] == ["sub/b.md"]
        assert index.relationship_graph["sub/b.md"] == ["a.md"]
        assert index.entries["sub/b.md"].related == ["a.md"]

    def test_discards_old_index(self, store: IndexStore):
        store.index_file(PROJECT, "gone.md", {"title": "Gone", "tags": ["old"]}, "")
        _write(store.memory_root(PROJECT), "kept.md", {"title": "Kept"}, "")
        store.reindex_all(PROJECT)
        index = store.get_index(PROJECT)
        assert list(index.entries) == ["kept.md"]
        assert "old" not in index.tag_index

    def test_resets_access_counters(self, store: IndexStore):
        _write(store.memory_root(PROJECT), "a.md", {"title": "A"}, "")
        store.reindex_all(PROJECT)
        store.record_access(PROJECT, "a.md")
        assert store.get_index(PROJECT).entries["a.md"].access_count == 1
        store.reindex_all(PROJECT)
        entry = store.get_index(PROJECT).entries["a.md"]
        assert entry.access_count == 0
        assert entry.last_accessed is None

    def test_malformed_frontmatter_still_indexed(self, store: IndexStore):
        root = store.memory_root(PROJECT)
        root.mkdir(parents=True)
        text = "---\ntitle: Never closed\n\nbody words here\n"
        (root / "broken.md").write_text(text, encoding="utf-8")
        assert store.reindex_all(PROJECT) == "1 of 1 files reindexed"
        entry = store.get_index(PROJECT).entries["broken.md"]
        assert entry.title == "Untitled"
        assert entry.word_count == len(text.split())

    def test_unreadable_file_skipped(self, store: IndexStore):
        root = store.memory_root(PROJECT)
        _write(root, "good.md", {"title": "Good"}, "")
        (root / "bad.md").write_bytes(b"\xff\xfe\x00 not utf-8 \xc3\x28")
        assert store.reindex_all(PROJECT) == "1 of 2 files reindexed"
        assert list(store.get_index(PROJECT).entries) == ["good.md"]

    def test_symlink_cycle_indexed_once(self, store: IndexStore):
        root = store.memory_root(PROJECT)
        _write(root, "codebase/auth.md", {"title": "Auth"}, "")
        (root / "codebase" / "loop").symlink_to(root, target_is_directory=True)
        assert store.reindex_all(PROJECT) == "1 of 1 files reindexed"
        assert list(store.get_index(PROJECT).entries) == ["codebase/auth.md"]

    def test_missing_root(self, store: IndexStore):
        assert store.reindex_all("never-created") == "0 of 0 files reindexed"

    def test_persisted(self, store: IndexStore, tmp_path: Path):
        _write(store.memory_root(PROJECT), "a.md", {"title": "A"}, "")
        store.reindex_all(PROJECT)
        assert "a.md" in IndexStore(tmp_path / "memory").get_index(PROJECT).entries
