"""Tests for memory path helpers."""

from __future__ import annotations

from pathlib import Path

from memdex.memory.paths import (
    CATEGORY_DIRS,
    ensure_memory_dir,
    normalize_entry_path,
    project_identifier,
    resolve_project_dir,
    sanitize_memory_path,
)


class TestNormalize:
    def test_leading_slash(self):
        assert normalize_entry_path("/codebase/auth.md") == "codebase/auth.md"

    def test_dot_slash_and_backslashes(self):
        assert normalize_entry_path("./technical\\jwt.md") == "technical/jwt.md"

    def test_unchanged(self):
        assert normalize_entry_path("a/b.md") == "a/b.md"


class TestSanitize:
    def test_parent_components_removed(self):
        assert sanitize_memory_path("../../etc/passwd") == "etc/passwd"
        assert sanitize_memory_path("a/../b.md") == "a/b.md"

    def test_home_prefix_removed(self):
        assert sanitize_memory_path("~/notes.md") == "notes.md"

    def test_dotted_names_kept(self):
        assert sanitize_memory_path("a/..b/c...md") == "a/..b/c...md"


class TestResolveProjectDir:
    def test_project_subdir(self, tmp_path: Path):
        assert resolve_project_dir(tmp_path, "work/app") == tmp_path / "work" / "app"

    def test_escape_blocked(self, tmp_path: Path):
        assert resolve_project_dir(tmp_path, "../outside") == tmp_path / "outside"

    def test_empty_project(self, tmp_path: Path):
        assert resolve_project_dir(tmp_path, "") == tmp_path


class TestProjectIdentifier:
    def test_relative_to_home(self, tmp_path: Path):
        assert project_identifier(tmp_path / "code" / "app", home=tmp_path) == "code/app"

    def test_projects_prefix_dropped(self, tmp_path: Path):
        assert project_identifier(tmp_path / "Projects" / "memdex", home=tmp_path) == "memdex"

    def test_outside_home(self, tmp_path: Path):
        assert project_identifier(Path("/srv/service"), home=tmp_path) == "service"


class TestEnsureMemoryDir:
    def test_creates_layout(self, tmp_path: Path):
        root = tmp_path / "memory"
        ensure_memory_dir(root)
        for d in CATEGORY_DIRS:
            assert (root / d).is_dir()
        assert "Directory Structure" in (root / "README.md").read_text(encoding="utf-8")

    def test_existing_root_untouched(self, tmp_path: Path):
        ensure_memory_dir(tmp_path)
        assert not (tmp_path / "README.md").exists()
