"""Index store — per-project memory index with whole-document persistence.

Markdown files under a project's memory root are the source of truth. The
index is a derived JSON document (``.index.json`` in the memory root) that is
loaded lazily, cached for the lifetime of the store, and rewritten in full
after every mutation.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Iterable

from memdex.memory.document import now_iso, parse_document
from memdex.memory.graph import render_graph
from memdex.memory.keywords import MAX_KEYWORDS, count_words, extract_keywords
from memdex.memory.models import (
    IndexEntry,
    IndexFormatError,
    MemoryIndex,
    RelatedResult,
    SearchResult,
    as_list,
    optional_str,
)
from memdex.memory.paths import normalize_entry_path, resolve_project_dir
from memdex.memory.reindex import collect_documents
from memdex.memory.relations import update_relationships
from memdex.memory.search import find_related, search_index

if TYPE_CHECKING:
    from memdex.config import MemdexConfig

logger = logging.getLogger(__name__)

INDEX_FILENAME = ".index.json"


class IndexStore:
    """Load, mutate and persist memory indexes, one per project."""

    def __init__(
        self,
        base_dir: Path,
        *,
        index_filename: str = INDEX_FILENAME,
        extensions: Iterable[str] = (".md",),
        max_keywords: int = MAX_KEYWORDS,
        prune_stale: bool = True,
        resolver: Callable[[str], Path] | None = None,
    ) -> None:
        self.base_dir = base_dir
        self.index_filename = index_filename
        self.extensions = tuple(extensions)
        self.max_keywords = max_keywords
        self.prune_stale = prune_stale
        self._resolver = resolver or (lambda project: resolve_project_dir(self.base_dir, project))
        self._indexes: dict[str, MemoryIndex] = {}

    @classmethod
    def from_config(cls, config: MemdexConfig) -> IndexStore:
        return cls(
            config.memory_dir,
            index_filename=config.index.index_filename,
            extensions=config.index.extensions,
            max_keywords=config.index.max_keywords,
            prune_stale=config.index.prune_stale,
        )

    # ── Paths ─────────────────────────────────────────────────

    def memory_root(self, project: str = "") -> Path:
        """Directory holding ``project``'s memory documents."""
        return self._resolver(project)

    def index_path(self, project: str = "") -> Path:
        return self.memory_root(project) / self.index_filename

    # ── Load / save ───────────────────────────────────────────

    def get_index(self, project: str = "") -> MemoryIndex:
        """Return the project's index, loading or creating it on first use."""
        index = self._indexes.get(project)
        if index is not None:
            return index

        index = self._load(project)
        if index is None:
            logger.info("Creating new index for %s", project or "(default)")
            index = MemoryIndex(project_path=project)
            self._indexes[project] = index
            self._save(project)
        else:
            self._indexes[project] = index
        return index

    def _load(self, project: str) -> MemoryIndex | None:
        path = self.index_path(project)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Unreadable index %s, starting fresh: %s", path, e)
            return None

        try:
            index = MemoryIndex.from_dict(data)
        except IndexFormatError as e:
            logger.warning("Malformed index %s, starting fresh: %s", path, e)
            return None
        logger.info("Loaded index for %s with %d entries", project or "(default)", len(index.entries))
        return index

    def _save(self, project: str) -> str | None:
        """Atomically rewrite the project's index document.

        Returns an error description on failure, None on success.
        """
        index = self._indexes[project]
        path = self.index_path(project)
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f"{self.index_filename}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(index.to_dict(), f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except OSError as e:
            logger.error("Error saving index %s: %s", path, e)
            if tmp_name:
                Path(tmp_name).unlink(missing_ok=True)
            return str(e)
        logger.debug("Saved index to %s", path)
        return None

    # ── Indexing ──────────────────────────────────────────────

    def index_file(
        self, project: str, path: str, metadata: dict[str, Any], content: str
    ) -> str:
        """Add or refresh one document in the project's index."""
        index = self.get_index(project)
        key = normalize_entry_path(path)
        previous = index.entries.get(key)

        tags = as_list(metadata.get("tags"))
        ts = now_iso()
        if previous is not None:
            created, updated = previous.created, previous.updated
        else:
            created = updated = ts
        entry = IndexEntry(
            path=key,
            title=str(metadata.get("title") or Path(key).stem),
            summary=optional_str(metadata.get("summary")),
            tags=tags,
            importance=optional_str(metadata.get("importance")),
            created=str(metadata.get("created") or created),
            updated=str(metadata.get("updated") or updated),
            source=optional_str(metadata.get("source")),
            related=_declared_related(metadata, key),
            keywords=extract_keywords(content, tags, self.max_keywords),
            word_count=count_words(content),
            access_count=previous.access_count if previous else 0,
            last_accessed=previous.last_accessed if previous else None,
        )

        if previous is not None and self.prune_stale:
            _unlink_terms(index.tag_index, previous.tags, set(entry.tags), key)
            _unlink_terms(index.keyword_index, previous.keywords, set(entry.keywords), key)

        index.entries[key] = entry
        _link_terms(index.tag_index, entry.tags, key)
        _link_terms(index.keyword_index, entry.keywords, key)
        update_relationships(index, key, entry.related)
        index.touch()

        error = self._save(project)
        logger.info("Indexed file %s", key)
        if error:
            return f"Indexed {key}, but failed to save index: {error}"
        return f"Indexed {key}"

    def record_access(self, project: str, path: str) -> None:
        """Bump the access statistics of an indexed file."""
        index = self.get_index(project)
        entry = index.entries.get(normalize_entry_path(path))
        if entry is None:
            return
        entry.access_count += 1
        entry.last_accessed = now_iso()
        index.touch()
        self._save(project)

    def reindex_all(self, project: str = "") -> str:
        """Rebuild the project's index from the files on disk."""
        root = self.memory_root(project)
        self._indexes[project] = MemoryIndex(project_path=project)
        error = self._save(project)
        if error:
            return f"Error reindexing memory files: {error}"

        files = collect_documents(root, self.extensions) if root.is_dir() else []
        logger.info("Found %d memory files to index", len(files))

        indexed = 0
        for file in files:
            rel = file.relative_to(root).as_posix()
            try:
                metadata, body = parse_document(file.read_text(encoding="utf-8"))
                self.index_file(project, rel, metadata, body)
                indexed += 1
            except (OSError, UnicodeDecodeError, ValueError) as e:
                logger.error("Error indexing file %s: %s", file, e)
        return f"{indexed} of {len(files)} files reindexed"

    # ── Queries ───────────────────────────────────────────────

    def search(self, project: str, query: str) -> list[SearchResult]:
        return search_index(self.get_index(project), query)

    def related(self, project: str, path: str) -> list[RelatedResult]:
        return find_related(self.get_index(project), path)

    def render_graph(self, project: str = "") -> str:
        return render_graph(self.get_index(project))


def _declared_related(metadata: dict[str, Any], key: str) -> list[str]:
    related = (normalize_entry_path(r) for r in as_list(metadata.get("related")))
    return [r for r in dict.fromkeys(related) if r and r != key]


def _link_terms(inverted: dict[str, list[str]], terms: list[str], path: str) -> None:
    for term in terms:
        paths = inverted.setdefault(term, [])
        if path not in paths:
            paths.append(path)


def _unlink_terms(
    inverted: dict[str, list[str]], old: list[str], keep: set[str], path: str
) -> None:
    for term in old:
        if term in keep:
            continue
        paths = inverted.get(term)
        if paths and path in paths:
            paths.remove(path)
            if not paths:
                del inverted[term]
