"""Agent-facing memory tools.

These functions are designed to be exposed as tools to an AI agent, letting
it write, browse and query its memory files. Every tool returns a string;
failures come back as ``Error ...`` messages instead of exceptions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from memdex.memory.document import parse_document
from memdex.memory.paths import CATEGORY_DIRS, ensure_memory_dir, sanitize_memory_path
from memdex.memory.reindex import collect_documents

if TYPE_CHECKING:
    from memdex.memory.models import IndexEntry
    from memdex.memory.store import IndexStore

logger = logging.getLogger(__name__)

TOP_TAGS = 10
FILES_PER_TAG = 5
RECENT_FILES = 10


def _format_directory(label: str, entries: list[IndexEntry]) -> str:
    lines = [f"# Memory Contents in {label}", ""]

    tag_groups: dict[str, list[IndexEntry]] = {}
    for entry in entries:
        for tag in entry.tags:
            tag_groups.setdefault(tag, []).append(entry)

    if tag_groups:
        lines += ["## Files By Tag", ""]
        top = sorted(tag_groups.items(), key=lambda kv: len(kv[1]), reverse=True)[:TOP_TAGS]
        for tag, tagged in top:
            lines.append(f"### {tag} ({len(tagged)} files)")
            for entry in tagged[:FILES_PER_TAG]:
                lines.append(f"- **{entry.title}** ({entry.path}) - {entry.summary or 'No summary'}")
            if len(tagged) > FILES_PER_TAG:
                lines.append(f"- ... and {len(tagged) - FILES_PER_TAG} more files")
            lines.append("")

    lines += ["## Recently Updated Files", ""]
    recent = sorted(entries, key=lambda e: e.updated, reverse=True)[:RECENT_FILES]
    for entry in recent:
        lines.append(f"- **{entry.title}** ({entry.path}) - Updated {entry.updated[:10]}")

    lines += ["", "## All Files in Directory", ""]
    for entry in entries:
        lines.append(f"- **{entry.title}** ({entry.path})")
    return "\n".join(lines) + "\n"


def get_memory_tools(store: IndexStore, project: str = "") -> dict[str, Callable[..., str]]:
    """Return a dict of tool_name -> callable for memory operations.

    These can be registered as MCP tools or called directly.
    """

    def read_memory(path: str = "") -> str:
        """List a memory directory (via the index) or read a memory file."""
        root = store.memory_root(project)
        rel = sanitize_memory_path(path)

        if not rel and not root.is_dir():
            try:
                ensure_memory_dir(root)
            except OSError as e:
                logger.error("Error initializing memory: %s", e)
                return f"Error initializing memory system: {e}"
            store.reindex_all(project)
            return (
                f"Initialized memory for {project or 'this project'} with directories: "
                + ", ".join(f"{d}/" for d in CATEGORY_DIRS)
            )

        target = root / rel
        if not target.exists():
            return (
                f'No memory found at "{path}". Available directories are: '
                + ", ".join(CATEGORY_DIRS)
            )

        if target.is_file():
            try:
                content = target.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.error("Error reading memory file %s: %s", target, e)
                return f"Error reading memory file: {e}"
            store.record_access(project, rel)
            return content

        index = store.get_index(project)
        prefix = f"{rel}/" if rel else ""
        entries = [e for p, e in index.entries.items() if p.startswith(prefix)]
        entries.sort(key=lambda e: e.updated, reverse=True)
        entries.sort(key=lambda e: e.access_count, reverse=True)
        if entries:
            return _format_directory(rel or "root memory directory", entries)

        files = [f.relative_to(root).as_posix() for f in collect_documents(target, store.extensions)]
        if not files:
            return "No memory files found"
        return f"Memory contents in {rel or 'root memory directory'}:\n\n" + "\n".join(files)

    def write_memory(path: str, content: str) -> str:
        """Write a memory file and index it."""
        rel = sanitize_memory_path(path)
        if not rel:
            return "Error writing memory file: empty path"
        target = store.memory_root(project) / rel
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.error("Error writing memory file %s: %s", target, e)
            return f"Error writing memory file: {e}"

        metadata, body = parse_document(content)
        status = store.index_file(project, rel, metadata, body)
        return f"Wrote {len(content)} chars to memory file {rel}. {status}"

    def search_memory(query: str) -> str:
        """Search memory files by title, summary, tags, keywords and path."""
        results = store.search(project, query)
        if not results:
            return f"No memory files match: {query}"
        lines = [f"# Search results for: {query}", ""]
        for r in results:
            summary = f" - {r.entry.summary}" if r.entry.summary else ""
            lines.append(f"- **{r.entry.title}** ({r.entry.path}) score {r.score:g}{summary}")
        return "\n".join(lines) + "\n"

    def related_memory(path: str) -> str:
        """List memory files related to ``path``."""
        results = store.related(project, path)
        if not results:
            return f"No related memory files for: {path}"
        lines = [f"# Related to {path}", ""]
        for r in results:
            lines.append(f"- **{r.entry.title}** ({r.entry.path}) relevance {r.relevance}")
        return "\n".join(lines) + "\n"

    def reindex_memory() -> str:
        """Rebuild the memory index from the files on disk."""
        return store.reindex_all(project)

    def memory_graph() -> str:
        """Render the memory relationship graph."""
        return store.render_graph(project)

    return {
        "read_memory": read_memory,
        "write_memory": write_memory,
        "search_memory": search_memory,
        "related_memory": related_memory,
        "reindex_memory": reindex_memory,
        "memory_graph": memory_graph,
    }
