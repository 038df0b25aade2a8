"""Bidirectional relationship graph maintenance."""

from __future__ import annotations

from memdex.memory.models import MemoryIndex
from memdex.memory.paths import normalize_entry_path


def _add(items: list[str], value: str) -> bool:
    if value in items:
        return False
    items.append(value)
    return True


def update_relationships(index: MemoryIndex, path: str, related: list[str]) -> None:
    """Link ``path`` to each of ``related`` in both directions.

    Targets need not be indexed yet: their graph node is created empty and
    picks up the back-link, and their entry (once it exists) lists ``path``.
    """
    graph = index.relationship_graph
    links = graph.setdefault(path, [])

    for rel in related:
        rel = normalize_entry_path(rel)
        if not rel or rel == path:
            continue
        _add(links, rel)
        _add(graph.setdefault(rel, []), path)
        target = index.entries.get(rel)
        if target is not None:
            _add(target.related, path)

    # Back-links declared by files indexed before this one.
    entry = index.entries.get(path)
    if entry is not None:
        for rel in links:
            _add(entry.related, rel)


def is_symmetric(index: MemoryIndex) -> bool:
    graph = index.relationship_graph
    return all(p in graph.get(q, []) for p, targets in graph.items() for q in targets)
