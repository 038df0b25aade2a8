"""Markdown rendering of the relationship graph."""

from __future__ import annotations

from memdex.memory.models import MemoryIndex

ROOT_GROUP = "other"


def _group_of(path: str) -> str:
    head, sep, _ = path.partition("/")
    return head if sep else ROOT_GROUP


def render_graph(index: MemoryIndex) -> str:
    """Render every linked path, grouped by top-level directory."""
    groups: dict[str, list[str]] = {}
    for path, links in index.relationship_graph.items():
        if links:
            groups.setdefault(_group_of(path), []).append(path)

    order = sorted(g for g in groups if g != ROOT_GROUP)
    if ROOT_GROUP in groups:
        order.append(ROOT_GROUP)

    lines = ["# Memory Relationship Graph", ""]
    for group in order:
        lines.append(f"## {group[:1].upper()}{group[1:]}")
        lines.append("")
        for path in sorted(groups[group]):
            entry = index.entries.get(path)
            lines.append(f"### {entry.title} ({path})" if entry else f"### {path} (missing)")
            for target in index.relationship_graph[path]:
                rel = index.entries.get(target)
                if rel:
                    lines.append(f"- → {rel.title} ({target})")
                else:
                    lines.append(f"- → {target} (missing)")
            lines.append("")

    if not order:
        lines.append("(no relationships recorded)")
    return "\n".join(lines).rstrip() + "\n"
