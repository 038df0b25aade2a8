"""Index data model and its JSON document shape."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from memdex.memory.document import now_iso

INDEX_FORMAT = "1.0"


class IndexFormatError(ValueError):
    """The persisted index document does not have the expected shape."""


def as_list(value: Any) -> list[str]:
    if value is None or value == "":
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


@dataclass
class IndexEntry:
    """One indexed memory file."""

    path: str
    title: str
    created: str
    updated: str
    tags: list[str] = field(default_factory=list)
    summary: str | None = None
    importance: str | None = None
    source: str | None = None
    related: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    word_count: int = 0
    access_count: int = 0
    last_accessed: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "title": self.title,
            "summary": self.summary,
            "tags": list(self.tags),
            "importance": self.importance,
            "created": self.created,
            "updated": self.updated,
            "source": self.source,
            "related": list(self.related),
            "keywords": list(self.keywords),
            "wordCount": self.word_count,
            "accessCount": self.access_count,
            "lastAccessed": self.last_accessed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IndexEntry:
        return cls(
            path=str(data["path"]),
            title=str(data.get("title") or ""),
            created=str(data.get("created") or ""),
            updated=str(data.get("updated") or ""),
            tags=as_list(data.get("tags")),
            summary=optional_str(data.get("summary")),
            importance=optional_str(data.get("importance")),
            source=optional_str(data.get("source")),
            related=as_list(data.get("related")),
            keywords=as_list(data.get("keywords")),
            word_count=_as_int(data.get("wordCount")),
            access_count=_as_int(data.get("accessCount")),
            last_accessed=optional_str(data.get("lastAccessed")),
        )


@dataclass
class MemoryIndex:
    """Per-project index: entries, inverted indexes and relationship graph.

    The path lists in ``tag_index``, ``keyword_index`` and
    ``relationship_graph`` hold no duplicates and keep insertion order.
    """

    project_path: str
    last_updated: str = field(default_factory=now_iso)
    version: int = 0
    entries: dict[str, IndexEntry] = field(default_factory=dict)
    tag_index: dict[str, list[str]] = field(default_factory=dict)
    keyword_index: dict[str, list[str]] = field(default_factory=dict)
    relationship_graph: dict[str, list[str]] = field(default_factory=dict)

    def touch(self) -> None:
        """Mark the index as mutated."""
        self.version += 1
        self.last_updated = now_iso()

    def to_dict(self) -> dict[str, Any]:
        return {
            "projectPath": self.project_path,
            "lastUpdated": self.last_updated,
            "version": self.version,
            "format": INDEX_FORMAT,
            "entries": {p: e.to_dict() for p, e in self.entries.items()},
            "tagIndex": {k: list(v) for k, v in self.tag_index.items()},
            "keywordIndex": {k: list(v) for k, v in self.keyword_index.items()},
            "relationshipGraph": {k: list(v) for k, v in self.relationship_graph.items()},
        }

    @classmethod
    def from_dict(cls, data: Any) -> MemoryIndex:
        if not isinstance(data, dict):
            raise IndexFormatError(f"expected an object, got {type(data).__name__}")
        try:
            entries = {str(p): IndexEntry.from_dict(e) for p, e in data["entries"].items()}
            return cls(
                project_path=str(data.get("projectPath", "")),
                last_updated=str(data.get("lastUpdated") or now_iso()),
                version=_as_int(data.get("version")),
                entries=entries,
                tag_index={k: as_list(v) for k, v in data.get("tagIndex", {}).items()},
                keyword_index={
                    k: as_list(v) for k, v in data.get("keywordIndex", {}).items()
                },
                relationship_graph={
                    k: as_list(v) for k, v in data.get("relationshipGraph", {}).items()
                },
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise IndexFormatError(str(e)) from e


@dataclass
class SearchResult:
    entry: IndexEntry
    score: float


@dataclass
class RelatedResult:
    entry: IndexEntry
    relevance: int
