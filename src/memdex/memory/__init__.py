"""Memory index — search, relationships and graph over markdown knowledge files.

Layout:
    ~/.config/memdex/<project>/
    ├── .index.json                    # Derived index (rewritten on every mutation)
    ├── README.md
    ├── codebase/                      # Code structure and architecture
    ├── insights/                      # Key insights
    ├── technical/                     # Implementation notes
    ├── business/                      # Business context
    └── preferences/                   # User preferences

Documents may open with a ``---`` header of ``key: value`` lines
(title, summary, tags, importance, related, ...).
"""

from memdex.memory.document import parse_document, render_document
from memdex.memory.models import IndexEntry, MemoryIndex, RelatedResult, SearchResult
from memdex.memory.store import IndexStore

__all__ = [
    "IndexEntry",
    "IndexStore",
    "MemoryIndex",
    "RelatedResult",
    "SearchResult",
    "parse_document",
    "render_document",
]
