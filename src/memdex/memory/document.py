"""Frontmatter parsing for memory documents.

Memory files carry a flat ``key: value`` header between ``---`` lines.
Values wrapped in ``[...]`` are comma-separated lists; everything else is
kept as a plain string. Parsing never raises; anything unreadable falls
back to default metadata.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any

import frontmatter
from frontmatter.default_handlers import BaseHandler

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def default_metadata() -> dict[str, Any]:
    ts = now_iso()
    return {"title": DEFAULT_TITLE, "created": ts, "updated": ts, "tags": []}


class KeyValueHandler(BaseHandler):
    """python-frontmatter handler for flat ``key: value`` headers."""

    FM_BOUNDARY = re.compile(r"^-{3}\s*$", re.MULTILINE)
    START_DELIMITER = END_DELIMITER = "---"

    def load(self, fm: str, **kwargs: Any) -> dict[str, Any]:
        metadata: dict[str, Any] = {}
        for line in fm.strip().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            key, sep, value = line.partition(":")
            key = key.strip()
            if not sep or not key:
                continue
            value = value.strip()
            if value.startswith("[") and value.endswith("]"):
                metadata[key] = [v.strip() for v in value[1:-1].split(",") if v.strip()]
            else:
                metadata[key] = value
        return metadata

    def export(self, metadata: dict[str, Any], **kwargs: Any) -> str:
        lines = []
        for key, value in metadata.items():
            if value is None:
                continue
            if isinstance(value, (list, tuple, set)):
                lines.append(f"{key}: [{', '.join(str(v) for v in value)}]")
            else:
                lines.append(f"{key}: {value}")
        return "\n".join(lines)


_HANDLER = KeyValueHandler()


def parse_document(text: str) -> tuple[dict[str, Any], str]:
    """Split ``text`` into (metadata, body).

    Text without an opening ``---`` line, or whose header never closes, comes
    back untouched as the body with default metadata.
    """
    if not _HANDLER.detect(text):
        return default_metadata(), text

    try:
        fm, body = _HANDLER.split(text)
    except ValueError:
        logger.warning("Unclosed frontmatter block, using default metadata")
        return default_metadata(), text

    try:
        parsed = _HANDLER.load(fm)
    except Exception as e:
        logger.warning("Failed to parse frontmatter: %s", e)
        return default_metadata(), text

    metadata = default_metadata()
    metadata.update(parsed)
    return metadata, body.strip()


def render_document(metadata: dict[str, Any], body: str) -> str:
    """Serialize metadata and body back into a memory document."""
    post = frontmatter.Post(body, handler=_HANDLER)
    post.metadata.update(metadata)
    return frontmatter.dumps(post, handler=_HANDLER) + "\n"
