"""Directory walk for full-corpus reindexing."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)


def collect_documents(root: Path, extensions: Iterable[str] = (".md",)) -> list[Path]:
    """List memory documents under ``root`` in sorted, depth-first order.

    Hidden files and directories (leading ``.``) are skipped, which also
    keeps the index document itself out of the walk. Symlinked
    directories are not followed.
    """
    suffixes = {e.lower() for e in extensions}
    files: list[Path] = []
    stack = [root]
    while stack:
        current = stack.pop()
        try:
            children = sorted(current.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.error("Error scanning directory %s: %s", current, e)
            continue

        subdirs = []
        for child in children:
            if child.name.startswith("."):
                continue
            if child.is_dir():
                # symlinked directories can loop back into the tree
                if not child.is_symlink():
                    subdirs.append(child)
            elif child.suffix.lower() in suffixes:
                files.append(child)
        stack.extend(reversed(subdirs))
    return files
