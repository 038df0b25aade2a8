"""Memory root layout and path helpers."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

CATEGORY_DIRS = ["codebase", "insights", "technical", "business", "preferences"]

_README = """\
# Memory

Created: {ts}

Knowledge files for this project, indexed by memdex.

## Directory Structure
- codebase/ - Code structure and architecture
- insights/ - Key insights about the project
- technical/ - Technical details and implementation notes
- business/ - Business context and requirements
- preferences/ - User preferences and settings
"""


def normalize_entry_path(path: str) -> str:
    """Index key for ``path``: forward slashes, no leading ``/`` or ``./``."""
    p = str(path).replace("\\", "/")
    while p.startswith("./"):
        p = p[2:]
    return p.lstrip("/")


def sanitize_memory_path(path: str) -> str:
    """Strip anything that could escape the memory root."""
    p = normalize_entry_path(path)
    p = re.sub(r"^[/~]+", "", p)
    p = re.sub(r"(^|/)\.\.(?=/|$)", "", p)
    p = re.sub(r"/{2,}", "/", p)
    return p.strip("/")


def resolve_project_dir(base_dir: Path, project: str) -> Path:
    return base_dir / sanitize_memory_path(project) if project else base_dir


def project_identifier(cwd: Path | None = None, home: Path | None = None) -> str:
    """Derive a project identifier from the working directory.

    Inside the home directory this is the path relative to home, with a
    leading ``Projects/`` dropped; elsewhere it is the directory name.
    """
    cwd = cwd or Path.cwd()
    home = home or Path.home()
    try:
        rel = cwd.relative_to(home)
    except ValueError:
        return cwd.name
    parts = rel.parts
    if len(parts) > 1 and parts[0] in ("Projects", "projects"):
        parts = parts[1:]
    return "/".join(parts) or cwd.name


def ensure_memory_dir(root: Path) -> None:
    """Create the memory root with its standard layout. Idempotent."""
    if root.is_dir():
        return
    logger.info("Creating memory directory: %s", root)
    for d in CATEGORY_DIRS:
        (root / d).mkdir(parents=True, exist_ok=True)
    readme = root / "README.md"
    if not readme.exists():
        readme.write_text(
            _README.format(ts=datetime.now().isoformat(timespec="seconds")),
            encoding="utf-8",
        )
