"""Configuration loading from environment variables and memdex.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_DEFAULT_MEMORY_DIR = Path.home() / ".config" / "memdex"
_CONFIG_FILENAME = "memdex.toml"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class IndexConfig:
    """Memory index settings."""

    index_filename: str = ".index.json"
    extensions: list[str] = field(default_factory=lambda: [".md"])
    max_keywords: int = 10
    prune_stale: bool = True


@dataclass
class MemdexConfig:
    """Top-level memdex configuration."""

    memory_dir: Path = _DEFAULT_MEMORY_DIR
    project: str = ""
    index: IndexConfig = field(default_factory=IndexConfig)
    log_level: str = "INFO"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def load_config(config_path: Path | None = None) -> MemdexConfig:
    """Load configuration from environment variables and optional memdex.toml.

    Priority: environment variables > memdex.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.config/memdex/
        for candidate in [Path.cwd() / _CONFIG_FILENAME, _DEFAULT_MEMORY_DIR / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    index_data = file_data.get("index", {})

    config = MemdexConfig(
        memory_dir=Path(
            os.getenv("MEMDEX_MEMORY_DIR", file_data.get("memory_dir", str(_DEFAULT_MEMORY_DIR)))
        ).expanduser(),
        project=os.getenv("MEMDEX_PROJECT", file_data.get("project", "")),
        index=IndexConfig(
            index_filename=index_data.get("index_filename", ".index.json"),
            extensions=list(index_data.get("extensions", [".md"])),
            max_keywords=int(index_data.get("max_keywords", 10)),
            prune_stale=_env_bool("MEMDEX_PRUNE_STALE", bool(index_data.get("prune_stale", True))),
        ),
        log_level=os.getenv("MEMDEX_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
    return config
