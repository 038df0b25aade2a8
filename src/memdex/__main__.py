"""Entry point: python -m memdex <command>

- reindex:          Rebuild the index from the memory files on disk
- search <query>:   Relevance-ranked search
- related <path>:   Files related to a memory file
- graph:            Relationship graph grouped by directory
"""

from __future__ import annotations

import argparse
import logging
import sys

from memdex.config import load_config


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="memdex", description="Markdown memory index")
    parser.add_argument("--project", default=None, help="Project identifier (default: from config/cwd)")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("reindex", help="Rebuild the index from disk")
    search = sub.add_parser("search", help="Search memory files")
    search.add_argument("query", nargs="+")
    related = sub.add_parser("related", help="Files related to a memory file")
    related.add_argument("path")
    sub.add_parser("graph", help="Render the relationship graph")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    config = load_config()
    _setup_logging(config.log_level)

    from memdex.memory.paths import project_identifier
    from memdex.memory.store import IndexStore
    from memdex.tools.memory_tools import get_memory_tools

    project = args.project if args.project is not None else (config.project or project_identifier())
    tools = get_memory_tools(IndexStore.from_config(config), project)

    if args.command == "reindex":
        output = tools["reindex_memory"]()
    elif args.command == "search":
        output = tools["search_memory"](" ".join(args.query))
    elif args.command == "related":
        output = tools["related_memory"](args.path)
    else:
        output = tools["memory_graph"]()

    print(output.rstrip())
    return 0


if __name__ == "__main__":
    sys.exit(main())
