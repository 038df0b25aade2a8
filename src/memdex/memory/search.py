"""Relevance-ranked search and related-file lookup over a memory index."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from memdex.memory.models import IndexEntry, MemoryIndex, RelatedResult, SearchResult
from memdex.memory.paths import normalize_entry_path

logger = logging.getLogger(__name__)

TITLE_WEIGHT = 10
SUMMARY_WEIGHT = 5
TAG_WEIGHT = 8
KEYWORD_WEIGHT = 3
PATH_WEIGHT = 2

RECENT_ACCESS_WINDOW = timedelta(days=7)
RECENT_ACCESS_BOOST = 1
MAX_ACCESS_BOOST = 2
HIGH_IMPORTANCE_BOOST = 2

DIRECT_RELEVANCE = 10
SHARED_TAG_RELEVANCE = 2
SHARED_KEYWORD_RELEVANCE = 1


def _parse_timestamp(value: str) -> datetime | None:
    try:
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable timestamp: %s", value)
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def score_entry(entry: IndexEntry, terms: list[str], now: datetime) -> float:
    """Additive relevance of ``entry`` for the lower-cased query ``terms``."""
    score: float = 0
    title = entry.title.lower()
    summary = entry.summary.lower() if entry.summary else None
    tags = [t.lower() for t in entry.tags]
    keywords = [k.lower() for k in entry.keywords]
    path = entry.path.lower()

    for term in terms:
        if term in title:
            score += TITLE_WEIGHT
        if summary is not None and term in summary:
            score += SUMMARY_WEIGHT
        score += TAG_WEIGHT * sum(1 for t in tags if term in t)
        score += KEYWORD_WEIGHT * sum(1 for k in keywords if term in k)
        if term in path:
            score += PATH_WEIGHT

    if entry.last_accessed:
        accessed = _parse_timestamp(entry.last_accessed)
        if accessed is not None and now - accessed < RECENT_ACCESS_WINDOW:
            score += RECENT_ACCESS_BOOST
    if entry.access_count > 0:
        score += min(entry.access_count / 5, MAX_ACCESS_BOOST)
    if entry.importance == "high":
        score += HIGH_IMPORTANCE_BOOST
    return score


def search_index(
    index: MemoryIndex, query: str, now: datetime | None = None
) -> list[SearchResult]:
    """Rank index entries against a free-text query, best first."""
    terms = query.lower().split()
    if not terms:
        return []
    now = now or datetime.now(timezone.utc)

    results = []
    for entry in index.entries.values():
        score = score_entry(entry, terms, now)
        if score > 0:
            results.append(SearchResult(entry=entry, score=score))
    results.sort(key=lambda r: r.score, reverse=True)
    return results


def find_related(index: MemoryIndex, path: str) -> list[RelatedResult]:
    """Files related to ``path``: graph links first, then shared tags/keywords."""
    path = normalize_entry_path(path)
    current = index.entries.get(path)
    if current is None:
        return []

    direct = index.relationship_graph.get(path, [])
    results: dict[str, RelatedResult] = {}
    for rel in direct:
        entry = index.entries.get(rel)
        if entry is not None:
            results[rel] = RelatedResult(entry=entry, relevance=DIRECT_RELEVANCE)

    excluded = set(direct) | {path}

    def _accumulate(inverted: dict[str, list[str]], terms: list[str], weight: int) -> None:
        for term in terms:
            for match in inverted.get(term, []):
                if match in excluded:
                    continue
                entry = index.entries.get(match)
                if entry is None:
                    continue
                if match in results:
                    results[match].relevance += weight
                else:
                    results[match] = RelatedResult(entry=entry, relevance=weight)

    _accumulate(index.tag_index, current.tags, SHARED_TAG_RELEVANCE)
    _accumulate(index.keyword_index, current.keywords, SHARED_KEYWORD_RELEVANCE)

    return sorted(results.values(), key=lambda r: r.relevance, reverse=True)
