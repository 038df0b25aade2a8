"""Keyword extraction for the memory index."""

from __future__ import annotations

import re
from collections import Counter

MAX_KEYWORDS = 10

STOP_WORDS = frozenset(
    {
        "the", "and", "for", "with", "this", "that", "from", "have", "has", "been",
        "will", "would", "should", "could", "was", "were", "are", "what", "when",
        "where", "who", "how", "which", "there", "their", "they", "them", "then",
    }
)

_NON_WORD = re.compile(r"[^\w\s]")


def extract_keywords(
    content: str, tags: list[str] | None = None, limit: int = MAX_KEYWORDS
) -> list[str]:
    """Return the most frequent salient terms in ``content``.

    Tokens of four characters or more that are neither stop words nor tags
    are counted; ties keep first-seen order.
    """
    excluded = {str(t).lower() for t in tags or []}
    words = _NON_WORD.sub(" ", content.lower()).split()
    freq = Counter(
        w for w in words if len(w) > 3 and w not in STOP_WORDS and w not in excluded
    )
    return [word for word, _ in freq.most_common(limit)]


def count_words(content: str) -> int:
    return len(content.split())
