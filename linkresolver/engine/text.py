"""Shared text utilities: URL slug parsing and stop words."""

from __future__ import annotations

import re
from typing import List
from urllib.parse import urlparse

# Common function words that carry no topic signal in a slug.
STOPWORDS = frozenset(
    {
        "the", "and", "for", "with", "that", "this", "from", "are", "was",
        "has", "have", "its", "but", "not", "you", "all", "can", "her",
        "one", "our", "out", "day", "get", "how", "new", "now", "old",
        "see", "two", "way", "who", "boy", "did", "she", "too", "use",
    }
)

_SLUG_SPLIT_RE = re.compile(r"[-/]")
_ALPHA_RE = re.compile(r"^[a-z]+$")


def url_path(url: str) -> str | None:
    """Return the path of an absolute URL, or ``None`` when it cannot be parsed."""

    try:
        parsed = urlparse(url.strip())
    except (AttributeError, ValueError):
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    return parsed.path


def slug_words(url: str) -> List[str]:
    """Return the alphabetic slug words of ``url`` in path order.

    Words shorter than three characters or containing anything but
    letters are dropped. Stop words and duplicates are kept.
    """

    path = url_path(url)
    if not path:
        return []
    if path.startswith("/"):
        path = path[1:]
    if path.endswith("/"):
        path = path[:-1]

    words = []
    for part in _SLUG_SPLIT_RE.split(path):
        word = part.lower()
        if len(word) > 2 and _ALPHA_RE.match(word):
            words.append(word)
    return words


def extract_slug_keywords(url: str) -> List[str]:
    """Return de-duplicated topic keywords from the URL slug."""

    keywords: List[str] = []
    seen: set[str] = set()
    for word in slug_words(url):
        if word in STOPWORDS or word in seen:
            continue
        seen.add(word)
        keywords.append(word)
    return keywords
