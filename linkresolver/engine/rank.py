"""Relevance scoring and ranking of pool URLs."""

from __future__ import annotations

from typing import List, Sequence

from .anchors import find_anchor_text
from .text import extract_slug_keywords, url_path
from .types import CandidateURL

CONTENT_MATCH_POINTS = 3
KEYWORD_MATCH_POINTS = 2
KEYWORD_WORD_POINTS = 2


def score_relevance(keywords: Sequence[str], content: str, primary_keyword: str) -> int:
    """Return an additive relevance score for slug keywords.

    Each keyword found in the content earns 3 points and each keyword found
    in the primary keyword earns 2. Every whitespace-separated word of the
    primary keyword that is itself a slug keyword adds 2 more.
    """

    content_lower = content.lower()
    keyword_lower = primary_keyword.lower()
    score = 0

    for keyword in keywords:
        if keyword in content_lower:
            score += CONTENT_MATCH_POINTS
        if keyword in keyword_lower:
            score += KEYWORD_MATCH_POINTS

    keyword_set = set(keywords)
    for word in keyword_lower.split():
        if word in keyword_set:
            score += KEYWORD_WORD_POINTS

    return score


def find_best_matching_urls(
    content: str,
    urls: Sequence[str],
    primary_keyword: str,
    top_n: int = 30,
) -> List[CandidateURL]:
    """Return up to ``top_n`` relevant URLs that have an anchor in the content."""

    scored: List[CandidateURL] = []
    for url in urls:
        keywords = extract_slug_keywords(url)
        score = score_relevance(keywords, content, primary_keyword)
        if score <= 0:
            continue
        anchor_text = find_anchor_text(url, content)
        if anchor_text is None:
            continue
        scored.append(
            CandidateURL(
                url=url,
                slug=url_path(url) or "",
                keywords=tuple(keywords),
                anchor_text=anchor_text,
                relevance_score=score,
            )
        )

    # sort() is stable, so equal scores keep pool order.
    scored.sort(key=lambda candidate: candidate.relevance_score, reverse=True)
    return scored[: max(top_n, 0)]
