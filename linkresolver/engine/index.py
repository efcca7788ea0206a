"""Coordinator for tiered link resolution."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from .config import EngineConfig, LivenessOptions, load_config
from .liveness import AiohttpFetcher, Fetcher, batch_check_urls
from .rank import find_best_matching_urls
from .types import CandidateURL, ResolvedLink

logger = logging.getLogger(__name__)


async def resolve_links_async(
    content: str,
    pool: Sequence[str],
    primary_keyword: str,
    config: Optional[EngineConfig] = None,
    fetcher: Optional[Fetcher] = None,
) -> List[ResolvedLink]:
    """Return ranked, verified links for ``content`` drawn from ``pool``.

    Without a ``fetcher`` one :class:`AiohttpFetcher` session is shared by
    every tier of the call.
    """

    engine_config = config or load_config(None)
    if fetcher is None:
        async with AiohttpFetcher() as owned_fetcher:
            return await _resolve(content, list(pool), primary_keyword, engine_config, owned_fetcher)
    return await _resolve(content, list(pool), primary_keyword, engine_config, fetcher)


async def _resolve(
    content: str,
    pool: List[str],
    primary_keyword: str,
    config: EngineConfig,
    fetcher: Fetcher,
) -> List[ResolvedLink]:
    quota = config.limit("min_live_links")
    top_n = config.limit("top_candidates")
    options = config.liveness_options()

    candidates = find_best_matching_urls(content, pool, primary_keyword, top_n)
    if len(candidates) < quota:
        narrow_pool = pool[: config.limit("narrow_pool_size")]
        candidates = find_best_matching_urls(content, narrow_pool, primary_keyword, top_n)

    live = await _live_candidates(candidates, options, fetcher)
    logger.info("Tier 0: %d candidates from %d pool URLs, %d live", len(candidates), len(pool), len(live))

    if len(live) < quota:
        considered = {candidate.url for candidate in candidates}
        remaining = [url for url in pool if url not in considered][: config.limit("widen_pool_size")]
        if remaining:
            extra = find_best_matching_urls(
                content,
                remaining,
                primary_keyword,
                config.limit("widen_top_candidates"),
            )
            extra_live = await _live_candidates(extra, options, fetcher)
            logger.info(
                "Tier 1: %d candidates from %d unchecked URLs, %d live",
                len(extra),
                len(remaining),
                len(extra_live),
            )
            live.extend(extra_live)

    limit = config.limit("max_resolved_links")
    if live:
        return _to_links(live, is_live=True, limit=limit)

    fallback = candidates[: config.limit("terminal_fallback_limit")]
    if fallback:
        logger.warning("No live candidates found; returning %d unverified links", len(fallback))
    return _to_links(fallback, is_live=False, limit=limit)


async def _live_candidates(
    candidates: List[CandidateURL],
    options: LivenessOptions,
    fetcher: Fetcher,
) -> List[CandidateURL]:
    if not candidates:
        return []
    results = await batch_check_urls([candidate.url for candidate in candidates], options, fetcher)
    live_urls = {result.url for result in results if result.is_live}
    return [candidate for candidate in candidates if candidate.url in live_urls]


def _to_links(candidates: Iterable[CandidateURL], *, is_live: bool, limit: int) -> List[ResolvedLink]:
    links: List[ResolvedLink] = []
    seen: set[str] = set()
    for candidate in candidates:
        if len(links) >= limit:
            break
        if candidate.url in seen or not candidate.anchor_text:
            continue
        seen.add(candidate.url)
        links.append(ResolvedLink(anchor_text=candidate.anchor_text, url=candidate.url, is_live=is_live))
    return links
