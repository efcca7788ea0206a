"""Entry points used by the HTTP layer and other callers.

These functions wrap the asynchronous engine in synchronous calls, load
configuration from :mod:`linkresolver.settings` when none is given, and
provide the small input and output guards that sit around link
resolution: preparing a bulk health-check batch and validating links
proposed by an outside source against the content.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from . import settings
from .engine.config import EngineConfig, LivenessOptions, load_config
from .engine.index import resolve_links_async
from .engine.liveness import Fetcher, batch_check_urls
from .engine.types import LivenessResult, ResolvedLink

logger = logging.getLogger(__name__)


class URLBatchError(ValueError):
    """Raised when a bulk health-check request cannot be processed."""


def get_config(config: Optional[EngineConfig] = None) -> EngineConfig:
    """Return ``config`` or the configuration named by ``LINKRESOLVER_CONFIG``."""

    return config or load_config(settings.CONFIG_PATH)


def resolve_links(
    content: str,
    pool: Sequence[str],
    primary_keyword: str,
    *,
    config: Optional[EngineConfig] = None,
    fetcher: Optional[Fetcher] = None,
) -> List[ResolvedLink]:
    """Resolve anchor/URL pairs for ``content`` from the candidate ``pool``.

    Parameters
    ----------
    content:
        The text links will be placed in.
    pool:
        Candidate destination URLs in caller order.
    primary_keyword:
        Target keyword used to boost matching slugs.
    config:
        Engine configuration; defaults to :func:`get_config`.
    fetcher:
        Optional probe callable, mainly for tests. A fresh ``aiohttp``
        session is used otherwise.

    Returns
    -------
    list of ResolvedLink
        Live links when any were verified, otherwise the best unverified
        candidates with ``is_live`` set to ``False``.
    """

    return asyncio.run(
        resolve_links_async(content, pool, primary_keyword, get_config(config), fetcher)
    )


def check_liveness(
    urls: Sequence[str],
    options: Optional[LivenessOptions] = None,
    *,
    fetcher: Optional[Fetcher] = None,
) -> List[LivenessResult]:
    """Check every URL and return exactly one result per entry."""

    return asyncio.run(batch_check_urls(urls, options or get_config().liveness_options(), fetcher))


def prepare_url_batch(urls: Any, max_urls: int = 100) -> List[str]:
    """Return the usable entries of a bulk health-check request.

    Only strings starting with ``http`` are kept. Raises
    :class:`URLBatchError` for a non-list payload, an empty list, more
    than ``max_urls`` entries, or a list with no usable entry.
    """

    if not isinstance(urls, (list, tuple)):
        raise URLBatchError('Request body must contain a "urls" array')
    if not urls:
        raise URLBatchError('No URLs provided')
    if len(urls) > max_urls:
        raise URLBatchError(f'Maximum {max_urls} URLs allowed per batch request')

    valid = [url for url in urls if isinstance(url, str) and url.startswith('http')]
    if not valid:
        raise URLBatchError('No valid URLs found, they must start with http:// or https://')
    if len(valid) < len(urls):
        logger.info('Dropped %d invalid entries from URL batch', len(urls) - len(valid))
    return valid


def check_url_batch(
    urls: Any,
    *,
    config: Optional[EngineConfig] = None,
    fetcher: Optional[Fetcher] = None,
) -> List[LivenessResult]:
    """Validate a raw bulk health-check payload and check the URLs in it."""

    engine_config = get_config(config)
    valid = prepare_url_batch(urls, engine_config.max_batch_urls())
    return check_liveness(valid, engine_config.liveness_options(), fetcher=fetcher)


def validate_links(
    links: Iterable[Tuple[str, str] | Mapping[str, Any]],
    content: str,
    live_urls: Optional[Iterable[str]] = None,
) -> List[ResolvedLink]:
    """Keep proposed links whose anchor occurs in ``content``.

    ``links`` holds ``(anchor_text, url)`` pairs or mappings with
    ``anchor_text``/``url`` keys. When ``live_urls`` is given, links to
    any other URL are dropped as well; surviving links are marked live
    only in that case.
    """

    content_lower = content.lower()
    allowed = set(live_urls) if live_urls is not None else None
    validated: List[ResolvedLink] = []

    for link in links:
        if isinstance(link, Mapping):
            anchor, url = link.get('anchor_text'), link.get('url')
        else:
            anchor, url = link
        if not isinstance(anchor, str) or not isinstance(url, str):
            continue
        anchor, url = anchor.strip(), url.strip()
        if not anchor or not url:
            continue
        if anchor.lower() not in content_lower:
            logger.debug('Dropping link to %s: anchor %r not in content', url, anchor)
            continue
        if allowed is not None and url not in allowed:
            logger.debug('Dropping link to %s: URL not verified', url)
            continue
        validated.append(ResolvedLink(anchor_text=anchor, url=url, is_live=allowed is not None))

    return validated
