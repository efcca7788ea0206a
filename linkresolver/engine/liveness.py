"""Bounded, retrying liveness checks for batches of URLs."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Mapping, Optional, Sequence

import aiohttp

from .config import LivenessOptions
from .types import LivenessResult

logger = logging.getLogger(__name__)

TIMEOUT = "Timeout"
PROBE_FAULT = "ProbeFault"

# Statuses a server uses to say it does not accept HEAD.
METHOD_REJECTED_STATUSES = frozenset({405, 501})

Fetcher = Callable[[str, str, float, Mapping[str, str]], Awaitable[int]]
"""Async ``(method, url, timeout_seconds, headers) -> status_code`` callable."""


class AiohttpFetcher:
    """Issue probe requests through a single reusable ``aiohttp`` session.

    Use as an async context manager. A session passed in by the caller is
    reused and left open on exit; otherwise the fetcher opens its own on
    entry and closes it on exit.
    """

    def __init__(self, session: Optional[aiohttp.ClientSession] = None) -> None:
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "AiohttpFetcher":
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def __call__(self, method: str, url: str, timeout: float, headers: Mapping[str, str]) -> int:
        if self._session is None:
            raise RuntimeError("AiohttpFetcher must be entered before use")
        async with self._session.request(
            method,
            url,
            headers=dict(headers),
            allow_redirects=True,
            timeout=aiohttp.ClientTimeout(total=timeout),
        ) as response:
            return response.status


async def check_single_url(url: str, options: LivenessOptions, fetcher: Fetcher) -> LivenessResult:
    """Probe one URL, re-running the whole probe up to ``options.retries`` times.

    Timeouts are final. Any other dead verdict, including an error status,
    is retried.
    """

    headers = {"User-Agent": options.user_agent}
    result = await _probe_with_fallback(url, options, fetcher, headers)

    attempt = 0
    while not result.is_live and result.error_kind != TIMEOUT and attempt < options.retries:
        attempt += 1
        logger.debug("Retrying %s (attempt %d of %d)", url, attempt, options.retries)
        result = await _probe_with_fallback(url, options, fetcher, headers)

    logger.debug(
        "Probe %s -> live=%s status=%s error=%s",
        url,
        result.is_live,
        result.status_code,
        result.error_kind,
    )
    return result


async def batch_check_urls(
    urls: Sequence[str],
    options: Optional[LivenessOptions] = None,
    fetcher: Optional[Fetcher] = None,
) -> List[LivenessResult]:
    """Check ``urls`` in sequential batches of ``options.max_concurrent``.

    Returns one result per input URL, in input order. Without a ``fetcher``
    an :class:`AiohttpFetcher` is opened for the duration of the call.
    """

    check_options = options or LivenessOptions()
    pending = list(urls)
    if not pending:
        return []

    if fetcher is None:
        async with AiohttpFetcher() as owned_fetcher:
            return await _check_in_batches(pending, check_options, owned_fetcher)
    return await _check_in_batches(pending, check_options, fetcher)


async def _check_in_batches(
    urls: List[str],
    options: LivenessOptions,
    fetcher: Fetcher,
) -> List[LivenessResult]:
    results: List[LivenessResult] = []
    size = options.max_concurrent

    for offset in range(0, len(urls), size):
        chunk = urls[offset : offset + size]
        outcomes = await asyncio.gather(
            *(check_single_url(url, options, fetcher) for url in chunk),
            return_exceptions=True,
        )
        for url, outcome in zip(chunk, outcomes):
            if isinstance(outcome, LivenessResult):
                results.append(outcome)
                continue
            if not isinstance(outcome, Exception):
                raise outcome
            logger.warning("Liveness check for %s faulted: %r", url, outcome)
            results.append(
                LivenessResult(
                    url=url,
                    is_live=False,
                    error_kind=PROBE_FAULT,
                    detail=f"{type(outcome).__name__}: {outcome}",
                )
            )

        live = sum(1 for result in results[offset:] if result.is_live)
        logger.info("Checked batch of %d URLs: %d live", len(chunk), live)

    return results


async def _probe_with_fallback(
    url: str,
    options: LivenessOptions,
    fetcher: Fetcher,
    headers: Mapping[str, str],
) -> LivenessResult:
    result = await _probe("HEAD", url, options, fetcher, headers)
    if _method_rejected(result):
        logger.debug("HEAD rejected for %s, falling back to GET", url)
        result = await _probe("GET", url, options, fetcher, headers)
    return result


def _method_rejected(result: LivenessResult) -> bool:
    if result.error_kind == TIMEOUT:
        return False
    if result.error_kind is not None:
        return True
    return result.status_code in METHOD_REJECTED_STATUSES


async def _probe(
    method: str,
    url: str,
    options: LivenessOptions,
    fetcher: Fetcher,
    headers: Mapping[str, str],
) -> LivenessResult:
    timeout = options.timeout_seconds
    try:
        status = await asyncio.wait_for(fetcher(method, url, timeout, headers), timeout)
    except (asyncio.TimeoutError, TimeoutError):
        return LivenessResult(
            url=url,
            is_live=False,
            error_kind=TIMEOUT,
            detail=f"no response within {options.timeout_ms} ms",
            method=method,
        )
    except Exception as exc:
        # Network and protocol faults are reported as data, never raised.
        return LivenessResult(
            url=url,
            is_live=False,
            error_kind=type(exc).__name__,
            detail=str(exc)[:200] or None,
            method=method,
        )

    if status < 400:
        return LivenessResult(url=url, is_live=True, status_code=status, method=method)
    return LivenessResult(
        url=url,
        is_live=False,
        status_code=status,
        detail=f"HTTP {status}",
        method=method,
    )
