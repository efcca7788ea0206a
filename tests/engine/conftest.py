"""Shared fixtures for engine tests."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Mapping, Tuple

import pytest

from linkresolver.engine.config import load_config

HANG = object()


class ScriptedFetcher:
    """Fake probe that answers from a script instead of the network.

    ``script`` maps a URL to an outcome or a list of outcomes consumed one
    per call (the last one repeats). An outcome is a status code, an
    exception instance to raise, ``HANG`` to never answer, or a dict keyed
    by HTTP method. Unscripted URLs answer ``default``.
    """

    def __init__(self, script: Dict[str, Any] | None = None, *, default: Any = 200, delay: float = 0.0):
        self.script = {url: list(value) if isinstance(value, list) else [value] for url, value in (script or {}).items()}
        self.default = default
        self.delay = delay
        self.calls: List[Tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def calls_for(self, url: str) -> List[str]:
        return [method for method, called in self.calls if called == url]

    async def __call__(self, method: str, url: str, timeout: float, headers: Mapping[str, str]) -> int:
        self.calls.append((method, url))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            outcome = self._next(url)
            if isinstance(outcome, dict):
                outcome = outcome.get(method, self.default)
            if outcome is HANG:
                await asyncio.sleep(3600)
            if isinstance(outcome, BaseException):
                raise outcome
            return outcome
        finally:
            self.in_flight -= 1

    def _next(self, url: str) -> Any:
        outcomes = self.script.get(url)
        if not outcomes:
            return self.default
        if len(outcomes) > 1:
            return outcomes.pop(0)
        return outcomes[0]


@pytest.fixture()
def engine_config():
    """Provide a mutable copy of the default engine configuration."""

    return load_config(None)


@pytest.fixture()
def fetcher_factory():
    """Return the scripted fetcher class so tests can build their own."""

    return ScriptedFetcher


@pytest.fixture()
def hang():
    return HANG
