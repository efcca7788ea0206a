"""Configuration helpers for the link resolution engine."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml


class ConfigurationError(ValueError):
    """Raised when engine or liveness settings cannot be used."""


@dataclass(frozen=True)
class LivenessOptions:
    """Per-call settings for the liveness verifier."""

    timeout_ms: int = 5000
    max_concurrent: int = 10
    retries: int = 1
    user_agent: str = "Mozilla/5.0 (compatible; SEOBot/1.0)"

    def __post_init__(self) -> None:
        if self.timeout_ms <= 0:
            raise ConfigurationError(f"timeout_ms must be positive, got {self.timeout_ms}")
        if self.max_concurrent <= 0:
            raise ConfigurationError(f"max_concurrent must be positive, got {self.max_concurrent}")
        if self.retries < 0:
            raise ConfigurationError(f"retries must not be negative, got {self.retries}")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


@dataclass(frozen=True)
class EngineConfig:
    """Typed wrapper around the engine configuration dictionary."""

    raw: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)

    def limit(self, key: str) -> int:
        """Return a non-negative integer setting, falling back to the default."""

        return _non_negative(key, self.get(key, DEFAULTS.get(key)))

    def liveness_options(self) -> LivenessOptions:
        section = dict(DEFAULTS["liveness"])
        section.update(self.get("liveness") or {})
        try:
            timeout_ms = int(section["timeout_ms"])
            max_concurrent = int(section["max_concurrent"])
            retries = int(section["retries"])
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"invalid liveness settings: {exc}") from exc
        return LivenessOptions(
            timeout_ms=timeout_ms,
            max_concurrent=max_concurrent,
            retries=retries,
            user_agent=str(section["user_agent"]),
        )

    def max_batch_urls(self) -> int:
        section = self.get("batch") or {}
        number = _non_negative("batch.max_urls", section.get("max_urls", DEFAULTS["batch"]["max_urls"]))
        if number == 0:
            raise ConfigurationError("batch.max_urls must be positive, got 0")
        return number


def _non_negative(key: str, value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from exc
    if number < 0:
        raise ConfigurationError(f"{key} must not be negative, got {number}")
    return number


DEFAULTS: Dict[str, Any] = {
    "top_candidates": 30,
    "min_live_links": 3,
    "narrow_pool_size": 100,
    "widen_pool_size": 50,
    "widen_top_candidates": 20,
    "terminal_fallback_limit": 15,
    "max_resolved_links": 15,
    "liveness": {
        "timeout_ms": 5000,
        "max_concurrent": 10,
        "retries": 1,
        "user_agent": "Mozilla/5.0 (compatible; SEOBot/1.0)",
    },
    "batch": {
        "max_urls": 100,
    },
}


def load_config(path: str | Path | None = None) -> EngineConfig:
    """Load configuration from YAML, merging with defaults."""

    data: Dict[str, Any] = copy.deepcopy(DEFAULTS)

    if path is not None and Path(path).exists():
        with Path(path).open("r", encoding="utf-8") as stream:
            user = yaml.safe_load(stream) or {}
        if not isinstance(user, dict):
            raise ConfigurationError(f"{path} must contain a mapping at the top level")
        merge_into(data, user)

    return EngineConfig(data)


def merge_into(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge override into base dict."""

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_into(base[key], value)
        else:
            base[key] = value
