"""Typed data structures used by the link resolution pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class CandidateURL:
    """Pool URL that scored as relevant and has an anchor phrase in the content."""

    url: str
    slug: str
    keywords: Tuple[str, ...]
    anchor_text: Optional[str]
    relevance_score: int


@dataclass(frozen=True)
class LivenessResult:
    """Verdict of a single URL probe."""

    url: str
    is_live: bool
    status_code: Optional[int] = None
    error_kind: Optional[str] = None
    detail: Optional[str] = None
    method: Optional[str] = None


@dataclass(frozen=True)
class ResolvedLink:
    """Anchor phrase paired with its destination and liveness flag."""

    anchor_text: str
    url: str
    is_live: bool
