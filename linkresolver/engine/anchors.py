"""Anchor phrase discovery inside the source content."""

from __future__ import annotations

import re
from typing import List, Optional

from .text import STOPWORDS, slug_words

MAX_PHRASE_WORDS = 4
MIN_PHRASE_WORDS = 2
MIN_SINGLE_KEYWORD_LENGTH = 4

# Slug words are ASCII, so only ASCII case folding is allowed when matching.
_MATCH_FLAGS = re.IGNORECASE | re.ASCII

# Neighbouring words are whole whitespace-delimited words one space away.
_FOLLOWING_WORD_RE = re.compile(r" (\S+)")
_PRECEDING_WORD_RE = re.compile(r"(?<!\S)(\S+) \Z")
_WORD_CHARS_RE = re.compile(r"\S*")

_TRAILING_PUNCTUATION = ".,;:!?)]}\"'"
_LEADING_PUNCTUATION = "([{\"'"


def find_anchor_text(url: str, content: str) -> Optional[str]:
    """Return a phrase from ``content`` that describes the URL's topic.

    Consecutive slug words are tried first, longest phrase first. When no
    multi-word phrase occurs, the first meaningful slug word found in the
    content is widened to a two-word phrase with its neighbour. The return
    value is always a slice of ``content`` with its original casing.
    """

    if not content:
        return None
    words = slug_words(url)
    if not words:
        return None

    phrase = _match_slug_phrase(words, content)
    if phrase is not None:
        return phrase
    return _match_single_keyword(words, content)


def _match_slug_phrase(words: List[str], content: str) -> Optional[str]:
    for length in range(min(MAX_PHRASE_WORDS, len(words)), MIN_PHRASE_WORDS - 1, -1):
        for start in range(len(words) - length + 1):
            phrase = " ".join(words[start : start + length])
            match = re.search(re.escape(phrase), content, _MATCH_FLAGS)
            if match:
                return match.group(0)
    return None


def _match_single_keyword(words: List[str], content: str) -> Optional[str]:
    for keyword in words:
        if len(keyword) < MIN_SINGLE_KEYWORD_LENGTH or keyword in STOPWORDS:
            continue
        match = re.search(re.escape(keyword), content, _MATCH_FLAGS)
        if not match:
            continue
        return _widen_to_two_words(content, match.start(), match.end())
    return None


def _widen_to_two_words(content: str, start: int, end: int) -> str:
    word_start = _word_start(content, start)
    word_end = _WORD_CHARS_RE.match(content, end).end()
    word = content[word_start:word_end]
    core_start = word_end - len(word.lstrip(_LEADING_PUNCTUATION))
    core_end = word_start + len(word.rstrip(_TRAILING_PUNCTUATION))

    # Punctuation after the keyword's word closes the phrase on that side.
    if core_end == word_end:
        following = _FOLLOWING_WORD_RE.match(content, word_end)
        if following:
            neighbour = following.group(1).rstrip(_TRAILING_PUNCTUATION)
            if _is_word(neighbour):
                return content[core_start : following.start(1) + len(neighbour)]

    # Likewise punctuation before it, or at the end of the preceding word.
    if core_start == word_start:
        preceding = _PRECEDING_WORD_RE.search(content, 0, word_start)
        if preceding:
            raw = preceding.group(1)
            neighbour = raw.lstrip(_LEADING_PUNCTUATION)
            if raw == raw.rstrip(_TRAILING_PUNCTUATION) and _is_word(neighbour):
                return content[preceding.end(1) - len(neighbour) : core_end]

    return content[start:end]


def _word_start(content: str, position: int) -> int:
    while position > 0 and not content[position - 1].isspace():
        position -= 1
    return position


def _is_word(text: str) -> bool:
    return any(char.isalnum() for char in text)
