"""Text normalization helpers used for plain-text content and metadata."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def count_words(text: str) -> int:
    """Count whitespace-separated tokens; empty text has no words."""

    return len(text.split())
