"""Tokenization utilities for matching."""

from __future__ import annotations

import re
from typing import Optional

from .cleaning import normalize_for_search


_SPLIT_RE = re.compile(r"[\W_]+")


def tokenize(text: Optional[str]) -> list[str]:
    """Split search-normalized text on non-alphanumeric runs.

    Order is kept and empty tokens are dropped.
    """
    if not text:
        return []
    return [t for t in _SPLIT_RE.split(normalize_for_search(text)) if t]


def contains_all_tokens(needle: Optional[str], haystack: Optional[str]) -> bool:
    """True when every token of ``needle`` occurs inside ``haystack``."""
    hay = normalize_for_search(haystack)
    return all(token in hay for token in tokenize(needle))
