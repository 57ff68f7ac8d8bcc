"""Core text processing (normalization, tokenization)."""

from .cleaning import escape_regex, normalize, normalize_for_search, title_case
from .tokenize import contains_all_tokens, tokenize

__all__ = [
    "escape_regex",
    "normalize",
    "normalize_for_search",
    "title_case",
    "contains_all_tokens",
    "tokenize",
]
