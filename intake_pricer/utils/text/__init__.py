"""Text utilities.

Public API is kept flat while implementation is organized under:
- core/
- matching/
- utils/
"""

from .core import (
    contains_all_tokens,
    escape_regex,
    normalize,
    normalize_for_search,
    title_case,
    tokenize,
)
from .matching import (
    Brand,
    DeviceSignature,
    Tier,
    build_display_name,
    clean_description,
    extract_signature,
    fuzzy_score,
    infer_brand,
    levenshtein,
    name_similarity,
    string_similarity,
)
from .utils import parse_cents, to_cents

__all__ = [
    # core
    "contains_all_tokens",
    "escape_regex",
    "normalize",
    "normalize_for_search",
    "title_case",
    "tokenize",
    # similarity
    "fuzzy_score",
    "levenshtein",
    "name_similarity",
    "string_similarity",
    # signatures
    "Brand",
    "DeviceSignature",
    "Tier",
    "build_display_name",
    "clean_description",
    "extract_signature",
    "infer_brand",
    # prices
    "parse_cents",
    "to_cents",
]
