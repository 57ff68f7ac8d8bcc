"""Matching package: similarity scoring and device signatures."""

from .signature import (
    Brand,
    DeviceSignature,
    Tier,
    build_display_name,
    clean_description,
    extract_signature,
    infer_brand,
)
from .similarity import fuzzy_score, levenshtein, name_similarity, string_similarity

__all__ = [
    "Brand",
    "DeviceSignature",
    "Tier",
    "build_display_name",
    "clean_description",
    "extract_signature",
    "infer_brand",
    "fuzzy_score",
    "levenshtein",
    "name_similarity",
    "string_similarity",
]
