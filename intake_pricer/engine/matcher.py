"""Matcher / Scorer

Apple devices have a well-defined signature line, so they go through two
passes:

1. strict: generation and tier must agree (when both sides know them)
   ``0.5 + 0.35 * [storage equal] + 0.15 * name``
2. relaxed, only if strict found nothing: generation must agree
   ``0.3 * name + 0.2 * [tier equal] + 0.2 * [storage equal]``

Every other brand is scored on the label alone:
``0.8 * name + 0.15 * [storage in label] + 0.05 * [carrier in label]``

Ties keep the first-seen row. The matcher never raises.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable, Optional, Sequence

from intake_pricer.catalog.ingestor import CatalogRow
from intake_pricer.core.logging import logger
from intake_pricer.utils.text.core.cleaning import normalize_for_search
from intake_pricer.utils.text.matching.signature import (
    Brand,
    DeviceSignature,
    extract_signature,
)
from intake_pricer.utils.text.matching.similarity import name_similarity

from .result import MatchResult


STRICT_BASE = 0.5
STRICT_STORAGE_WEIGHT = 0.35
STRICT_NAME_WEIGHT = 0.15

RELAXED_NAME_WEIGHT = 0.3
RELAXED_TIER_WEIGHT = 0.2
RELAXED_STORAGE_WEIGHT = 0.2

LABEL_NAME_WEIGHT = 0.8
LABEL_STORAGE_WEIGHT = 0.15
LABEL_CARRIER_WEIGHT = 0.05


@dataclass(frozen=True)
class MatchQuery:
    """What is being priced.

    Attributes:
        label: readable device name compared against catalog labels
        signature: structured signature of the device description
        brand: selects the signature (apple) or label-only scoring path
        carrier_name: resolved carrier, used by label-only scoring
    """

    label: str
    signature: DeviceSignature = field(default_factory=DeviceSignature)
    brand: Brand = Brand.OTHER
    carrier_name: Optional[str] = None


@lru_cache(maxsize=4096)
def row_signature(device_label: str) -> DeviceSignature:
    return extract_signature(device_label)


def _known_and_differs(a, b) -> bool:
    return a is not None and b is not None and a != b


def _known_and_equal(a, b) -> bool:
    return a is not None and b is not None and a == b


def score_strict(query: DeviceSignature, candidate: DeviceSignature, name_score: float) -> Optional[float]:
    """Strict score, or ``None`` when the candidate is not eligible."""
    if _known_and_differs(query.generation, candidate.generation):
        return None
    if _known_and_differs(query.tier, candidate.tier):
        return None
    score = STRICT_BASE + STRICT_NAME_WEIGHT * name_score
    if _known_and_equal(query.storage_gb, candidate.storage_gb):
        score += STRICT_STORAGE_WEIGHT
    return score


def score_relaxed(query: DeviceSignature, candidate: DeviceSignature, name_score: float) -> Optional[float]:
    """Relaxed score, or ``None`` when the generations disagree."""
    if _known_and_differs(query.generation, candidate.generation):
        return None
    score = RELAXED_NAME_WEIGHT * name_score
    if _known_and_equal(query.tier, candidate.tier):
        score += RELAXED_TIER_WEIGHT
    if _known_and_equal(query.storage_gb, candidate.storage_gb):
        score += RELAXED_STORAGE_WEIGHT
    return score


def storage_tokens(storage_gb: Optional[int]) -> tuple[str, ...]:
    """Spellings of a capacity as they appear in search-normalized labels."""
    if not storage_gb:
        return ()
    if storage_gb >= 1024 and storage_gb % 1024 == 0:
        tb = storage_gb // 1024
        return (f"{tb}tb", f"{tb} tb")
    return (f"{storage_gb}gb", f"{storage_gb} gb")


def score_label(query: MatchQuery, row: CatalogRow, name_score: float) -> float:
    label = normalize_for_search(row.device_label)
    score = LABEL_NAME_WEIGHT * name_score
    if any(tok in label for tok in storage_tokens(query.signature.storage_gb)):
        score += LABEL_STORAGE_WEIGHT
    carrier = normalize_for_search(query.carrier_name)
    if carrier and carrier in label:
        score += LABEL_CARRIER_WEIGHT
    return score


def _best(
    candidates: Sequence[CatalogRow],
    scorer: Callable[[CatalogRow], Optional[float]],
) -> tuple[Optional[CatalogRow], float]:
    best_row: Optional[CatalogRow] = None
    best_score = 0.0
    for row in candidates:
        score = scorer(row)
        if score is None:
            continue
        # strict ">" keeps the first-seen row on ties
        if best_row is None or score > best_score:
            best_row, best_score = row, score
    return best_row, best_score


def match(query: MatchQuery, candidates: Sequence[CatalogRow]) -> MatchResult:
    """Pick the best candidate for ``query``."""
    if not normalize_for_search(query.label) or not candidates:
        return MatchResult.no_match()

    names: dict[str, float] = {}

    def name_score(row: CatalogRow) -> float:
        if row.device_label not in names:
            names[row.device_label] = name_similarity(query.label, row.device_label)
        return names[row.device_label]

    if query.brand is not Brand.APPLE:
        row, score = _best(candidates, lambda r: score_label(query, r, name_score(r)))
        return _finish(query, row, score, "label")

    sig = query.signature
    row, score = _best(
        candidates, lambda r: score_strict(sig, row_signature(r.device_label), name_score(r))
    )
    if row is not None:
        return _finish(query, row, score, "strict")

    row, score = _best(
        candidates, lambda r: score_relaxed(sig, row_signature(r.device_label), name_score(r))
    )
    return _finish(query, row, score, "relaxed")


def _finish(query: MatchQuery, row: Optional[CatalogRow], score: float, path: str) -> MatchResult:
    if row is None:
        logger.debug(f"No match: label='{query.label}', path={path}")
        return MatchResult.no_match()
    result = MatchResult.from_row(row, score)
    logger.debug(
        f"Matched: label='{query.label}' -> '{row.device_label}' "
        f"path={path} confidence={result.confidence_score}"
    )
    return result
