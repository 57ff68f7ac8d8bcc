"""Free-text catalog search (ranked lookup for manual pricing)."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from intake_pricer.catalog.ingestor import Catalog, CatalogRow
from intake_pricer.core.config import settings
from intake_pricer.utils.text.core.cleaning import normalize_for_search
from intake_pricer.utils.text.core.tokenize import tokenize
from intake_pricer.utils.text.matching.similarity import fuzzy_score


MIN_QUERY_LENGTH = 2

STARTS_WITH_WEIGHT = 0.45
CONTAINS_WEIGHT = 0.35
COVERAGE_WEIGHT = 0.25
FUZZY_WEIGHT = 0.2

# (query pattern, category pattern, boost)
_CATEGORY_HINTS: tuple[tuple[re.Pattern[str], re.Pattern[str], float], ...] = (
    (re.compile(r"\bused\b"), re.compile(r"used", re.I), 0.2),
    (re.compile(r"\bunlocked?\b"), re.compile(r"unlock", re.I), 0.15),
    (re.compile(r"\block(ed)?\b"), re.compile(r"\block(ed)?\b", re.I), 0.1),
    (re.compile(r"\bairpods?\b"), re.compile(r"airpod", re.I), 0.25),
    (re.compile(r"\bwatch(es)?\b"), re.compile(r"watch", re.I), 0.2),
)


@dataclass(frozen=True)
class SearchHit:
    row: CatalogRow
    score: float


def score_row(query: str, row: CatalogRow) -> float:
    """Relevance of ``row`` for an already search-normalized ``query``."""
    label = normalize_for_search(row.device_label)
    if not query or not label:
        return 0.0

    score = 0.0
    if label.startswith(query):
        score += STARTS_WITH_WEIGHT
    if query in label:
        score += CONTAINS_WEIGHT

    tokens = tokenize(query)
    if tokens:
        hits = sum(1 for t in tokens if t in label)
        score += COVERAGE_WEIGHT * hits / len(tokens)

    score += FUZZY_WEIGHT * fuzzy_score(query, label) / 100

    for query_re, category_re, boost in _CATEGORY_HINTS:
        if query_re.search(query) and category_re.search(row.category):
            score += boost
    return score


def clamp_limit(limit: Optional[int]) -> int:
    if limit is None:
        return settings.search_default_limit
    return min(settings.search_max_limit, max(1, int(limit)))


def search_catalog(catalog: Catalog, query: Optional[str], limit: Optional[int] = None) -> list[SearchHit]:
    """Rank catalog rows for a free-text query, best first.

    Queries shorter than two characters return nothing. Equal scores keep
    catalog order.
    """
    q = normalize_for_search(query)
    if len(q) < MIN_QUERY_LENGTH:
        return []

    hits = [SearchHit(row=row, score=round(score_row(q, row), 4)) for row in catalog.rows]
    hits.sort(key=lambda h: h.score, reverse=True)
    return hits[:clamp_limit(limit)]
