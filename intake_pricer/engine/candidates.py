"""Candidate filtering by brand, condition and lock state.

Pattern groups come from ``resources/matching/categories.yaml``. Groups are
tried in order and the first one that selects at least one row wins; when
none does, every non-excluded row is a candidate.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Iterable, Sequence

from intake_pricer.catalog.ingestor import CatalogRow
from intake_pricer.utils.resource_loader import load_category_rules
from intake_pricer.utils.text.core.cleaning import normalize
from intake_pricer.utils.text.matching.signature import Brand


class Condition(str, Enum):
    NEW = "new"
    USED = "used"


@dataclass(frozen=True)
class PatternGroup:
    all_of: tuple[re.Pattern[str], ...] = ()
    none_of: tuple[re.Pattern[str], ...] = ()

    def matches(self, category: str) -> bool:
        return all(p.search(category) for p in self.all_of) and not any(
            p.search(category) for p in self.none_of
        )


def _compile(patterns: Iterable[str]) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


@lru_cache(maxsize=1)
def _excluded() -> tuple[re.Pattern[str], ...]:
    return _compile(load_category_rules()["excluded"])


@lru_cache(maxsize=None)
def pattern_groups(brand: Brand, condition: Condition, unlocked: bool) -> tuple[PatternGroup, ...]:
    lock_key = "unlocked" if unlocked else "locked"
    groups = load_category_rules()["groups"]
    raw = groups.get(brand.value, {}).get(condition.value, {}).get(lock_key, [])
    return tuple(
        PatternGroup(all_of=_compile(g.get("all", [])), none_of=_compile(g.get("none", [])))
        for g in raw
    )


def is_excluded_category(category: str) -> bool:
    cat = normalize(category)
    return any(p.search(cat) for p in _excluded())


def filter_candidates(
    rows: Sequence[CatalogRow],
    brand: Brand,
    condition: Condition,
    unlocked: bool,
) -> list[CatalogRow]:
    """Rows eligible for scoring, in catalog order. ``rows`` is not mutated."""
    eligible = [r for r in rows if not is_excluded_category(r.category)]
    if not eligible:
        return []

    normalized = [(normalize(r.category), r) for r in eligible]
    for group in pattern_groups(brand, condition, unlocked):
        selected = [r for cat, r in normalized if group.matches(cat)]
        if selected:
            return selected
    return eligible
