"""Device signature extraction.

Vendor model descriptions are inconsistent ("IPHONE 16 PRO DESERT 256GB-USA",
"iPhone 16 Pro 256GB", "Apple iPhone 15 Pro Max 1TB Natural Titanium"). Both
the query and every catalog label are reduced to the same structured
signature so they can be compared field by field.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Optional

from intake_pricer.core.config import settings
from intake_pricer.utils.resource_loader import (
    load_category_rules,
    load_color_vocabulary,
    load_tier_rules,
)

from ..core.cleaning import escape_regex, normalize, title_case


class Tier(str, Enum):
    """Product variant within a generation"""

    BASE = "base"
    PLUS = "plus"
    PRO = "pro"
    PROMAX = "promax"
    E = "e"


class Brand(str, Enum):
    APPLE = "apple"
    SAMSUNG = "samsung"
    OTHER = "other"


@dataclass(frozen=True)
class DeviceSignature:
    """Structured view of a free-text device description.

    Every field is optional: ``None`` means "not stated", and an unknown field
    never blocks a comparison.
    """

    generation: Optional[int] = None
    tier: Optional[Tier] = None
    storage_gb: Optional[int] = None
    color: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return (
            self.generation is None
            and self.tier is None
            and self.storage_gb is None
            and self.color is None
        )


_DISALLOWED_RE = re.compile(r"[^A-Z0-9 \-]")
_WS_RE = re.compile(r"\s+")
# Region suffix such as "-USA" / "-EU"; tier words are never treated as regions.
_REGION_RE = re.compile(r"\s*-\s*(?!(?:MAX|PRO)$)[A-Z]{2,3}$")
_STORAGE_GB_RE = re.compile(r"(?<!\d)(\d{2,4})\s*GB", re.IGNORECASE)
_STORAGE_TB_RE = re.compile(r"(?<!\d)(\d)\s*TB\b", re.IGNORECASE)
_GENERATION_RE = re.compile(r"\b(\d{1,2})E?\b(?!\s*[GT]B)")
_STORAGE_TOKEN_RE = re.compile(r"^\d+(?:GB|TB)$")


def clean_description(text: Optional[str]) -> str:
    """Upper-case, drop characters outside ``[A-Z0-9 -]`` and strip the region code."""
    if not text:
        return ""
    cleaned = _DISALLOWED_RE.sub(" ", str(text).upper())
    cleaned = _WS_RE.sub(" ", cleaned).strip()
    return _REGION_RE.sub("", cleaned).strip()


@lru_cache(maxsize=1)
def _tier_rules() -> tuple[tuple[re.Pattern[str], Tier], ...]:
    return tuple(
        (re.compile(rule["pattern"]), Tier(rule["tier"]))
        for rule in load_tier_rules()
    )


@lru_cache(maxsize=1)
def _color_rules() -> tuple[tuple[re.Pattern[str], str], ...]:
    rules = []
    for color in load_color_vocabulary():
        words = [escape_regex(w) for w in color.upper().split()]
        rules.append((re.compile(r"\b" + r"\s+".join(words) + r"\b"), color))
    return tuple(rules)


@lru_cache(maxsize=1)
def _color_words() -> frozenset[str]:
    return frozenset(w for color in load_color_vocabulary() for w in color.upper().split())


def extract_storage_gb(cleaned: str) -> Optional[int]:
    m = _STORAGE_GB_RE.search(cleaned)
    if m:
        return int(m.group(1))
    m = _STORAGE_TB_RE.search(cleaned)
    if m:
        return int(m.group(1)) * 1024
    return None


def extract_tier(cleaned: str) -> Optional[Tier]:
    """First matching tier rule wins; anything else is the base model."""
    if not cleaned:
        return None
    for pattern, tier in _tier_rules():
        if pattern.search(cleaned):
            return tier
    return Tier.BASE


def extract_generation(cleaned: str) -> Optional[int]:
    low = settings.signature_generation_min
    high = settings.signature_generation_max
    for m in _GENERATION_RE.finditer(cleaned):
        value = int(m.group(1))
        if low <= value <= high:
            return value
    return None


def extract_color(cleaned: str) -> Optional[str]:
    for pattern, color in _color_rules():
        if pattern.search(cleaned):
            return color
    return None


def extract_signature(text: Optional[str]) -> DeviceSignature:
    """Build a :class:`DeviceSignature` from a free-text description.

    e.g. "IPHONE 16 PRO DESERT 256GB-USA"
        -> DeviceSignature(generation=16, tier=Tier.PRO, storage_gb=256, color="Desert")
    """
    cleaned = clean_description(text)
    if not cleaned:
        return DeviceSignature()

    return DeviceSignature(
        generation=extract_generation(cleaned),
        tier=extract_tier(cleaned),
        storage_gb=extract_storage_gb(cleaned),
        color=extract_color(cleaned),
    )


def build_display_name(description: Optional[str]) -> Optional[str]:
    """Readable model name from a vendor description.

    "IPHONE 16 PRO MAX DESERT 256GB-USA" -> "iPhone 16 Pro Max". Colors,
    storage and region codes are dropped.
    """
    cleaned = clean_description(description)
    if not cleaned:
        return None

    tokens = cleaned.split()
    color_words = _color_words()

    def _is_noise(i: int) -> bool:
        tok = tokens[i]
        if _STORAGE_TOKEN_RE.match(tok) or tok in {"GB", "TB"} or tok in color_words:
            return True
        # "256 GB" split over two tokens
        return tok.isdigit() and i + 1 < len(tokens) and tokens[i + 1] in {"GB", "TB"}

    if "IPHONE" in tokens:
        start = tokens.index("IPHONE")
        keep: list[str] = []
        for i in range(start, min(start + 6, len(tokens))):
            if _is_noise(i):
                break
            keep.append(tokens[i])
        return title_case(" ".join(keep))

    keep = [tokens[i] for i in range(len(tokens)) if not _is_noise(i)]
    return title_case(" ".join(keep)) or None


def infer_brand(text: Optional[str]) -> Brand:
    """Brand from substring hints: iPhone/Apple, Samsung/Galaxy, else other."""
    name = normalize(text)
    if not name:
        return Brand.OTHER
    for brand, hints in load_category_rules()["brands"].items():
        if any(hint in name for hint in hints):
            return Brand(brand)
    return Brand.OTHER
