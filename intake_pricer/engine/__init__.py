"""Engine Layer - device-to-catalog matching

- payload / carrier: lookup payload normalization and carrier inference
- candidates: category-driven candidate filtering
- matcher / result: two-pass scoring and the MatchResult contract
- orchestrator: MatchOrchestrator facade and pricing variants
- search: free-text catalog search
"""

from .candidates import Condition, filter_candidates
from .carrier import CarrierInfo, infer_carrier, resolve_carrier
from .matcher import MatchQuery, match
from .orchestrator import (
    DeviceMatch,
    MatchOrchestrator,
    PricingVariants,
    variant_key,
)
from .payload import LookupRecord, parse_lookup_payload, raise_for_envelope
from .result import MatchResult
from .search import SearchHit, search_catalog

__all__ = [
    "CarrierInfo",
    "Condition",
    "DeviceMatch",
    "LookupRecord",
    "MatchOrchestrator",
    "MatchQuery",
    "MatchResult",
    "PricingVariants",
    "SearchHit",
    "filter_candidates",
    "infer_carrier",
    "match",
    "parse_lookup_payload",
    "raise_for_envelope",
    "resolve_carrier",
    "search_catalog",
    "variant_key",
]
