"""Carrier and lock-state inference from a lookup record."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from intake_pricer.utils.resource_loader import load_carrier_rules

from .payload import LookupRecord


UNLOCKED = "Unlocked"

# Whole word only, narrower than a substring "on" check ("Not configured" is not on).
_ICLOUD_ON_RE = re.compile(r"\bon\b")


@dataclass(frozen=True)
class CarrierInfo:
    """``carrier_name`` is ``None`` when nothing could be inferred."""

    carrier_name: Optional[str] = None
    is_unlocked: bool = False
    icloud_lock_on: bool = False


@lru_cache(maxsize=1)
def _carrier_rules() -> tuple[tuple[re.Pattern[str], str], ...]:
    return tuple(
        (re.compile(rule["pattern"]), rule["label"])
        for rule in load_carrier_rules()["carriers"]
    )


def match_carrier(value: Optional[str]) -> Optional[str]:
    """Canonical carrier label for a free-text value, first vocabulary hit wins."""
    if not value:
        return None
    low = value.lower()
    for pattern, label in _carrier_rules():
        if pattern.search(low):
            return label
    return None


def _is_sim_lock_key(key: str) -> bool:
    return "sim" in key and "lock" in key


def infer_carrier_name(record: LookupRecord) -> Optional[str]:
    # SIM-Lock: Unlocked outranks any carrier field
    for key, value in record:
        if _is_sim_lock_key(key.lower()) and "unlock" in value.lower():
            return UNLOCKED

    preferred = load_carrier_rules()["preferred_keys"]
    for key, value in record:
        low = key.lower()
        if not any(p in low for p in preferred):
            continue
        label = match_carrier(value)
        if label:
            return label

    for _, value in record:
        label = match_carrier(value)
        if label:
            return label
    return None


def has_icloud_on(record: LookupRecord) -> bool:
    keys = load_carrier_rules()["icloud_keys"]
    for key, value in record:
        if not any(k in key.lower() for k in keys):
            continue
        low = value.lower()
        if _ICLOUD_ON_RE.search(low) or "enabled" in low:
            return True
    return False


def infer_carrier(record: LookupRecord) -> CarrierInfo:
    name = infer_carrier_name(record)
    return CarrierInfo(
        carrier_name=name,
        is_unlocked=name == UNLOCKED,
        icloud_lock_on=has_icloud_on(record),
    )


def resolve_carrier(info: CarrierInfo, default: str = UNLOCKED) -> CarrierInfo:
    """Fill in ``default`` when no carrier was inferred."""
    if info.carrier_name is not None:
        return info
    return CarrierInfo(
        carrier_name=default,
        is_unlocked=default.lower() == UNLOCKED.lower(),
        icloud_lock_on=info.icloud_lock_on,
    )
