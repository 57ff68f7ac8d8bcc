"""Text cleaning helpers."""

from __future__ import annotations

import re
from typing import Optional


_WS_RE = re.compile(r"\s+")
_NON_ALNUM_RE = re.compile(r"[^\w\s]|_")

# Product words whose casing title-casing would get wrong.
_SPECIAL_CASES: dict[str, str] = {
    "iphone": "iPhone",
    "ipad": "iPad",
    "ipod": "iPod",
    "macbook": "MacBook",
    "imac": "iMac",
    "airpods": "AirPods",
    "pro max": "Pro Max",
    "pro": "Pro",
    "plus": "Plus",
    "mini": "Mini",
    "air": "Air",
    "watch": "Watch",
    "galaxy": "Galaxy",
    "note": "Note",
    "tab": "Tab",
    "fold": "Fold",
    "flip": "Flip",
    "ultra": "Ultra",
}


def normalize(text: Optional[str]) -> str:
    """Lower-case, collapse whitespace runs to one space and trim.

    Idempotent: ``normalize(normalize(s)) == normalize(s)``.
    """
    if not text:
        return ""
    return _WS_RE.sub(" ", str(text).lower()).strip()


def normalize_for_search(text: Optional[str]) -> str:
    """Like :func:`normalize`, but punctuation becomes a space first.

    e.g. "iPhone-16 Pro (256GB)" -> "iphone 16 pro 256gb"
    """
    if not text:
        return ""
    return normalize(_NON_ALNUM_RE.sub(" ", str(text)))


def title_case(text: Optional[str]) -> str:
    """Title-case a product name, keeping brand casing such as ``iPhone``."""
    if not text:
        return ""

    result = re.sub(r"\b([a-z])", lambda m: m.group(1).upper(), str(text).lower())
    for key, value in _SPECIAL_CASES.items():
        result = re.sub(rf"\b{key}\b", value, result, flags=re.IGNORECASE)
    return result


def escape_regex(text: str) -> str:
    return re.escape(text)
