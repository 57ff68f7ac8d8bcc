"""Misc text utilities (prices)."""

from .prices import CENTS_THRESHOLD, parse_cents, to_cents

__all__ = [
    "CENTS_THRESHOLD",
    "parse_cents",
    "to_cents",
]
