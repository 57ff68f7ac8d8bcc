"""Match Result - the engine's external contract"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from intake_pricer.catalog.ingestor import CatalogRow


@dataclass(frozen=True)
class MatchResult:
    """Outcome of matching one query against a catalog.

    Attributes:
        matched_row: best catalog row, ``None`` when nothing matched
        confidence_score: clamped to [0, 1], rounded to 3 decimals
        purchase_price_cents: suggested purchase price of the matched row
        base_price_cents: base (list) price of the matched row
    """

    matched_row: Optional[CatalogRow] = None
    confidence_score: float = 0.0
    purchase_price_cents: Optional[int] = None
    base_price_cents: Optional[int] = None

    @property
    def is_match(self) -> bool:
        return self.matched_row is not None

    @classmethod
    def no_match(cls) -> "MatchResult":
        return cls()

    @classmethod
    def from_row(cls, row: CatalogRow, score: float) -> "MatchResult":
        """Build a result for ``row``; a non-positive score is no match."""
        confidence = round(min(1.0, max(0.0, score)), 3)
        if confidence <= 0:
            return cls.no_match()
        return cls(
            matched_row=row,
            confidence_score=confidence,
            purchase_price_cents=row.purchase_price_cents,
            base_price_cents=row.base_price_cents,
        )
