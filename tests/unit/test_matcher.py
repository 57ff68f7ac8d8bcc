"""Matcher / scorer unit tests"""
import pytest

from intake_pricer.catalog.ingestor import CatalogRow, parse_catalog
from intake_pricer.engine.matcher import (
    MatchQuery,
    match,
    row_signature,
    score_relaxed,
    score_strict,
    storage_tokens,
)
from intake_pricer.engine.result import MatchResult
from intake_pricer.utils.text.matching.signature import Brand, DeviceSignature, Tier, extract_signature


QUERY_SIG = DeviceSignature(generation=16, tier=Tier.PRO, storage_gb=256, color="Desert")


def _row(label, category="iphone new unlocked", price=80000):
    return CatalogRow(category=category, device_label=label, purchase_price_cents=price, base_price_cents=price)


def _apple_query(label="iPhone 16 Pro", signature=QUERY_SIG):
    return MatchQuery(label=label, signature=signature, brand=Brand.APPLE, carrier_name="Unlocked")


class TestScoreFunctions:
    def test_strict_rejects_other_generation(self):
        assert score_strict(QUERY_SIG, extract_signature("iPhone 15 Pro 256GB"), 1.0) is None

    def test_strict_rejects_other_tier(self):
        assert score_strict(QUERY_SIG, extract_signature("iPhone 16 Pro Max 256GB"), 1.0) is None

    def test_strict_weights(self):
        cand = extract_signature("iPhone 16 Pro 256GB")
        assert score_strict(QUERY_SIG, cand, 1.0) == pytest.approx(1.0)
        assert score_strict(QUERY_SIG, cand, 0.0) == pytest.approx(0.85)
        other_storage = extract_signature("iPhone 16 Pro 128GB")
        assert score_strict(QUERY_SIG, other_storage, 1.0) == pytest.approx(0.65)

    def test_unknown_fields_do_not_block(self):
        assert score_strict(DeviceSignature(), extract_signature("iPhone 15 Pro"), 0.0) == pytest.approx(0.5)
        assert score_strict(QUERY_SIG, DeviceSignature(), 0.0) == pytest.approx(0.5)

    def test_relaxed_weights(self):
        cand = extract_signature("iPhone 16 Pro Max 256GB")
        assert score_relaxed(QUERY_SIG, cand, 1.0) == pytest.approx(0.5)
        assert score_relaxed(QUERY_SIG, extract_signature("iPhone 15 Pro 256GB"), 1.0) is None

    def test_storage_tokens(self):
        assert storage_tokens(256) == ("256gb", "256 gb")
        assert storage_tokens(1024) == ("1tb", "1 tb")
        assert storage_tokens(None) == ()


class TestAppleMatching:
    """Two-pass signature matching"""

    def test_strict_match_with_storage_boost(self, iphone_catalog):
        rows = [r for r in iphone_catalog.rows if r.category == "iphone new unlocked"]
        result = match(_apple_query(), rows)
        assert result.matched_row.device_label == "iPhone 16 Pro 256GB"
        assert result.purchase_price_cents == 80000
        assert result.base_price_cents == 95000
        assert result.confidence_score == 1.0

    def test_strict_never_crosses_generations(self, iphone_catalog):
        for row in iphone_catalog.rows:
            result = match(_apple_query(), [row])
            if result.is_match and row_signature(row.device_label).tier is Tier.PRO:
                assert row_signature(result.matched_row.device_label).generation == 16

    def test_relaxed_pass(self):
        rows = [_row("iPhone 16 Pro Max 256GB", price=90000)]
        result = match(_apple_query(), rows)
        assert result.matched_row is rows[0]
        assert result.confidence_score == 0.5

    def test_no_generation_match(self, gen15_catalog):
        result = match(_apple_query(), list(gen15_catalog.rows))
        assert result == MatchResult.no_match()
        assert result.matched_row is None
        assert result.confidence_score == 0
        assert result.purchase_price_cents is None

    def test_tie_keeps_first_seen(self):
        first = _row("iPhone 16 Pro 256GB", price=80000)
        second = _row("iPhone 16 Pro 256GB", price=70000)
        result = match(_apple_query(), [first, second])
        assert result.matched_row is first

    def test_empty_query_never_matches(self, iphone_catalog):
        assert not match(_apple_query(label=""), list(iphone_catalog.rows)).is_match
        assert not match(_apple_query(label="  -- "), list(iphone_catalog.rows)).is_match

    def test_no_candidates(self):
        assert match(_apple_query(), []) == MatchResult.no_match()


class TestLabelMatching:
    """Samsung / other brands: label-only scoring"""

    def test_samsung_scoring(self):
        catalog = parse_catalog(
            "sheet,device,price_cents\n"
            "samsung new,Galaxy S24 128GB,50000\n"
            "samsung new,Galaxy S24 Ultra 256GB,90000\n"
        )
        query = MatchQuery(
            label="Galaxy S24 Ultra",
            signature=DeviceSignature(storage_gb=256),
            brand=Brand.SAMSUNG,
        )
        result = match(query, list(catalog.rows))
        assert result.matched_row.device_label == "Galaxy S24 Ultra 256GB"
        assert result.confidence_score == 0.95

    def test_carrier_token_bonus(self):
        rows = [_row("Pixel 9 Pro"), _row("Pixel 9 Pro Verizon", price=50000)]
        query = MatchQuery(label="Pixel 9 Pro", brand=Brand.OTHER, carrier_name="Verizon")
        result = match(query, rows)
        assert result.matched_row is rows[1]
        assert result.confidence_score == 0.85

    def test_signature_gating_is_skipped(self):
        rows = [_row("Galaxy S23 256GB")]
        query = MatchQuery(label="Galaxy S23", signature=DeviceSignature(generation=16), brand=Brand.SAMSUNG)
        assert match(query, rows).is_match


class TestMatchResult:
    def test_confidence_clamped_and_rounded(self):
        row = _row("iPhone 16 Pro")
        assert MatchResult.from_row(row, 1.2).confidence_score == 1.0
        assert MatchResult.from_row(row, 0.12345).confidence_score == 0.123

    def test_zero_score_is_no_match(self):
        assert MatchResult.from_row(_row("x"), 0.0) == MatchResult.no_match()
        assert MatchResult.from_row(_row("x"), -1.0).matched_row is None
