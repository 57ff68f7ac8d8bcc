"""Catalog search unit tests"""
from intake_pricer.engine.search import clamp_limit, score_row, search_catalog


class TestSearchCatalog:
    def test_short_query(self, iphone_catalog):
        assert search_catalog(iphone_catalog, "") == []
        assert search_catalog(iphone_catalog, "x") == []
        assert search_catalog(iphone_catalog, " - ") == []

    def test_best_first(self, iphone_catalog):
        hits = search_catalog(iphone_catalog, "iphone 16 pro")
        assert hits[0].row.device_label.startswith("iPhone 16 Pro")
        scores = [h.score for h in hits]
        assert scores == sorted(scores, reverse=True)

    def test_used_hint(self, iphone_catalog):
        hits = search_catalog(iphone_catalog, "used iphone 16 pro")
        assert hits[0].row.category == "iphone used unlocked"

    def test_accessory_hints(self, iphone_catalog):
        assert search_catalog(iphone_catalog, "airpods")[0].row.category == "airpods"
        assert search_catalog(iphone_catalog, "watch")[0].row.category == "apple watch"

    def test_limit(self, iphone_catalog):
        assert len(search_catalog(iphone_catalog, "iphone", limit=2)) == 2
        assert len(search_catalog(iphone_catalog, "iphone", limit=0)) == 1
        assert len(search_catalog(iphone_catalog, "iphone", limit=1000)) == len(iphone_catalog)


class TestScoring:
    def test_clamp_limit(self):
        assert clamp_limit(None) == 15
        assert clamp_limit(-3) == 1
        assert clamp_limit(500) == 50

    def test_starts_with_beats_contains(self, iphone_catalog):
        row = iphone_catalog.rows[0]
        assert score_row("iphone 16", row) > score_row("16 pro", row)

    def test_token_coverage(self, iphone_catalog):
        row = iphone_catalog.rows[0]
        assert score_row("iphone 16 pro", row) > score_row("iphone 16 zzz", row)
