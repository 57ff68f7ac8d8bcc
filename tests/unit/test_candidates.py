"""Candidate filter unit tests"""
from intake_pricer.engine.candidates import Condition, filter_candidates, is_excluded_category
from intake_pricer.utils.text.matching.signature import Brand


def _categories(rows):
    return {r.category for r in rows}


class TestFilterCandidates:
    def test_new_unlocked(self, iphone_catalog):
        rows = filter_candidates(iphone_catalog.rows, Brand.APPLE, Condition.NEW, unlocked=True)
        assert _categories(rows) == {"iphone new unlocked"}
        assert len(rows) == 4

    def test_new_locked_does_not_take_unlocked_rows(self, iphone_catalog):
        rows = filter_candidates(iphone_catalog.rows, Brand.APPLE, Condition.NEW, unlocked=False)
        assert _categories(rows) == {"iphone new locked"}

    def test_used_variants(self, iphone_catalog):
        unlocked = filter_candidates(iphone_catalog.rows, Brand.APPLE, Condition.USED, unlocked=True)
        locked = filter_candidates(iphone_catalog.rows, Brand.APPLE, Condition.USED, unlocked=False)
        assert _categories(unlocked) == {"iphone used unlocked"}
        assert _categories(locked) == {"iphone used locked"}

    def test_falls_back_to_next_group(self, gen15_catalog):
        # no "used" sheet at all: the last apple group takes any iphone row
        rows = filter_candidates(gen15_catalog.rows, Brand.APPLE, Condition.USED, unlocked=False)
        assert len(rows) == 2

    def test_last_resort_is_every_non_excluded_row(self, iphone_catalog):
        rows = filter_candidates(iphone_catalog.rows, Brand.OTHER, Condition.NEW, unlocked=True)
        assert len(rows) == 7
        assert "apple watch" not in _categories(rows)
        assert "airpods" not in _categories(rows)

    def test_order_preserved_and_catalog_untouched(self, iphone_catalog):
        before = iphone_catalog.rows
        rows = filter_candidates(iphone_catalog.rows, Brand.APPLE, Condition.NEW, unlocked=True)
        assert rows == [r for r in before if r.category == "iphone new unlocked"]
        assert iphone_catalog.rows is before

    def test_empty(self):
        assert filter_candidates((), Brand.APPLE, Condition.NEW, unlocked=True) == []


class TestExcludedCategory:
    def test_excluded(self):
        assert is_excluded_category("Apple Watch")
        assert is_excluded_category("AirPods Pro")
        assert is_excluded_category("galaxy buds")
        assert not is_excluded_category("iphone used unlocked")
        assert not is_excluded_category("budget phones")
