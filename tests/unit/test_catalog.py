"""Catalog parsing / ingestion unit tests"""
import dataclasses

import pytest

from intake_pricer.catalog.csv_parser import parse_rows
from intake_pricer.catalog.ingestor import Catalog, CatalogRow, HeaderIndex, parse_catalog
from tests.fixtures.catalogs import (
    GEN15_ONLY_CATALOG_CSV,
    IPHONE_CATALOG_CSV,
    MALFORMED_CATALOG_CSV,
    MIXED_CATALOG_CSV,
)


class TestCsvParser:
    """Single-scan delimited text parser"""

    def test_quotes_and_escaped_quotes(self):
        rows = parse_rows('a,"b ""q"" c",d\r\n1,"x,y",3')
        assert rows == [["a", 'b "q" c', "d"], ["1", "x,y", "3"]]

    def test_newline_inside_quotes(self):
        assert parse_rows('"line1\nline2",z\n') == [["line1\nline2", "z"]]

    def test_cr_ignored_outside_quotes(self):
        assert parse_rows("a,b\r\nc,d\r\n") == [["a", "b"], ["c", "d"]]

    def test_bom_stripped(self):
        assert parse_rows("\ufeffsheet,device\n") == [["sheet", "device"]]

    def test_trailing_empty_field(self):
        assert parse_rows("a,b,\n") == [["a", "b", ""]]

    def test_empty_text(self):
        assert parse_rows("") == []


class TestHeaderIndex:
    def test_prefers_price_cents(self):
        header = HeaderIndex.from_header(["Sheet", "Device", "Price", "Price_Cents"])
        assert header.category == 0
        assert header.device_label == 1
        assert header.price == 3
        assert header.price_is_cents is True

    def test_alternative_names(self):
        header = HeaderIndex.from_header([" category ", "label", "price"])
        assert header.category == 0
        assert header.device_label == 1
        assert header.price_is_cents is False
        assert header.purchase_price is None
        assert header.is_usable

    def test_missing_device_column(self):
        assert HeaderIndex.from_header(["sheet", "price"]).is_usable is False


class TestParseCatalog:
    def test_iphone_catalog(self):
        catalog = parse_catalog(IPHONE_CATALOG_CSV)
        assert len(catalog) == 9
        first = catalog.rows[0]
        assert first == CatalogRow(
            category="iphone new unlocked",
            device_label="iPhone 16 Pro 256GB",
            purchase_price_cents=80000,
            base_price_cents=95000,
        )

    def test_price_column_fallback(self):
        catalog = parse_catalog(MIXED_CATALOG_CSV)
        ultra = catalog.rows[0]
        assert ultra.device_label == "Galaxy S24 Ultra 256GB"
        assert ultra.purchase_price_cents == 105000
        assert ultra.base_price_cents == 105000

    def test_bom_header_blank_lines_and_quoted_label(self):
        catalog = parse_catalog(MIXED_CATALOG_CSV)
        assert len(catalog) == 5
        assert catalog.rows[-1].device_label == 'iPhone 15 128GB, "Blue"'
        assert catalog.rows[-1].purchase_price_cents == 50000

    def test_cents_column_has_no_heuristic(self):
        catalog = parse_catalog(GEN15_ONLY_CATALOG_CSV)
        assert [r.purchase_price_cents for r in catalog] == [60000, 50000]
        assert parse_catalog("sheet,device,price_cents\nx,y,1250\n").rows[0].purchase_price_cents == 1250

    def test_malformed_rows_dropped(self):
        catalog = parse_catalog(MALFORMED_CATALOG_CSV)
        assert [r.device_label for r in catalog] == ["iPhone 14 128GB", "iPhone 13 128GB"]
        # unparseable price is "unknown"
        assert catalog.rows[1].purchase_price_cents == 0

    @pytest.mark.parametrize("text", ["", None, "sheet,price\nx,100\n"])
    def test_empty_catalog(self, text):
        catalog = parse_catalog(text)
        assert len(catalog) == 0
        assert not catalog

    def test_immutable(self):
        catalog = parse_catalog(IPHONE_CATALOG_CSV)
        assert isinstance(catalog.rows, tuple)
        with pytest.raises(dataclasses.FrozenInstanceError):
            catalog.rows[0].purchase_price_cents = 1  # type: ignore[misc]
        with pytest.raises(dataclasses.FrozenInstanceError):
            catalog.rows = ()  # type: ignore[misc]

    def test_categories_first_seen_order(self):
        catalog = parse_catalog(IPHONE_CATALOG_CSV)
        assert catalog.categories[:3] == [
            "iphone new unlocked",
            "iphone new locked",
            "iphone used unlocked",
        ]

    def test_default_catalog_is_empty(self):
        assert len(Catalog()) == 0
