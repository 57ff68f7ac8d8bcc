"""Catalog ingestion: raw delimited text -> immutable :class:`Catalog`.

Ingestion never raises for a single bad row. Rows whose field count differs
from the header, or whose device label is empty, are dropped and logged at
debug level. Unparseable prices become 0 ("unknown").
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

from intake_pricer.core.logging import logger
from intake_pricer.utils.text.utils.prices import parse_cents, to_cents

from .csv_parser import iter_rows


_CATEGORY_COLUMNS = ("sheet", "category")
_LABEL_COLUMNS = ("device", "device_label", "label")
_PRICE_COLUMNS = ("price_cents", "price")


@dataclass(frozen=True)
class CatalogRow:
    """One priced catalog line. Duplicates are allowed and resolved by scoring."""

    category: str
    device_label: str
    purchase_price_cents: int = 0
    base_price_cents: int = 0


@dataclass(frozen=True)
class HeaderIndex:
    """Column positions resolved from the header row (``None`` = absent)."""

    width: int
    category: Optional[int] = None
    device_label: Optional[int] = None
    price: Optional[int] = None
    price_is_cents: bool = False
    purchase_price: Optional[int] = None
    base_price: Optional[int] = None

    @classmethod
    def from_header(cls, header: Sequence[str]) -> "HeaderIndex":
        names = [h.strip().lower() for h in header]

        def first_of(candidates: Sequence[str]) -> Optional[int]:
            for name in candidates:
                if name in names:
                    return names.index(name)
            return None

        price = first_of(_PRICE_COLUMNS)
        return cls(
            width=len(names),
            category=first_of(_CATEGORY_COLUMNS),
            device_label=first_of(_LABEL_COLUMNS),
            price=price,
            price_is_cents=price is not None and names[price].endswith("_cents"),
            purchase_price=first_of(("purchase_price_cents",)),
            base_price=first_of(("base_price_cents",)),
        )

    @property
    def is_usable(self) -> bool:
        return self.device_label is not None


@dataclass(frozen=True)
class Catalog:
    """Ordered, immutable set of catalog rows.

    Rebuilt wholesale on refresh; never mutated by the engine.
    """

    rows: tuple[CatalogRow, ...] = ()
    header: Optional[HeaderIndex] = None

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[CatalogRow]:
        return iter(self.rows)

    def __bool__(self) -> bool:
        return bool(self.rows)

    @property
    def categories(self) -> list[str]:
        """Distinct categories in first-seen order."""
        seen: dict[str, None] = {}
        for row in self.rows:
            seen.setdefault(row.category, None)
        return list(seen)


def _cell(fields: Sequence[str], index: Optional[int]) -> str:
    if index is None:
        return ""
    return fields[index].strip()


def _row_from_fields(fields: Sequence[str], header: HeaderIndex) -> Optional[CatalogRow]:
    if len(fields) != header.width:
        return None

    label = _cell(fields, header.device_label)
    if not label:
        return None

    raw_price = _cell(fields, header.price)
    price = parse_cents(raw_price) if header.price_is_cents else to_cents(raw_price)

    raw_purchase = _cell(fields, header.purchase_price)
    raw_base = _cell(fields, header.base_price)

    return CatalogRow(
        category=_cell(fields, header.category),
        device_label=label,
        purchase_price_cents=parse_cents(raw_purchase) if raw_purchase else price,
        base_price_cents=parse_cents(raw_base) if raw_base else price,
    )


def parse_catalog(text: Optional[str]) -> Catalog:
    """Parse raw catalog text into a :class:`Catalog`.

    Empty text, or a header without a device column, yields an empty catalog.
    """
    if not text:
        return Catalog()

    rows_iter = iter_rows(text)
    header_fields = next(rows_iter, None)
    if header_fields is None:
        return Catalog()

    header = HeaderIndex.from_header(header_fields)
    if not header.is_usable:
        logger.warning(f"Catalog header has no device column: {header_fields!r}")
        return Catalog(header=header)

    rows: list[CatalogRow] = []
    dropped = 0
    for line_no, fields in enumerate(rows_iter, start=2):
        # blank line
        if len(fields) == 1 and not fields[0].strip():
            continue
        row = _row_from_fields(fields, header)
        if row is None:
            dropped += 1
            logger.debug(f"Dropped malformed catalog row {line_no}: {len(fields)} fields")
            continue
        rows.append(row)

    logger.info(f"Catalog parsed: rows={len(rows)}, dropped={dropped}")
    return Catalog(rows=tuple(rows), header=header)
