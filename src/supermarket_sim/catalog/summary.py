from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, Iterable, List

from .product import Product

NO_SERIAL = "N/A"


@dataclass
class ProductSummary:
    """Running quantity of one product line."""

    name: str
    unit_price: Decimal
    serial: str = NO_SERIAL
    quantity: int = 0

    def add_quantity(self, qty: int = 1) -> None:
        self.quantity += qty

    @property
    def total(self) -> Decimal:
        return self.unit_price * self.quantity

    def __str__(self) -> str:
        return f"  [{self.serial}] {self.name:<25} | Qty: {self.quantity:<3d} | Total: PHP {self.total:.2f}"


def _summarize(products: Iterable[Product], key: Callable[[Product], str], with_serial: bool) -> List[ProductSummary]:
    rows: Dict[str, ProductSummary] = {}
    for product in products:
        row = rows.get(key(product))
        if row is None:
            row = ProductSummary(
                name=product.name,
                unit_price=product.price,
                serial=product.serial if with_serial else NO_SERIAL,
            )
            rows[key(product)] = row
        row.add_quantity()
    return list(rows.values())


def summarize_by_name(products: Iterable[Product]) -> List[ProductSummary]:
    """Inventory view: one row per product name, in first-seen order."""
    return _summarize(products, key=lambda p: p.name, with_serial=False)


def summarize_by_serial(products: Iterable[Product]) -> List[ProductSummary]:
    """Receipt view: one row per serial number, in first-seen order.

    Two products sharing a name but not a serial stay separate here while
    ``summarize_by_name`` merges them.
    """
    return _summarize(products, key=lambda p: p.serial, with_serial=True)


__all__ = ["NO_SERIAL", "ProductSummary", "summarize_by_name", "summarize_by_serial"]
