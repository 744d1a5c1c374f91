from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from ..catalog.product import Product
from ..catalog.summary import ProductSummary, summarize_by_serial
from .pricing import DEFAULT_POLICY, PricingPolicy, to_cents

logger = logging.getLogger(__name__)

RULE = "-----------------------------------"


@dataclass(frozen=True)
class Receipt:
    """Structured result of a checkout, handed to the persistence sink."""

    shopper_name: str
    age: int
    timestamp: datetime
    line_items: Tuple[ProductSummary, ...]
    total_price: Decimal
    total_discount: Decimal
    final_total: Decimal
    senior: bool = False

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.line_items)


def compute_receipt(
    shopper_name: str,
    age: int,
    products: Iterable[Product],
    policy: PricingPolicy = DEFAULT_POLICY,
    now: Optional[datetime] = None,
) -> Receipt:
    """Price every item, apply the senior discount and aggregate line items.

    Items are processed in the order given (hand-carried first, then
    equipment contents); line items keep first-seen order and are keyed by
    serial number.
    """
    items = list(products)
    total_price = Decimal("0")
    total_discount = Decimal("0")
    final_total = Decimal("0")
    for item in items:
        discount = policy.discount_for(item, age)
        total_price += item.price
        total_discount += discount
        final_total += item.price - discount

    receipt = Receipt(
        shopper_name=shopper_name,
        age=age,
        timestamp=now or datetime.now(),
        line_items=tuple(summarize_by_serial(items)),
        total_price=to_cents(total_price),
        total_discount=to_cents(total_discount),
        final_total=to_cents(final_total),
        senior=policy.is_senior(age),
    )
    logger.debug(
        "Receipt for %s: %d items, total=%s discount=%s final=%s",
        shopper_name,
        len(items),
        receipt.total_price,
        receipt.total_discount,
        receipt.final_total,
    )
    return receipt


def format_receipt(receipt: Receipt) -> str:
    lines = [
        "--- Supermarket Receipt ---",
        f"Shopper: {receipt.shopper_name} (Age: {receipt.age})",
        f"Transaction Date: {receipt.timestamp:%Y-%m-%d %H:%M:%S}",
        "--- Items Purchased ---",
    ]
    lines.extend(str(line) for line in receipt.line_items)
    lines.append("")
    lines.append(RULE)
    lines.append(f"Total Price: PHP {receipt.total_price:.2f}")
    if receipt.senior:
        lines.append(f"Senior Discount: PHP {receipt.total_discount:.2f}")
    lines.append(f"FINAL TOTAL: PHP {receipt.final_total:.2f}")
    lines.append(RULE)
    return "\n".join(lines) + "\n"


__all__ = ["Receipt", "compute_receipt", "format_receipt"]
