from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from ..catalog.product import ALCOHOL_PREFIX, Product

CENT = Decimal("0.01")


def to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PricingPolicy:
    """Age rules and senior discount rates applied at the counter."""

    senior_age: int = 60
    adult_age: int = 18
    food_discount_rate: Decimal = Decimal("0.20")
    beverage_discount_rate: Decimal = Decimal("0.10")
    restricted_prefix: str = ALCOHOL_PREFIX

    def is_senior(self, age: int) -> bool:
        return age >= self.senior_age

    def may_take(self, age: int, product: Product) -> bool:
        """Minors may not pick up restricted (alcohol) products."""
        return age >= self.adult_age or product.prefix != self.restricted_prefix

    def discount_for(self, product: Product, age: int) -> Decimal:
        """Per-item senior discount, unrounded. Only receipt totals go to cents.

        Restricted products never get a discount; food gets the food rate and
        beverages the beverage rate. Non-consumables are not discounted.
        """
        if not self.is_senior(age) or not product.is_consumable:
            return Decimal("0")
        if product.prefix == self.restricted_prefix:
            return Decimal("0")
        if product.is_food:
            return product.price * self.food_discount_rate
        if product.is_beverage:
            return product.price * self.beverage_discount_rate
        return Decimal("0")


DEFAULT_POLICY = PricingPolicy()

__all__ = ["CENT", "DEFAULT_POLICY", "PricingPolicy", "to_cents"]
