from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

PREFIX_LENGTH = 3
ALCOHOL_PREFIX = "ALC"


def classify(serial: str) -> str:
    """Return the classification prefix of a serial number.

    Serials shorter than the prefix length classify as the empty prefix,
    which no display admits.
    """
    if not serial or len(serial) < PREFIX_LENGTH:
        return ""
    return serial[:PREFIX_LENGTH]


@dataclass(frozen=True)
class Product:
    """A catalog entry.

    Products are shared read-only references: stocking a display or putting an
    item in a cart moves the reference, it never copies or mutates it.
    """

    serial: str
    name: str
    price: Decimal
    is_consumable: bool = False
    is_beverage: bool = False

    @property
    def prefix(self) -> str:
        return classify(self.serial)

    @property
    def is_food(self) -> bool:
        return self.is_consumable and not self.is_beverage

    @property
    def is_alcohol(self) -> bool:
        return self.prefix == ALCOHOL_PREFIX

    def __str__(self) -> str:
        return f"{self.name} (PHP {self.price:.2f})"


__all__ = ["ALCOHOL_PREFIX", "PREFIX_LENGTH", "Product", "classify"]
