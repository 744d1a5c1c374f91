from __future__ import annotations

from enum import Enum

from .base import Container


class EquipmentKind(Enum):
    """Movable containers a shopper can borrow. Values are (label, capacity)."""

    CART = ("Cart", 30)
    BASKET = ("Basket", 15)

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def capacity(self) -> int:
        return self.value[1]


class Equipment(Container):
    """A flat container that admits any product."""

    def __init__(self, kind: EquipmentKind) -> None:
        super().__init__(tiers=1, tier_capacity=kind.capacity)
        self.kind = kind

    @property
    def name(self) -> str:
        return self.kind.label

    def __repr__(self) -> str:
        return f"<{self.name} {len(self)}/{self.capacity}>"


__all__ = ["Equipment", "EquipmentKind"]
