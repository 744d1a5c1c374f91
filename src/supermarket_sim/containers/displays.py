from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, FrozenSet

from ..catalog.product import Product
from ..geometry import Point
from ..results import InteractionResult
from ..world.base import Amenity, AmenityKind
from .base import Container

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..shopper import Shopper

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DisplayGeometry:
    label: str
    tiers: int
    tier_capacity: int
    allowed_prefixes: FrozenSet[str]


class DisplayKind(Enum):
    """Stock-holding fixtures, each with fixed geometry and an allow-set."""

    SHELF = DisplayGeometry(
        "Shelf",
        tiers=2,
        tier_capacity=4,
        allowed_prefixes=frozenset(
            {
                # food and drink
                "CER", "NDL", "SNK", "CAN", "CON", "SFT", "JUC", "ALC",
                # household and personal care
                "CLE", "HOM", "HAR", "BOD", "DEN", "CLO", "STN", "PET",
            }
        ),
    )
    TABLE = DisplayGeometry("Table", tiers=1, tier_capacity=4, allowed_prefixes=frozenset({"FRU", "BRD", "EGG", "VEG"}))
    CHILLED_COUNTER = DisplayGeometry(
        "Chilled Counter", tiers=1, tier_capacity=3, allowed_prefixes=frozenset({"CHK", "BEF", "SEA"})
    )
    REFRIGERATOR = DisplayGeometry(
        "Refrigerator", tiers=3, tier_capacity=3, allowed_prefixes=frozenset({"FRZ", "CHS", "MLK"})
    )

    @property
    def geometry(self) -> DisplayGeometry:
        return self.value

    @property
    def label(self) -> str:
        return self.value.label

    def allows(self, prefix: str) -> bool:
        return bool(prefix) and prefix in self.value.allowed_prefixes


class Display(Amenity, Container):
    """A barrier tile holding products of a restricted set of classes.

    The shopper never walks onto a display; it is used by facing it. Taking
    and returning stock go through the session so the shopper's rules are
    applied before any slot changes.
    """

    kind = AmenityKind.DISPLAY

    def __init__(self, display_kind: DisplayKind, position: Point, address: str = "") -> None:
        Amenity.__init__(self, position)
        geometry = display_kind.geometry
        Container.__init__(self, tiers=geometry.tiers, tier_capacity=geometry.tier_capacity)
        self.display_kind = display_kind
        self.address = address or str(position)

    @property
    def label(self) -> str:
        return self.display_kind.label

    def admits(self, product: Product) -> bool:
        return self.display_kind.allows(product.prefix)

    def restock(self, product: Product) -> int:
        """Fill every free slot with the given product. Returns slots filled."""
        filled = 0
        while self.add(product):
            filled += 1
        if filled:
            logger.debug("Stocked %d x %s on %s at %s", filled, product.serial, self.label, self.address)
        return filled

    def interact(self, shopper: "Shopper") -> InteractionResult:
        if self.is_empty():
            return InteractionResult.info(self.label, f"{self.label} at {self.address} is empty.")
        return InteractionResult.info(
            self.label, f"{self.label} at {self.address}: {len(self)} of {self.capacity} slots stocked."
        )

    def __repr__(self) -> str:
        return f"<{self.label} {self.address} {len(self)}/{self.capacity}>"


__all__ = ["Display", "DisplayGeometry", "DisplayKind"]
