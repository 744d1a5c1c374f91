from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from ..geometry import Point
from ..results import InteractionResult

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..shopper import Shopper


class AmenityKind(Enum):
    """Closed set of tile kinds on a supermarket floor."""

    WALL = "wall"
    DISPLAY = "display"
    ENTRANCE = "entrance"
    EXIT = "exit"
    CHECKOUT_COUNTER = "checkout_counter"
    STAIRS = "stairs"
    CART_STATION = "cart_station"
    BASKET_STATION = "basket_station"
    PRODUCT_SEARCH = "product_search"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class Amenity:
    """A fixed tile on the grid.

    Amenities are barriers unless a kind says otherwise. ``interact`` is what
    happens when the shopper uses the tile (facing it, or stepping onto a
    passable one).
    """

    kind: ClassVar[AmenityKind]
    passable: ClassVar[bool] = False

    def __init__(self, position: Point) -> None:
        self.position = position

    @property
    def label(self) -> str:
        return self.kind.label

    def is_passable(self) -> bool:
        return self.passable

    def interact(self, shopper: "Shopper") -> InteractionResult:
        return InteractionResult.info(self.label, f"{self.label} at {self.position}.")

    def vacated(self, shopper: "Shopper") -> None:
        """Called when the shopper steps off this tile."""

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<{type(self).__name__} pos={self.position}>"


class Wall(Amenity):
    kind = AmenityKind.WALL

    def interact(self, shopper: "Shopper") -> InteractionResult:
        return InteractionResult.info(self.label, "You are facing a wall. Nothing here.")


__all__ = ["Amenity", "AmenityKind", "Wall"]
