from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional, Protocol, Tuple

from .catalog.product import Product
from .catalog.summary import ProductSummary, summarize_by_name
from .checkout.pricing import DEFAULT_POLICY, PricingPolicy
from .containers.equipment import Equipment
from .geometry import Direction, Point
from .results import ActionResult, Denial, MoveResult
from .world.base import Amenity, AmenityKind

logger = logging.getLogger(__name__)

HAND_CAPACITY = 2
FLOOR_COUNT = 2


class GridView(Protocol):
    """The part of the store map the shopper needs to move around."""

    def amenity_at(self, x: int, y: int, floor: int) -> Optional[Amenity]: ...


def _remove_identical(items: List[Product], product: Product) -> Optional[Product]:
    for i, stored in enumerate(items):
        if stored is product:
            return items.pop(i)
    return None


class Shopper:
    """The single actor of a session.

    Holds position, facing and floor, plus what the shopper carries: either
    up to two hand-carried items or one piece of equipment, never both. The
    ``checked_out`` and ``exited`` flags only ever go from False to True.

    Map state is passed in per call (``move(direction, grid)``); the shopper
    keeps no reference to the store.
    """

    def __init__(
        self,
        name: str,
        age: int,
        position: Point,
        floor: int = 0,
        policy: PricingPolicy = DEFAULT_POLICY,
    ) -> None:
        if age < 0:
            raise ValueError("Shopper age cannot be negative")
        self._name = name
        self._age = int(age)
        self.position = position
        self.facing = Direction.NORTH
        self.floor = floor
        self.policy = policy
        self._equipment: Optional[Equipment] = None
        self._hand: List[Product] = []
        self._checked_out = False
        self._exited = False

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Shopper {self._name!r} age={self._age} pos={self.position} floor={self.floor}>"

    # ------------------------ Properties ------------------------
    @property
    def name(self) -> str:
        return self._name

    @property
    def age(self) -> int:
        return self._age

    @property
    def equipment(self) -> Optional[Equipment]:
        return self._equipment

    @property
    def has_equipment(self) -> bool:
        return self._equipment is not None

    @property
    def hand_carried(self) -> Tuple[Product, ...]:
        return tuple(self._hand)

    @property
    def checked_out(self) -> bool:
        return self._checked_out

    @property
    def exited(self) -> bool:
        return self._exited

    # ------------------------ Movement ------------------------
    def face(self, direction: Direction) -> None:
        self.facing = direction

    def move(self, direction: Direction, grid: GridView) -> MoveResult:
        """Attempt one step on the current floor.

        Empty tiles and passable amenities can be entered. Leaving an entrance
        seals it. Stepping onto stairs switches floors at the same (x, y)
        without interacting; any other amenity stepped onto is interacted
        with. Barriers leave the shopper in place.
        """
        target = self.position.step(direction)
        amenity = grid.amenity_at(target.x, target.y, self.floor)

        if amenity is not None and not amenity.is_passable():
            logger.debug("Blocked by %s at %s on floor %d", amenity.label, target, self.floor)
            return MoveResult(
                moved=False,
                position=self.position,
                floor=self.floor,
                message=f"Blocked by {amenity.label}.",
                reason=Denial.BLOCKED,
            )

        current = grid.amenity_at(self.position.x, self.position.y, self.floor)
        if current is not None:
            current.vacated(self)
        self.position = target

        if amenity is not None and amenity.kind is AmenityKind.STAIRS:
            old_floor = self.floor
            self.floor = (self.floor + 1) % FLOOR_COUNT
            logger.info("Traveled from floor %d to floor %d at %s", old_floor, self.floor, self.position)
            return MoveResult(
                moved=True,
                position=self.position,
                floor=self.floor,
                message=f"Traveled from floor {old_floor} to floor {self.floor}.",
                floor_changed=True,
            )

        interaction = amenity.interact(self) if amenity is not None else None
        logger.debug("Moved %s to %s on floor %d", direction.name, self.position, self.floor)
        return MoveResult(
            moved=True,
            position=self.position,
            floor=self.floor,
            message=interaction.message if interaction is not None else f"Moved {direction.name.lower()}.",
            interaction=interaction,
        )

    # ------------------------ Products ------------------------
    def take_product(self, product: Product) -> ActionResult:
        """Pick up a product into the equipment, or into a free hand.

        A failed take changes nothing, so the caller can leave the product
        where it came from.
        """
        if not self.policy.may_take(self._age, product):
            logger.debug("%s is underage for %s", self._name, product.serial)
            return ActionResult.denied(Denial.UNDERAGE, "Denied: You are underage!")
        if self._equipment is not None:
            if not self._equipment.add(product):
                return ActionResult.denied(Denial.CONTAINER_FULL, f"Your {self._equipment.name} is full!")
            return ActionResult.ok(f"You took: {product.name}")
        if len(self._hand) >= HAND_CAPACITY:
            return ActionResult.denied(Denial.HANDS_FULL, "Your hands are full!")
        self._hand.append(product)
        return ActionResult.ok(f"You took: {product.name}")

    def return_product(self, product: Product) -> Optional[Product]:
        """Give up a held product (hands first, then equipment)."""
        removed = _remove_identical(self._hand, product)
        if removed is not None:
            return removed
        if self._equipment is not None:
            return self._equipment.remove(product)
        return None

    def holds(self, product: Product) -> bool:
        return any(p is product for p in self.all_products())

    def all_products(self) -> List[Product]:
        """Hand-carried items followed by equipment contents (a copy)."""
        products = list(self._hand)
        if self._equipment is not None:
            products.extend(self._equipment.products)
        return products

    def inventory_summary(self) -> List[ProductSummary]:
        return summarize_by_name(self.all_products())

    def running_total(self) -> Decimal:
        return sum((p.price for p in self.all_products()), Decimal("0"))

    # ------------------------ Transitions used by amenities ------------------------
    def acquire_equipment(self, equipment: Equipment) -> None:
        if self._equipment is not None:
            raise ValueError("Shopper already holds equipment")
        if self._hand:
            raise ValueError("Shopper must have empty hands to take equipment")
        self._equipment = equipment
        logger.info("%s took a %s", self._name, equipment.name)

    def release_equipment(self) -> Optional[Equipment]:
        released, self._equipment = self._equipment, None
        if released is not None:
            logger.info("%s released the %s", self._name, released.name)
        return released

    def clear_hands(self) -> List[Product]:
        cleared = list(self._hand)
        self._hand.clear()
        return cleared

    def mark_checked_out(self) -> None:
        self._checked_out = True

    def mark_exited(self) -> None:
        self._exited = True


__all__ = ["FLOOR_COUNT", "HAND_CAPACITY", "GridView", "Shopper"]
