from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ..checkout.pricing import PricingPolicy
from ..checkout.receipt import compute_receipt
from ..containers.equipment import Equipment, EquipmentKind
from ..geometry import Point
from ..results import Denial, InteractionResult
from .base import Amenity, AmenityKind

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..shopper import Shopper

logger = logging.getLogger(__name__)


class Entrance(Amenity):
    """Start tile. Passable until the shopper first steps off it, then sealed for good."""

    kind = AmenityKind.ENTRANCE

    def __init__(self, position: Point) -> None:
        super().__init__(position)
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def is_passable(self) -> bool:
        return not self._sealed

    def vacated(self, shopper: "Shopper") -> None:
        if not self._sealed:
            logger.debug("Entrance at %s sealed behind %s", self.position, shopper.name)
        self._sealed = True

    def interact(self, shopper: "Shopper") -> InteractionResult:
        if not self._sealed:
            return InteractionResult.info(
                self.label, "You are at the Entrance. Move to enter the supermarket."
            )
        return InteractionResult.info(self.label, "The entrance is locked. You must proceed to the Checkout/Exit.")


class Exit(Amenity):
    """Barrier tile; a successful interaction ends the session."""

    kind = AmenityKind.EXIT

    def interact(self, shopper: "Shopper") -> InteractionResult:
        if shopper.has_equipment:
            logger.warning("Exit denied for %s: equipment still held", shopper.name)
            return InteractionResult.refuse(
                self.label, Denial.EQUIPMENT_STILL_HELD, "Exit denied: please return your Cart/Basket first."
            )
        if shopper.all_products() and not shopper.checked_out:
            logger.warning("Exit denied for %s: unpaid products", shopper.name)
            return InteractionResult.refuse(
                self.label, Denial.UNPAID_PRODUCTS, "Exit denied: you have items! Please pay at the counter first."
            )
        shopper.mark_exited()
        logger.info("%s left the supermarket", shopper.name)
        return InteractionResult.info(self.label, "Thank you for shopping! Goodbye.")


class Stairs(Amenity):
    """Passable tile; stepping onto it switches floors (handled by ``Shopper.move``)."""

    kind = AmenityKind.STAIRS
    passable = True

    def interact(self, shopper: "Shopper") -> InteractionResult:
        return InteractionResult.info(self.label, "Walk onto this tile to travel between floors.")


class ProductSearch(Amenity):
    """Search terminal. The query itself is ``SupermarketMap.search``."""

    kind = AmenityKind.PRODUCT_SEARCH

    def interact(self, shopper: "Shopper") -> InteractionResult:
        return InteractionResult.info(self.label, "Product Search Terminal: enter a product name to locate it.")


class EquipmentStation(Amenity):
    """Hands out and takes back one kind of equipment."""

    equipment_kind: EquipmentKind

    def interact(self, shopper: "Shopper") -> InteractionResult:
        noun = self.equipment_kind.label
        held = shopper.equipment

        if held is not None and held.kind is self.equipment_kind:
            if not held.is_empty():
                return InteractionResult.refuse(
                    self.label, Denial.EQUIPMENT_NOT_EMPTY, f"Cannot return {noun.lower()}: it is not empty."
                )
            shopper.release_equipment()
            return InteractionResult.info(self.label, f"{noun} returned. Thank you!")

        if held is None and not shopper.hand_carried and not shopper.checked_out:
            equipment = Equipment(self.equipment_kind)
            shopper.acquire_equipment(equipment)
            return InteractionResult.info(self.label, f"{noun} retrieved! Capacity: {equipment.capacity}.")

        if held is not None:
            reason, message = Denial.ALREADY_HAS_EQUIPMENT, "You already have equipment."
        elif shopper.hand_carried:
            reason, message = Denial.HANDS_NOT_EMPTY, f"Your hands must be empty to grab a {noun.lower()}."
        else:
            reason, message = Denial.CANNOT_RETRIEVE, f"Cannot retrieve {noun.lower()}."
        logger.debug("%s denied for %s: %s", self.label, shopper.name, reason.value)
        return InteractionResult.refuse(self.label, reason, message)


class CartStation(EquipmentStation):
    kind = AmenityKind.CART_STATION
    equipment_kind = EquipmentKind.CART


class BasketStation(EquipmentStation):
    kind = AmenityKind.BASKET_STATION
    equipment_kind = EquipmentKind.BASKET


class CheckoutCounter(Amenity):
    """Passable tile where the shopper pays.

    A successful interaction attaches the receipt to the result and then
    finalises the shopper: hands cleared, equipment released, checked out.
    Writing the receipt somewhere is the caller's job and cannot undo this.
    """

    kind = AmenityKind.CHECKOUT_COUNTER
    passable = True

    def __init__(self, position: Point, policy: Optional[PricingPolicy] = None) -> None:
        super().__init__(position)
        self.policy = policy

    def interact(self, shopper: "Shopper") -> InteractionResult:
        if shopper.checked_out:
            logger.warning("Checkout denied for %s: already paid", shopper.name)
            return InteractionResult.refuse(
                self.label, Denial.ALREADY_CHECKED_OUT, "You have already paid for your items."
            )
        items = shopper.all_products()
        if not items:
            logger.warning("Checkout denied for %s: nothing to pay for", shopper.name)
            return InteractionResult.refuse(
                self.label, Denial.NOTHING_TO_PAY, "Checkout denied: you have no products to pay for."
            )

        policy = self.policy or shopper.policy
        receipt = compute_receipt(shopper.name, shopper.age, items, policy)

        shopper.release_equipment()
        shopper.clear_hands()
        shopper.mark_checked_out()
        logger.info(
            "%s checked out %d items: total=%s discount=%s paid=%s",
            shopper.name,
            receipt.item_count,
            receipt.total_price,
            receipt.total_discount,
            receipt.final_total,
        )
        message = (
            f"Total: PHP {receipt.total_price:.2f}\n"
            f"Discount: PHP {receipt.total_discount:.2f}\n"
            f"Paid: PHP {receipt.final_total:.2f}"
        )
        return InteractionResult(True, message, None, self.label, receipt)


__all__ = [
    "BasketStation",
    "CartStation",
    "CheckoutCounter",
    "Entrance",
    "EquipmentStation",
    "Exit",
    "ProductSearch",
    "Stairs",
]
