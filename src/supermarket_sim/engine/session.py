from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from ..catalog.product import Product
from ..catalog.summary import ProductSummary
from ..checkout.receipt import Receipt
from ..checkout.writer import ReceiptSink, ReceiptWriter
from ..containers.displays import Display
from ..geometry import Direction, Point
from ..results import ActionResult, Denial, InteractionResult, MoveResult
from ..settings import Settings
from ..shopper import Shopper
from ..world.base import Amenity, AmenityKind
from ..world.store_map import SupermarketMap, load_supermarket
from .events import SessionEvent

logger = logging.getLogger(__name__)

Listener = Callable[[SessionEvent, "SupermarketSession"], None]


@dataclass(frozen=True)
class ShopperSnapshot:
    """Immutable view of the shopper for rendering."""

    name: str
    age: int
    position: Point
    facing: Direction
    floor: int
    floor_name: str
    equipment: Optional[str]
    equipment_load: int
    equipment_capacity: int
    hand_carried: Tuple[Product, ...]
    products: Tuple[Product, ...]
    running_total: Decimal
    checked_out: bool
    exited: bool


class SupermarketSession:
    """One shopper's visit, from the entrance to the exit.

    Every command runs to completion before returning and either changes
    state or reports a denial; nothing raises for expected outcomes. The
    session is not thread-safe: front ends with several event sources must
    issue commands one at a time.
    """

    def __init__(self, store: SupermarketMap, shopper: Shopper, receipt_sink: Optional[ReceiptSink] = None) -> None:
        self.store = store
        self.shopper = shopper
        self.receipt_sink = receipt_sink
        self.last_receipt: Optional[Receipt] = None
        self._listeners: List[Listener] = []
        logger.info(
            "Session started for %s (age %d) at %s on %s",
            shopper.name,
            shopper.age,
            shopper.position,
            store.floor_name(shopper.floor),
        )

    @classmethod
    def start(
        cls,
        name: str,
        age: int,
        settings: Optional[Settings] = None,
        store: Optional[SupermarketMap] = None,
        receipt_sink: Optional[ReceiptSink] = None,
    ) -> "SupermarketSession":
        """Build the store (unless given) and place a new shopper on its entry tile."""
        settings = settings or Settings()
        if store is None:
            store = load_supermarket(settings.layout_path, settings.catalog_path, settings.pricing)
        shopper = Shopper(name, age, store.entry, floor=store.entry_floor, policy=settings.pricing)
        sink = receipt_sink if receipt_sink is not None else ReceiptWriter(settings.receipt_dir)
        return cls(store, shopper, sink)

    # ------------------------ Listeners ------------------------
    def add_listener(self, listener: Listener) -> None:
        """Subscribe to session events (movement, floor change, checkout...)."""
        self._listeners.append(listener)

    def _emit(self, event: SessionEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, self)
            except Exception as ex:
                logger.exception("Listener errored on %s: %s", event, ex)

    # ------------------------ Commands ------------------------
    @property
    def is_over(self) -> bool:
        return self.shopper.exited

    def move(self, direction: Direction) -> MoveResult:
        if self.is_over:
            return MoveResult(False, self.shopper.position, self.shopper.floor, "The session is over.", reason=Denial.SESSION_OVER)
        equipment_before = self.shopper.equipment
        result = self.shopper.move(direction, self.store)
        if not result.moved:
            return result
        self._emit(SessionEvent.PLAYER_MOVED)
        if result.floor_changed:
            self._emit(SessionEvent.FLOOR_CHANGED)
        if result.interaction is not None:
            interaction = self._after_interaction(result.interaction, equipment_before)
            result = dataclasses.replace(result, interaction=interaction, message=interaction.message)
        return result

    def face(self, direction: Direction) -> ActionResult:
        if self.is_over:
            return ActionResult.denied(Denial.SESSION_OVER, "The session is over.")
        self.shopper.face(direction)
        return ActionResult.ok(f"Facing {direction.name.lower()}.")

    def interact_with_tile_in_front(self) -> InteractionResult:
        if self.is_over:
            return InteractionResult.refuse("", Denial.SESSION_OVER, "The session is over.")
        amenity = self.amenity_in_front_of()
        if amenity is None:
            return InteractionResult.refuse("", Denial.NOTHING_THERE, "There is nothing in front of you.")
        equipment_before = self.shopper.equipment
        return self._after_interaction(amenity.interact(self.shopper), equipment_before)

    def checkout(self) -> InteractionResult:
        """Pay at the counter the shopper is standing on or facing."""
        if self.is_over:
            return InteractionResult.refuse("", Denial.SESSION_OVER, "The session is over.")
        pos, floor = self.shopper.position, self.shopper.floor
        for amenity in (self.store.amenity_at(pos.x, pos.y, floor), self.amenity_in_front_of()):
            if amenity is not None and amenity.kind is AmenityKind.CHECKOUT_COUNTER:
                equipment_before = self.shopper.equipment
                return self._after_interaction(amenity.interact(self.shopper), equipment_before)
        return InteractionResult.refuse("", Denial.NOTHING_THERE, "There is no checkout counter here.")

    def take_product(self, display: Display, index: int) -> ActionResult:
        """Move the product in slot ``index`` of ``display`` to the shopper.

        The slot is only emptied once the shopper has accepted the product,
        so a denial leaves the display exactly as it was.
        """
        if self.is_over:
            return ActionResult.denied(Denial.SESSION_OVER, "The session is over.")
        product = display.product_at(index)
        if product is None:
            return ActionResult.denied(Denial.NOT_FOUND, "That slot is empty.")
        result = self.shopper.take_product(product)
        if not result.success:
            logger.debug("Take of %s from %s denied: %s", product.serial, display.address, result.reason)
            return result
        display.remove_at(index)
        logger.debug("%s took %s from %s", self.shopper.name, product.serial, display.address)
        self._emit(SessionEvent.PRODUCT_TAKEN)
        return result

    def return_product(self, display: Display, product: Product) -> ActionResult:
        """Put a held product back on a display that accepts it."""
        if self.is_over:
            return ActionResult.denied(Denial.SESSION_OVER, "The session is over.")
        if not self.shopper.holds(product):
            return ActionResult.denied(Denial.NOT_FOUND, f"You are not holding {product.name}.")
        denial = display.check_add(product)
        if denial is Denial.TYPE_NOT_ALLOWED:
            return ActionResult.denied(denial, f"Cannot return {product.name} here: wrong type of display.")
        if denial is not None:
            return ActionResult.denied(denial, f"Cannot return {product.name} here: the {display.label} is full.")
        self.shopper.return_product(product)
        display.add(product)
        logger.debug("%s returned %s to %s", self.shopper.name, product.serial, display.address)
        self._emit(SessionEvent.PRODUCT_RETURNED)
        return ActionResult.ok(f"Returned {product.name}")

    # ------------------------ Queries ------------------------
    def amenity_at(self, x: int, y: int, floor: int) -> Optional[Amenity]:
        return self.store.amenity_at(x, y, floor)

    def amenity_in_front_of(self) -> Optional[Amenity]:
        return self.store.amenity_in_front_of(self.shopper.position, self.shopper.facing, self.shopper.floor)

    def all_displays(self) -> List[Display]:
        return self.store.all_displays()

    def search_products(self, text: str) -> List[Display]:
        return self.store.search(text)

    def inventory(self) -> List[ProductSummary]:
        return self.shopper.inventory_summary()

    def snapshot(self) -> ShopperSnapshot:
        s = self.shopper
        equipment = s.equipment
        return ShopperSnapshot(
            name=s.name,
            age=s.age,
            position=s.position,
            facing=s.facing,
            floor=s.floor,
            floor_name=self.store.floor_name(s.floor),
            equipment=equipment.name if equipment is not None else None,
            equipment_load=len(equipment) if equipment is not None else 0,
            equipment_capacity=equipment.capacity if equipment is not None else 0,
            hand_carried=s.hand_carried,
            products=tuple(s.all_products()),
            running_total=s.running_total(),
            checked_out=s.checked_out,
            exited=s.exited,
        )

    # ------------------------ Internals ------------------------
    def _after_interaction(self, result: InteractionResult, equipment_before: object) -> InteractionResult:
        if self.shopper.equipment is not equipment_before:
            self._emit(SessionEvent.EQUIPMENT_CHANGED)
        if result.receipt is not None:
            self.last_receipt = result.receipt
            saved = self._persist(result.receipt)
            suffix = "Receipt saved to file." if saved else "Could not save receipt file."
            result = dataclasses.replace(result, receipt_saved=saved, message=f"{result.message}\n\n{suffix}")
            self._emit(SessionEvent.CHECKED_OUT)
        if self.shopper.exited:
            logger.info("Session over for %s", self.shopper.name)
            self._emit(SessionEvent.EXITED)
        return result

    def _persist(self, receipt: Receipt) -> bool:
        if self.receipt_sink is None:
            return False
        try:
            self.receipt_sink.write(receipt)
        except OSError as e:
            logger.warning("Could not save receipt for %s: %s", receipt.shopper_name, e)
            return False
        return True


__all__ = ["Listener", "ShopperSnapshot", "SupermarketSession"]
