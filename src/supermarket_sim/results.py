"""Result values returned by every engine command.

Expected outcomes (a full cart, a locked exit, a blocked step) are reported
through these values instead of exceptions. The presentation layer decides
how to show ``message`` and may branch on ``reason``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .geometry import Point

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .checkout.receipt import Receipt


class Denial(Enum):
    BLOCKED = "blocked"
    CONTAINER_FULL = "container_full"
    TYPE_NOT_ALLOWED = "type_not_allowed"
    UNDERAGE = "underage"
    HANDS_FULL = "hands_full"
    ALREADY_HAS_EQUIPMENT = "already_has_equipment"
    HANDS_NOT_EMPTY = "hands_not_empty"
    CANNOT_RETRIEVE = "cannot_retrieve"
    EQUIPMENT_NOT_EMPTY = "equipment_not_empty"
    NOTHING_TO_PAY = "nothing_to_pay"
    ALREADY_CHECKED_OUT = "already_checked_out"
    EQUIPMENT_STILL_HELD = "equipment_still_held"
    UNPAID_PRODUCTS = "unpaid_products"
    NOT_FOUND = "not_found"
    NOTHING_THERE = "nothing_there"
    SESSION_OVER = "session_over"


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a command.

    Attributes:
        success: Whether the command took effect.
        message: A user-facing message describing the outcome.
        reason: Why the command was denied; None on success.
    """

    success: bool
    message: str
    reason: Optional[Denial] = None

    @classmethod
    def ok(cls, message: str) -> "ActionResult":
        return cls(True, message)

    @classmethod
    def denied(cls, reason: Denial, message: str) -> "ActionResult":
        return cls(False, message, reason)

    def __bool__(self) -> bool:
        return self.success


@dataclass(frozen=True)
class InteractionResult(ActionResult):
    """Outcome of ``Amenity.interact``.

    ``receipt`` is only set by a successful checkout.
    """

    amenity: str = ""
    receipt: Optional["Receipt"] = None
    receipt_saved: Optional[bool] = None

    @classmethod
    def info(cls, amenity: str, message: str) -> "InteractionResult":
        return cls(True, message, None, amenity)

    @classmethod
    def refuse(cls, amenity: str, reason: Denial, message: str) -> "InteractionResult":
        return cls(False, message, reason, amenity)


@dataclass(frozen=True)
class MoveResult:
    moved: bool
    position: Point
    floor: int
    message: str
    floor_changed: bool = False
    reason: Optional[Denial] = None
    interaction: Optional[InteractionResult] = None

    def __bool__(self) -> bool:
        return self.moved


__all__ = ["ActionResult", "Denial", "InteractionResult", "MoveResult"]
