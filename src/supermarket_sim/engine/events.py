from enum import Enum, auto


class SessionEvent(Enum):
    """Events emitted by SupermarketSession to notify front ends."""

    PLAYER_MOVED = auto()
    FLOOR_CHANGED = auto()
    PRODUCT_TAKEN = auto()
    PRODUCT_RETURNED = auto()
    EQUIPMENT_CHANGED = auto()
    CHECKED_OUT = auto()
    EXITED = auto()
