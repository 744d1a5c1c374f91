from .base import Container
from .displays import Display, DisplayKind
from .equipment import Equipment, EquipmentKind

__all__ = [
    "Container",
    "Display",
    "DisplayKind",
    "Equipment",
    "EquipmentKind",
]
