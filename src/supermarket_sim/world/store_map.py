from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..catalog.loader import Catalog, load_catalog
from ..catalog.product import Product
from ..checkout.pricing import PricingPolicy
from ..containers.displays import Display, DisplayKind
from ..geometry import Direction, Point
from .base import Amenity, AmenityKind
from .layout import Grid, StoreLayout, build_floor, load_layout, stock_displays

logger = logging.getLogger(__name__)

GLYPHS: Dict[AmenityKind, str] = {
    AmenityKind.WALL: "#",
    AmenityKind.ENTRANCE: "E",
    AmenityKind.EXIT: "X",
    AmenityKind.CHECKOUT_COUNTER: "$",
    AmenityKind.STAIRS: "^",
    AmenityKind.CART_STATION: "C",
    AmenityKind.BASKET_STATION: "B",
    AmenityKind.PRODUCT_SEARCH: "?",
}
DISPLAY_GLYPHS: Dict[DisplayKind, str] = {
    DisplayKind.SHELF: "=",
    DisplayKind.TABLE: "t",
    DisplayKind.CHILLED_COUNTER: "r",
    DisplayKind.REFRIGERATOR: "f",
}


class SupermarketMap:
    """Two fixed floors of amenities plus the product catalog.

    Built once; tiles are never added or removed afterwards, only the
    contents of displays change. Out-of-range lookups return None, like an
    empty tile.
    """

    def __init__(
        self,
        floors: Sequence[Grid],
        catalog: Catalog,
        displays: Sequence[Display],
        entry: Point,
        entry_floor: int = 0,
        floor_names: Sequence[str] = ("GF", "2F"),
    ) -> None:
        if not floors:
            raise ValueError("SupermarketMap needs at least one floor")
        self._floors: List[Grid] = list(floors)
        self._height = len(self._floors[0])
        self._width = len(self._floors[0][0]) if self._height else 0
        self.catalog = catalog
        self._displays: List[Display] = list(displays)
        self.entry = entry
        self.entry_floor = entry_floor
        self.floor_names: Tuple[str, ...] = tuple(floor_names)

    @classmethod
    def from_layout(
        cls,
        layout: StoreLayout,
        catalog: Catalog,
        policy: Optional[PricingPolicy] = None,
        stock: bool = True,
    ) -> "SupermarketMap":
        grids: List[Grid] = []
        per_floor: List[List[Display]] = []
        for plan in layout.floors:
            grid, displays = build_floor(plan, layout.size, layout.legend, policy)
            grids.append(grid)
            per_floor.append(displays)
        if stock:
            stock_displays(layout.floors, per_floor, catalog)
        store = cls(
            floors=grids,
            catalog=catalog,
            displays=[d for ds in per_floor for d in ds],
            entry=layout.entry,
            entry_floor=layout.entry_floor,
            floor_names=[plan.name for plan in layout.floors],
        )
        logger.info("Supermarket built: %d floors, %d displays", store.floor_count, len(store.all_displays()))
        return store

    # ------------------------ Dimensions ------------------------
    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def floor_count(self) -> int:
        return len(self._floors)

    def floor_name(self, floor: int) -> str:
        return self.floor_names[floor] if 0 <= floor < len(self.floor_names) else str(floor)

    def is_within(self, x: int, y: int, floor: int = 0) -> bool:
        return 0 <= floor < len(self._floors) and 0 <= x < self._width and 0 <= y < self._height

    # ------------------------ Lookups ------------------------
    def amenity_at(self, x: int, y: int, floor: int) -> Optional[Amenity]:
        if not self.is_within(x, y, floor):
            return None
        return self._floors[floor][y][x]

    def amenity_in_front_of(self, position: Point, facing: Direction, floor: int) -> Optional[Amenity]:
        target = position.step(facing)
        return self.amenity_at(target.x, target.y, floor)

    def all_displays(self) -> List[Display]:
        return list(self._displays)

    def products(self) -> List[Product]:
        return list(self.catalog)

    def search(self, text: str) -> List[Display]:
        """Displays currently holding a product whose name contains ``text``."""
        if not text.strip():
            return []
        found = [d for d in self._displays if d.contains_by_name(text.strip())]
        logger.debug("Search %r matched %d displays", text, len(found))
        return found

    def find_all(self, kind: AmenityKind, floor: Optional[int] = None) -> List[Amenity]:
        floors = range(len(self._floors)) if floor is None else [floor]
        out: List[Amenity] = []
        for f in floors:
            for row in self._floors[f]:
                out.extend(a for a in row if a is not None and a.kind is kind)
        return out

    # ------------------------ Debugging ------------------------
    def to_lines(self, floor: int, marker: Optional[Point] = None) -> List[str]:
        """ASCII rendering of one floor; ``marker`` draws the shopper as '@'."""
        rows: List[str] = []
        for y in range(self._height):
            chars = []
            for x in range(self._width):
                if marker is not None and marker.x == x and marker.y == y:
                    chars.append("@")
                    continue
                amenity = self._floors[floor][y][x]
                if amenity is None:
                    chars.append(".")
                elif isinstance(amenity, Display):
                    chars.append(DISPLAY_GLYPHS[amenity.display_kind])
                else:
                    chars.append(GLYPHS.get(amenity.kind, "?"))
            rows.append("".join(chars))
        return rows

    def __repr__(self) -> str:
        return f"SupermarketMap(floors={self.floor_count}, width={self._width}, height={self._height})"


def load_supermarket(
    layout_path: Optional[Union[str, Path]] = None,
    catalog_path: Optional[Union[str, Path]] = None,
    policy: Optional[PricingPolicy] = None,
) -> SupermarketMap:
    """Build a stocked store from layout and catalog files (bundled defaults when None)."""
    return SupermarketMap.from_layout(load_layout(layout_path), load_catalog(catalog_path), policy)


__all__ = ["SupermarketMap", "load_supermarket"]
