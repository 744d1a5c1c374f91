from __future__ import annotations

import logging
from dataclasses import dataclass, field
from importlib.resources import files as resource_files
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import yaml

from ..catalog.loader import Catalog
from ..checkout.pricing import PricingPolicy
from ..containers.displays import Display, DisplayKind
from ..exceptions import LayoutError
from ..geometry import Point
from .base import Amenity, Wall
from .services import BasketStation, CartStation, CheckoutCounter, Entrance, Exit, ProductSearch, Stairs

logger = logging.getLogger(__name__)

DEFAULT_LAYOUT_RESOURCE = "store.yaml"
FLOOR_TOKEN = "floor"

Grid = List[List[Optional[Amenity]]]
AmenityFactory = Callable[[Point, str, Optional[PricingPolicy]], Amenity]

# Kind names used in the layout legend.
AMENITY_FACTORIES: Dict[str, AmenityFactory] = {
    "wall": lambda pos, addr, policy: Wall(pos),
    "shelf": lambda pos, addr, policy: Display(DisplayKind.SHELF, pos, addr),
    "table": lambda pos, addr, policy: Display(DisplayKind.TABLE, pos, addr),
    "chilled_counter": lambda pos, addr, policy: Display(DisplayKind.CHILLED_COUNTER, pos, addr),
    "refrigerator": lambda pos, addr, policy: Display(DisplayKind.REFRIGERATOR, pos, addr),
    "entrance": lambda pos, addr, policy: Entrance(pos),
    "exit": lambda pos, addr, policy: Exit(pos),
    "checkout_counter": lambda pos, addr, policy: CheckoutCounter(pos, policy),
    "stairs": lambda pos, addr, policy: Stairs(pos),
    "cart_station": lambda pos, addr, policy: CartStation(pos),
    "basket_station": lambda pos, addr, policy: BasketStation(pos),
    "product_search": lambda pos, addr, policy: ProductSearch(pos),
}


@dataclass(frozen=True)
class StockZone:
    """Assigns a product class to displays inside a rectangle (inclusive bounds)."""

    prefix: str
    display: Optional[DisplayKind] = None
    rows: Tuple[int, int] = (0, 10**6)
    cols: Tuple[int, int] = (0, 10**6)

    def matches(self, display: Display) -> bool:
        if self.display is not None and display.display_kind is not self.display:
            return False
        x, y = display.position.x, display.position.y
        return self.rows[0] <= y <= self.rows[1] and self.cols[0] <= x <= self.cols[1]


@dataclass
class FloorPlan:
    name: str
    rows: List[List[str]]
    zones: List[StockZone] = field(default_factory=list)

    def zone_for(self, display: Display) -> Optional[StockZone]:
        for zone in self.zones:
            if zone.matches(display):
                return zone
        return None


@dataclass
class StoreLayout:
    size: int
    entry: Point
    entry_floor: int
    legend: Dict[str, str]
    floors: List[FloorPlan]

    def floor_name(self, index: int) -> str:
        return self.floors[index].name


def _pair(raw: object, what: str) -> Tuple[int, int]:
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise LayoutError(f"{what} must be a [min, max] pair, got {raw!r}")
    lo, hi = int(raw[0]), int(raw[1])
    if lo > hi:
        raise LayoutError(f"{what} range is inverted: {raw!r}")
    return lo, hi


def _parse_zone(raw: dict) -> StockZone:
    if not isinstance(raw, dict) or "prefix" not in raw:
        raise LayoutError(f"Stock zone needs a prefix: {raw!r}")
    display = None
    if raw.get("display") is not None:
        try:
            display = DisplayKind[str(raw["display"]).upper()]
        except KeyError as e:
            raise LayoutError(f"Unknown display kind in zone: {raw['display']!r}") from e
    zone = StockZone(prefix=str(raw["prefix"]).strip().upper(), display=display)
    if "rows" in raw:
        zone = StockZone(zone.prefix, zone.display, _pair(raw["rows"], "rows"), zone.cols)
    if "cols" in raw:
        zone = StockZone(zone.prefix, zone.display, zone.rows, _pair(raw["cols"], "cols"))
    return zone


def parse_layout(data: dict) -> StoreLayout:
    """Validate the raw YAML mapping and turn it into a StoreLayout."""
    if not isinstance(data, dict):
        raise LayoutError("Layout document must be a mapping")
    try:
        size = int(data["size"])
        entry_raw = data["entry"]
        entry = Point(int(entry_raw["x"]), int(entry_raw["y"]))
        entry_floor = int(entry_raw.get("floor", 0))
        legend = {str(k): str(v) for k, v in (data.get("legend") or {}).items()}
        floors_raw = data["floors"]
    except (KeyError, TypeError, ValueError) as e:
        raise LayoutError(f"Malformed layout header: {e}") from e

    for token, kind in legend.items():
        if kind != FLOOR_TOKEN and kind not in AMENITY_FACTORIES:
            raise LayoutError(f"Legend token {token!r} maps to unknown kind {kind!r}")
    if not isinstance(floors_raw, list) or len(floors_raw) != 2:
        raise LayoutError("Layout must describe exactly two floors")

    floors: List[FloorPlan] = []
    for index, floor_raw in enumerate(floors_raw):
        rows = [str(line).split() for line in floor_raw.get("rows", [])]
        if len(rows) != size:
            raise LayoutError(f"Floor {index} has {len(rows)} rows; expected {size}")
        for r, row in enumerate(rows):
            if len(row) != size:
                raise LayoutError(f"Floor {index} row {r} has {len(row)} tokens; expected {size}")
        zones = [_parse_zone(z) for z in floor_raw.get("zones", []) or []]
        floors.append(FloorPlan(name=str(floor_raw.get("name", f"F{index + 1}")), rows=rows, zones=zones))

    if not (0 <= entry.x < size and 0 <= entry.y < size and 0 <= entry_floor < len(floors)):
        raise LayoutError(f"Entry point {entry} on floor {entry_floor} is outside the store")
    return StoreLayout(size=size, entry=entry, entry_floor=entry_floor, legend=legend, floors=floors)


def load_layout(path: Optional[Union[str, Path]] = None) -> StoreLayout:
    """Load the store layout from YAML.

    If path is None, loads the bundled resource supermarket_sim/data/store.yaml.
    """
    if path is None:
        text = resource_files("supermarket_sim.data").joinpath(DEFAULT_LAYOUT_RESOURCE).read_text(encoding="utf-8")
        logger.debug("Loaded embedded store layout resource")
    else:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        logger.debug("Loaded store layout from path: %s", path)
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise LayoutError(f"Could not parse layout {path or DEFAULT_LAYOUT_RESOURCE}: {e}") from e
    return parse_layout(data)


def build_floor(
    plan: FloorPlan,
    size: int,
    legend: Dict[str, str],
    policy: Optional[PricingPolicy] = None,
) -> Tuple[Grid, List[Display]]:
    """Instantiate one floor's amenities. Returns the grid (grid[y][x]) and its displays in row-major order."""
    grid: Grid = [[None for _ in range(size)] for _ in range(size)]
    displays: List[Display] = []
    for y, row in enumerate(plan.rows):
        for x, token in enumerate(row):
            kind = legend.get(token)
            if kind is None:
                raise LayoutError(f"Unknown token {token!r} at {plan.name} R{y}C{x}")
            pos = Point(x, y)
            amenity: Optional[Amenity] = None
            if kind != FLOOR_TOKEN:
                amenity = AMENITY_FACTORIES[kind](pos, f"{plan.name}, R{y}C{x}", policy)
            if amenity is None and (x in (0, size - 1) or y in (0, size - 1)):
                amenity = Wall(pos)
            if isinstance(amenity, Display):
                displays.append(amenity)
            grid[y][x] = amenity
    logger.debug("Built floor %s: %d displays", plan.name, len(displays))
    return grid, displays


def stock_displays(plans: Sequence[FloorPlan], displays_by_floor: Sequence[List[Display]], catalog: Catalog) -> int:
    """Fill every zoned display with one product variant of its class.

    Displays of the same class take the class's variants in turn, in the
    order the displays were built. Returns the number of displays stocked.
    """
    turns: Dict[str, int] = {}
    stocked = 0
    for plan, displays in zip(plans, displays_by_floor):
        for display in displays:
            zone = plan.zone_for(display)
            if zone is None:
                continue
            variants = catalog.by_prefix(zone.prefix)
            if not variants:
                logger.warning("No catalog products for class %s (display %s)", zone.prefix, display.address)
                continue
            turn = turns.get(zone.prefix, 0)
            turns[zone.prefix] = turn + 1
            product = variants[turn % len(variants)]
            if not display.admits(product):
                logger.warning("%s at %s does not accept class %s", display.label, display.address, zone.prefix)
                continue
            display.restock(product)
            stocked += 1
    logger.info("Stocked %d displays", stocked)
    return stocked


__all__ = [
    "AMENITY_FACTORIES",
    "FloorPlan",
    "Grid",
    "StockZone",
    "StoreLayout",
    "build_floor",
    "load_layout",
    "parse_layout",
    "stock_displays",
]
