import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from supermarket_sim.catalog import Catalog, Product  # noqa: E402
from supermarket_sim.geometry import Point  # noqa: E402
from supermarket_sim.shopper import Shopper  # noqa: E402
from supermarket_sim.world.layout import parse_layout  # noqa: E402
from supermarket_sim.world.store_map import SupermarketMap, load_supermarket  # noqa: E402

# A 6x6 two-floor store small enough to walk around by hand.
#
#   GF                       2F
#   w  w  w  w  w  w         w  w  w  w  w  w
#   w  sh .  cs .  w         w  f  .  .  .  w
#   w  .  .  .  .  w         w  .  .  .  .  w
#   w  st .  c  t  w         w  st .  .  .  w
#   w  .  .  .  .  w         w  .  .  .  .  w
#   w  ex en w  w  w         w  w  w  w  w  w
TINY_LAYOUT = {
    "size": 6,
    "entry": {"x": 2, "y": 5, "floor": 0},
    "legend": {
        "w": "wall",
        "b": "floor",
        "sh": "shelf",
        "t": "table",
        "f": "refrigerator",
        "c": "checkout_counter",
        "cs": "basket_station",
        "bs": "cart_station",
        "ex": "exit",
        "en": "entrance",
        "st": "stairs",
    },
    "floors": [
        {
            "name": "GF",
            "rows": [
                "w w w w w w",
                "w sh b cs b w",
                "w b b b b w",
                "w st b c t w",
                "w b b b b w",
                "w ex en w w w",
            ],
            "zones": [
                {"display": "shelf", "prefix": "ALC"},
                {"display": "table", "prefix": "FRU"},
            ],
        },
        {
            "name": "2F",
            "rows": [
                "w w w w w w",
                "w f b b b w",
                "w b b b b w",
                "w st b b b w",
                "w b b b b w",
                "w w w w w w",
            ],
            "zones": [{"display": "refrigerator", "prefix": "MLK"}],
        },
    ],
}

TINY_RECORDS = [
    {"serial": "ALC001", "name": "Pale Pilsen", "price": "60.00", "consumable": True, "beverage": True},
    {"serial": "FRU001", "name": "Apple", "price": "30.00", "consumable": True, "beverage": False},
    {"serial": "MLK001", "name": "Fresh Milk", "price": "95.00", "consumable": True, "beverage": True},
    {"serial": "SNK001", "name": "Potato Chips", "price": "40.00", "consumable": True, "beverage": False},
    {"serial": "CLE001", "name": "Dish Soap", "price": "50.00", "consumable": False, "beverage": False},
]


def make_product(serial, name=None, price="10.00", consumable=False, beverage=False):
    return Product(
        serial=serial,
        name=name or serial,
        price=Decimal(price),
        is_consumable=consumable,
        is_beverage=beverage,
    )


@pytest.fixture
def tiny_catalog():
    return Catalog.from_records(TINY_RECORDS)


@pytest.fixture
def tiny_layout():
    return parse_layout(TINY_LAYOUT)


@pytest.fixture
def tiny_store(tiny_layout, tiny_catalog):
    return SupermarketMap.from_layout(tiny_layout, tiny_catalog)


@pytest.fixture
def store():
    """The bundled two-floor store, freshly stocked."""
    return load_supermarket()


@pytest.fixture
def make_shopper():
    def _make(name="Juan", age=30, x=2, y=5, floor=0):
        return Shopper(name, age, Point(x, y), floor=floor)

    return _make
