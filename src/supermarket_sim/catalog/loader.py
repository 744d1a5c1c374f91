from __future__ import annotations

import logging
from decimal import Decimal
from importlib.resources import files as resource_files
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..exceptions import CatalogError
from .product import Product, classify

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_RESOURCE = "catalog.yaml"


class ProductRecord(BaseModel):
    """One product entry as authored in the catalog file."""

    serial: str = Field(..., min_length=1, description="Serial number; first three characters classify the product")
    name: str = Field(..., min_length=1, description="Display name")
    price: Decimal = Field(..., ge=0, description="Unit price in PHP")
    consumable: bool = Field(False, description="Edible or drinkable")
    beverage: bool = Field(False, description="Drinkable")

    @field_validator("serial")
    @classmethod
    def normalize_serial(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("price", mode="before")
    @classmethod
    def price_from_text(cls, v: object) -> object:
        # YAML floats go through str() so 85.1 does not become 85.0999...
        if isinstance(v, float):
            return str(v)
        return v

    def to_product(self) -> Product:
        return Product(
            serial=self.serial,
            name=self.name,
            price=self.price,
            is_consumable=self.consumable,
            is_beverage=self.beverage,
        )


class Catalog:
    """Ordered, serial-indexed collection of catalog products."""

    def __init__(self, products: List[Product]) -> None:
        self._products: List[Product] = []
        self._by_serial: Dict[str, Product] = {}
        for product in products:
            if product.serial in self._by_serial:
                raise CatalogError(f"Duplicate serial in catalog: {product.serial}")
            self._by_serial[product.serial] = product
            self._products.append(product)

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products)

    def __len__(self) -> int:
        return len(self._products)

    def get(self, serial: str) -> Optional[Product]:
        return self._by_serial.get(serial.strip().upper())

    def by_prefix(self, prefix: str) -> List[Product]:
        """Products of one classification, in catalog order."""
        return [p for p in self._products if classify(p.serial) == prefix]

    def prefixes(self) -> List[str]:
        seen: Dict[str, None] = {}
        for p in self._products:
            seen.setdefault(p.prefix, None)
        return list(seen)

    @classmethod
    def from_records(cls, records: List[dict]) -> "Catalog":
        products: List[Product] = []
        for i, raw in enumerate(records):
            try:
                products.append(ProductRecord(**raw).to_product())
            except (TypeError, ValidationError) as e:
                raise CatalogError(f"Invalid catalog record #{i}: {e}") from e
        return cls(products)


def load_catalog(path: Optional[Union[str, Path]] = None) -> Catalog:
    """Load the product catalog from YAML.

    If path is None, loads the bundled resource supermarket_sim/data/catalog.yaml.
    """
    if path is None:
        text = resource_files("supermarket_sim.data").joinpath(DEFAULT_CATALOG_RESOURCE).read_text(encoding="utf-8")
        logger.debug("Loaded embedded catalog resource")
    else:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        logger.debug("Loaded catalog from path: %s", path)

    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise CatalogError(f"Could not parse catalog {path or DEFAULT_CATALOG_RESOURCE}: {e}") from e
    records = raw.get("products", []) if isinstance(raw, dict) else []
    if not isinstance(records, list):
        raise CatalogError("Catalog 'products' must be a list")
    catalog = Catalog.from_records(records)
    logger.info("Catalog loaded: %d products in %d classes", len(catalog), len(catalog.prefixes()))
    return catalog


__all__ = ["Catalog", "ProductRecord", "load_catalog"]
