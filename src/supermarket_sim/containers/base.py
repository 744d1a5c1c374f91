from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..catalog.product import Product
from ..results import Denial

logger = logging.getLogger(__name__)


class Container:
    """Capacity-bounded, ordered product storage split into fixed-size tiers.

    A flat container is a single tier. Insertion goes to the first tier, in
    tier order, that still has room; the total size can never exceed
    ``capacity`` because every insertion is checked first.

    Subclasses narrow admission by overriding :meth:`admits`.
    """

    def __init__(self, tiers: int, tier_capacity: int) -> None:
        if tiers <= 0 or tier_capacity <= 0:
            raise ValueError("Container tiers and tier capacity must be positive")
        self._tier_capacity = int(tier_capacity)
        self._tiers: List[List[Product]] = [[] for _ in range(int(tiers))]

    # ------------------------ Queries ------------------------
    @property
    def capacity(self) -> int:
        return self._tier_capacity * len(self._tiers)

    @property
    def tier_capacity(self) -> int:
        return self._tier_capacity

    @property
    def tiers(self) -> Tuple[Tuple[Product, ...], ...]:
        """Read-only view of every tier."""
        return tuple(tuple(t) for t in self._tiers)

    @property
    def products(self) -> Tuple[Product, ...]:
        """Flat read-only view across tiers, in tier order."""
        return tuple(p for tier in self._tiers for p in tier)

    def __len__(self) -> int:
        return sum(len(t) for t in self._tiers)

    def is_full(self) -> bool:
        return all(len(t) >= self._tier_capacity for t in self._tiers)

    def is_empty(self) -> bool:
        return len(self) == 0

    def contains_by_name(self, text: str) -> bool:
        """Case-insensitive substring match over stored product names."""
        needle = text.lower()
        return any(needle in p.name.lower() for p in self.products)

    # ------------------------ Admission ------------------------
    def admits(self, product: Product) -> bool:
        """Whether this container accepts this kind of product at all."""
        return True

    def check_add(self, product: Product) -> Optional[Denial]:
        """Return why ``add`` would fail, or None if it would succeed."""
        if not self.admits(product):
            return Denial.TYPE_NOT_ALLOWED
        if self.is_full():
            return Denial.CONTAINER_FULL
        return None

    # ------------------------ Mutation ------------------------
    def add(self, product: Product) -> bool:
        """Insert a product reference. Returns False with no mutation on denial."""
        denial = self.check_add(product)
        if denial is not None:
            logger.debug("%r rejected %s: %s", self, product.serial, denial.value)
            return False
        for tier in self._tiers:
            if len(tier) < self._tier_capacity:
                tier.append(product)
                return True
        return False  # pragma: no cover - is_full() already covers this

    def remove(self, product: Product) -> Optional[Product]:
        """Remove the first stored occurrence of this exact reference."""
        for tier in self._tiers:
            for i, stored in enumerate(tier):
                if stored is product:
                    return tier.pop(i)
        return None

    def product_at(self, index: int) -> Optional[Product]:
        """Product at a flattened slot index across tiers, or None."""
        located = self._locate(index)
        if located is None:
            return None
        tier, offset = located
        return self._tiers[tier][offset]

    def remove_at(self, index: int) -> Optional[Product]:
        located = self._locate(index)
        if located is None:
            return None
        tier, offset = located
        return self._tiers[tier].pop(offset)

    def clear(self) -> List[Product]:
        removed = list(self.products)
        for tier in self._tiers:
            tier.clear()
        return removed

    def _locate(self, index: int) -> Optional[Tuple[int, int]]:
        if index < 0:
            return None
        running = 0
        for t, tier in enumerate(self._tiers):
            if index < running + len(tier):
                return t, index - running
            running += len(tier)
        return None


__all__ = ["Container"]
