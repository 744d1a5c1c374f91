from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Protocol, Union

from .receipt import Receipt, format_receipt

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]+")


class ReceiptSink(Protocol):
    """Anything that can persist a receipt. Raises OSError on failure."""

    def write(self, receipt: Receipt) -> object: ...


def receipt_filename(shopper_name: str) -> str:
    slug = _UNSAFE.sub("_", shopper_name.strip()) or "shopper"
    return f"receipt_{slug}.txt"


class ReceiptWriter:
    """Writes plain-text receipts into a directory, one file per shopper."""

    def __init__(self, directory: Union[str, Path] = ".") -> None:
        self.directory = Path(directory)

    def path_for(self, receipt: Receipt) -> Path:
        return self.directory / receipt_filename(receipt.shopper_name)

    def write(self, receipt: Receipt) -> Path:
        path = self.path_for(receipt)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            f.write(format_receipt(receipt))
        logger.info("Saved receipt to %s", path)
        return path


__all__ = ["ReceiptSink", "ReceiptWriter", "receipt_filename"]
