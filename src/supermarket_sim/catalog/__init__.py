from .loader import Catalog, ProductRecord, load_catalog
from .product import ALCOHOL_PREFIX, Product, classify
from .summary import ProductSummary, summarize_by_name, summarize_by_serial

__all__ = [
    "ALCOHOL_PREFIX",
    "Catalog",
    "Product",
    "ProductRecord",
    "ProductSummary",
    "classify",
    "load_catalog",
    "summarize_by_name",
    "summarize_by_serial",
]
