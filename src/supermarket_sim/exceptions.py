class SupermarketError(Exception):
    """Base exception for the supermarket simulator."""


class LayoutError(SupermarketError):
    """Raised when a floor plan cannot be turned into an amenity grid."""


class CatalogError(SupermarketError):
    """Raised for invalid or duplicate product catalog records."""


class SettingsError(SupermarketError):
    """Raised when a settings file exists but cannot be parsed."""
