"""
Supermarket simulator package root.

The rule engine (tiles, containers, shopper state machine, checkout) lives in
pure-Python modules with no presentation dependencies. Front ends drive it
through :class:`supermarket_sim.engine.session.SupermarketSession`.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
