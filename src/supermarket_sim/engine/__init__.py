"""Presentation-facing session API over the store map and shopper."""
