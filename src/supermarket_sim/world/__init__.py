"""Amenity grid: tile kinds, floor plans and the two-floor store map."""
