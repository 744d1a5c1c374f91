"""Checkout engine: pricing rules, receipt assembly and receipt persistence."""
