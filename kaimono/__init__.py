"""Kaimono: shopping cart HTTP API with session and admin scopes."""

__version__ = "1.0.0"
