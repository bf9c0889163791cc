"""Shopify catalog sync with an encrypted local credential store."""

__version__ = "0.1.0"
