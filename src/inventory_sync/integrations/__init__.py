"""Platform integrations for catalog data."""

from inventory_sync.integrations.base import CatalogProvider
from inventory_sync.integrations.shopify import ShopifyCatalogClient

__all__ = [
    "CatalogProvider",
    "ShopifyCatalogClient",
]
