"""Domain models."""

from inventory_sync.models.catalog import (
    LOW_STOCK_THRESHOLD,
    Catalog,
    CatalogItem,
    StockStatus,
    SyncOutcome,
    filter_items,
)

__all__ = [
    "LOW_STOCK_THRESHOLD",
    "Catalog",
    "CatalogItem",
    "StockStatus",
    "SyncOutcome",
    "filter_items",
]
