"""Catalog models for product variant and inventory data."""

from collections.abc import Iterable
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

LOW_STOCK_THRESHOLD = 10


class StockStatus(str, Enum):
    """Coarse availability band for a catalog item."""

    OUT_OF_STOCK = "out_of_stock"
    LOW_STOCK = "low_stock"
    IN_STOCK = "in_stock"


class CatalogItem(BaseModel):
    """
    One sellable variant of a Shopify product.

    Several items can share the same product_id; name and image_url are
    copied from the parent product onto each of its variants.
    """

    product_id: str = Field(description="Platform product ID of the parent product")
    image_url: str = Field(default="", description="Featured image URL, empty if none")
    name: str = Field(description="Product title")
    sku: str = Field(default="", description="Variant SKU, empty if absent")
    inventory_level: int = Field(
        default=0,
        ge=0,
        description="Sum of available quantities across stock locations",
    )
    inventory_item_id: str = Field(
        default="",
        description="Inventory item ID, empty if the platform reports none",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "gid://shopify/Product/123",
                    "image_url": "https://cdn.shopify.com/s/files/widget.jpg",
                    "name": "Example Widget",
                    "sku": "SKU-001",
                    "inventory_level": 42,
                    "inventory_item_id": "gid://shopify/InventoryItem/456",
                }
            ]
        }
    }

    @property
    def stock_status(self) -> StockStatus:
        if self.inventory_level == 0:
            return StockStatus.OUT_OF_STOCK
        if self.inventory_level < LOW_STOCK_THRESHOLD:
            return StockStatus.LOW_STOCK
        return StockStatus.IN_STOCK

    def matches(self, text: str) -> bool:
        """Case-insensitive substring match on SKU or name."""
        needle = text.lower()
        return needle in self.sku.lower() or needle in self.name.lower()


def filter_items(items: Iterable[CatalogItem], text: str | None) -> list[CatalogItem]:
    """Return items whose SKU or name contains text; blank text keeps everything."""
    if not text or not text.strip():
        return list(items)
    needle = text.strip()
    return [item for item in items if item.matches(needle)]


class SyncOutcome(BaseModel):
    """Result of one sync run, delivered to the caller on completion."""

    succeeded: bool
    items: list[CatalogItem] = Field(default_factory=list)
    error: str | None = Field(default=None, description="Short user-facing message on failure")
    started_at: datetime
    finished_at: datetime

    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()


class Catalog:
    """
    Caller-owned holder for the most recent successful sync.

    The item list is only ever swapped wholesale, so readers see either the
    previous catalog or the new one, never a mix.
    """

    def __init__(self, items: Iterable[CatalogItem] = ()) -> None:
        self._items: tuple[CatalogItem, ...] = tuple(items)
        self.last_synced_at: datetime | None = None

    @property
    def items(self) -> tuple[CatalogItem, ...]:
        return self._items

    def replace(self, items: Iterable[CatalogItem]) -> None:
        self._items = tuple(items)
        self.last_synced_at = datetime.now(timezone.utc)

    def search(self, text: str | None) -> list[CatalogItem]:
        return filter_items(self._items, text)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)
