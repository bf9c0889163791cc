"""Map Shopify GraphQL product nodes to CatalogItem records."""

from typing import Any

from pydantic import ValidationError

from inventory_sync.exceptions import UpstreamProtocolError
from inventory_sync.models.catalog import CatalogItem

INVALID_RESPONSE = "Invalid response from Shopify API"


def _object(value: Any, field: str) -> dict[str, Any]:
    """Return value as a JSON object; null is treated as an empty object."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise UpstreamProtocolError(
            INVALID_RESPONSE,
            detail=f"'{field}' should be an object, got {type(value).__name__}",
        )
    return value


def _text(value: Any, field: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise UpstreamProtocolError(
            INVALID_RESPONSE,
            detail=f"'{field}' should be a string, got {type(value).__name__}",
        )
    return value


def _edges(connection: Any, field: str) -> list[dict[str, Any]]:
    """Return edge nodes of a GraphQL connection; absent connections are empty."""
    edges = _object(connection, field).get("edges")
    if edges is None:
        return []
    if not isinstance(edges, list):
        raise UpstreamProtocolError(INVALID_RESPONSE, detail=f"'{field}.edges' should be a list")

    nodes = []
    for edge in edges:
        if not isinstance(edge, dict):
            raise UpstreamProtocolError(INVALID_RESPONSE, detail=f"null or malformed edge in '{field}'")
        nodes.append(_object(edge.get("node"), f"{field}.node"))
    return nodes


def _quantity(available: Any) -> int:
    # bool is an int subclass; integral floats such as 5.0 are accepted
    if isinstance(available, bool):
        raise UpstreamProtocolError(f"Invalid inventory quantity from Shopify: {available!r}")
    if isinstance(available, int):
        return available
    if isinstance(available, float) and available.is_integer():
        return int(available)
    if isinstance(available, str):
        try:
            return int(available)
        except ValueError as e:
            raise UpstreamProtocolError(
                f"Invalid inventory quantity from Shopify: {available!r}"
            ) from e
    raise UpstreamProtocolError(f"Invalid inventory quantity from Shopify: {available!r}")


def sum_available(inventory_item: dict[str, Any] | None) -> int:
    """
    Total the available quantity across an inventory item's stock locations.

    Locations reporting null or no 'available' count as 0. Shopify can report
    negative availability (oversold); the total is clamped at 0. Fractional
    quantities are rejected rather than truncated.
    """
    total = 0
    levels = _object(inventory_item, "inventoryItem").get("inventoryLevels")
    for level in _edges(levels, "inventoryLevels"):
        available = level.get("available")
        if available is None:
            continue
        total += _quantity(available)
    return max(total, 0)


def parse_product_node(node: dict[str, Any]) -> list[CatalogItem]:
    """
    Flatten one product node into one CatalogItem per variant.

    A product without variants yields no items. Image, SKU, and inventory
    item are optional and fall back to empty values. Any malformed nested
    shape raises UpstreamProtocolError.
    """
    node = _object(node, "product")
    product_id = node.get("id")
    if not product_id:
        raise UpstreamProtocolError("Product node from Shopify is missing its id")

    name = _text(node.get("title"), "title")
    image_url = _text(_object(node.get("featuredImage"), "featuredImage").get("url"), "featuredImage.url")

    items: list[CatalogItem] = []
    for variant in _edges(node.get("variants"), "variants"):
        inventory_item = _object(variant.get("inventoryItem"), "inventoryItem")
        try:
            items.append(
                CatalogItem(
                    product_id=str(product_id),
                    image_url=image_url,
                    name=name,
                    sku=_text(variant.get("sku"), "sku"),
                    inventory_level=sum_available(inventory_item),
                    inventory_item_id=str(inventory_item.get("id") or ""),
                )
            )
        except ValidationError as e:
            raise UpstreamProtocolError(INVALID_RESPONSE, detail=str(e)) from e
    return items
