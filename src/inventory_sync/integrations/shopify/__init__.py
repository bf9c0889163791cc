"""Shopify integration: catalog client, GraphQL queries, and mapping."""

from inventory_sync.integrations.shopify.catalog import ShopifyCatalogClient

__all__ = ["ShopifyCatalogClient"]
