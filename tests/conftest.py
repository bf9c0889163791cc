"""Pytest configuration and fixtures."""

import json
import os
import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Set test environment variables
os.environ.setdefault("INVENTORYFLOW_SECRET", "test-secret")

from inventory_sync.storage.credentials import CredentialStore  # noqa: E402
from inventory_sync.storage.crypto import TokenCipher  # noqa: E402
from inventory_sync.storage.settings_store import SettingsStore  # noqa: E402


@pytest.fixture
def settings_store(tmp_path: Path):
    """Connected SettingsStore backed by a temporary SQLite file."""
    store = SettingsStore(tmp_path / "settings.db")
    store.connect()
    yield store
    store.close()


@pytest.fixture
def cipher() -> TokenCipher:
    return TokenCipher("unit-test-secret")


@pytest.fixture
def credentials(settings_store: SettingsStore, cipher: TokenCipher) -> CredentialStore:
    return CredentialStore(settings_store, cipher)


def make_product_node(
    product_id: str,
    title: str,
    variants: list[dict[str, Any]],
    image_url: str | None = None,
) -> dict[str, Any]:
    """Build a Shopify product node as returned by the products query."""
    return {
        "id": product_id,
        "title": title,
        "featuredImage": {"url": image_url} if image_url else None,
        "variants": {"edges": [{"node": v} for v in variants]},
    }


def make_variant(
    sku: str | None,
    available: list[int | None] | None = None,
    inventory_item_id: str | None = "gid://shopify/InventoryItem/1",
) -> dict[str, Any]:
    """Build a variant node; available=None means no inventory item."""
    inventory_item = None
    if available is not None:
        inventory_item = {
            "id": inventory_item_id,
            "inventoryLevels": {"edges": [{"node": {"available": a}} for a in available]},
        }
    return {"id": f"gid://shopify/ProductVariant/{sku}", "sku": sku, "inventoryItem": inventory_item}


def make_products_page(
    nodes: list[dict[str, Any]],
    cursors: list[str],
    has_next_page: bool,
) -> dict[str, Any]:
    """Wrap product nodes in a products connection response body."""
    return {
        "data": {
            "products": {
                "edges": [{"cursor": c, "node": n} for c, n in zip(cursors, nodes)],
                "pageInfo": {"hasNextPage": has_next_page},
            }
        }
    }


class RecordingHandler:
    """httpx.MockTransport handler that replays queued responses and records requests."""

    def __init__(self, responses: list[httpx.Response | Callable[[httpx.Request], httpx.Response]]) -> None:
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request #{len(self.requests)}")
        response = self._responses.pop(0)
        if callable(response):
            return response(request)
        return response

    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def product_node_factory():
    return make_product_node


@pytest.fixture
def variant_factory():
    return make_variant


@pytest.fixture
def page_factory():
    return make_products_page


@pytest.fixture
def shopify_transport():
    """Return a factory producing (handler, transport) for queued responses."""

    def _factory(responses):
        handler = RecordingHandler(responses)
        return handler, httpx.MockTransport(handler)

    return _factory
