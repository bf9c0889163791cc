"""Shopify catalog client (products, variants, inventory) via Admin GraphQL API."""

import logging
from typing import Any

import httpx

from inventory_sync.config import Settings, get_settings
from inventory_sync.exceptions import TransportError, UpstreamProtocolError
from inventory_sync.integrations.base import CatalogProvider
from inventory_sync.integrations.shopify.mapping import parse_product_node
from inventory_sync.integrations.shopify.queries import PRODUCTS_QUERY, SHOP_QUERY
from inventory_sync.models.catalog import CatalogItem
from inventory_sync.storage.credentials import CredentialStore

logger = logging.getLogger(__name__)


def _first_error_message(errors: Any) -> str:
    """Pull a readable message out of a GraphQL 'errors' value."""
    if isinstance(errors, str):
        return errors
    if isinstance(errors, list) and errors:
        first = errors[0]
        if isinstance(first, dict) and first.get("message"):
            return str(first["message"])
        return str(first)
    return str(errors)


class ShopifyCatalogClient(CatalogProvider):
    """
    Shopify product catalog via the Admin GraphQL API.

    Pages through every product with cursor pagination and flattens each
    product into one CatalogItem per variant. Pages are requested strictly
    one after another.
    """

    API_VERSION = "2024-01"

    def __init__(
        self,
        store_domain: str,
        access_token: str,
        *,
        api_version: str = API_VERSION,
        page_size: int = 50,
        variants_per_product: int = 100,
        locations_per_item: int = 10,
        timeout: float = 30.0,
        connect_timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the Shopify catalog client.

        Args:
            store_domain: The Shopify store domain (e.g., "my-store.myshopify.com").
            access_token: Shopify Admin API access token.
            api_version: Admin API version used in the endpoint path.
            page_size: Products requested per page.
            variants_per_product: Variants requested per product.
            locations_per_item: Stock locations summed per inventory item.
            timeout: Request timeout in seconds.
            connect_timeout: Connection timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.store_domain = store_domain.strip().rstrip("/")
        self.access_token = access_token
        self.api_version = api_version
        self.page_size = page_size
        self.variants_per_product = variants_per_product
        self.locations_per_item = locations_per_item
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_credentials(
        cls,
        credentials: CredentialStore,
        settings: Settings | None = None,
        **kwargs: Any,
    ) -> "ShopifyCatalogClient":
        """
        Build a client from stored credentials and settings.

        Raises:
            ConfigurationError: If the domain or token is not stored.
            DecryptionError: If the stored token cannot be decrypted.
        """
        settings = settings or get_settings()
        creds = credentials.require_shopify_credentials()
        return cls(
            creds.domain,
            creds.token,
            api_version=settings.shopify_api_version,
            page_size=settings.shopify_page_size,
            variants_per_product=settings.shopify_variants_per_product,
            locations_per_item=settings.shopify_locations_per_item,
            timeout=settings.request_timeout,
            connect_timeout=settings.connect_timeout,
            **kwargs,
        )

    @property
    def platform_name(self) -> str:
        return "shopify"

    @property
    def graphql_url(self) -> str:
        return f"https://{self.store_domain}/admin/api/{self.api_version}/graphql.json"

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={
                    "X-Shopify-Access-Token": self.access_token,
                    "Content-Type": "application/json",
                },
                timeout=httpx.Timeout(self.timeout, connect=self.connect_timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute a GraphQL request and return its 'data' object."""
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        try:
            response = await self.client.post(self.graphql_url, json=payload)
        except httpx.TimeoutException as e:
            raise TransportError(
                "Request to Shopify timed out",
                detail=f"{self.graphql_url}: {e!r}",
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"Could not reach Shopify store {self.store_domain}",
                detail=str(e),
            ) from e

        if not response.is_success:
            raise TransportError(
                f"API request failed with status: {response.status_code}",
                status_code=response.status_code,
                detail=response.text[:500],
            )

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamProtocolError(
                "Invalid response from Shopify API",
                detail="Response body is not JSON",
            ) from e

        if not isinstance(body, dict):
            raise UpstreamProtocolError("Invalid response from Shopify API")

        if body.get("errors"):
            message = _first_error_message(body["errors"])
            raise UpstreamProtocolError(f"Shopify API error: {message}", detail=str(body["errors"]))

        data = body.get("data")
        if not isinstance(data, dict):
            raise UpstreamProtocolError("Invalid response from Shopify API")
        return data

    async def fetch_catalog(self) -> list[CatalogItem]:
        """
        Fetch every product variant in the store.

        The first request carries no cursor; each later request resumes after
        the last edge of the previous page. Stops when pageInfo.hasNextPage is
        false, or when a page comes back with no edges.
        """
        items: list[CatalogItem] = []
        cursor: str | None = None
        pages = 0

        while True:
            variables: dict[str, Any] = {
                "first": self.page_size,
                "variantsFirst": self.variants_per_product,
                "levelsFirst": self.locations_per_item,
            }
            if cursor is not None:
                variables["after"] = cursor
            data = await self._graphql(PRODUCTS_QUERY, variables)
            pages += 1

            products = data.get("products")
            if not isinstance(products, dict):
                raise UpstreamProtocolError("Shopify response is missing 'products'")
            edges = products.get("edges")
            page_info = products.get("pageInfo")
            if not isinstance(edges, list) or not isinstance(page_info, dict):
                raise UpstreamProtocolError("Shopify response is missing 'edges' or 'pageInfo'")

            for edge in edges:
                node = edge.get("node") if isinstance(edge, dict) else None
                if not isinstance(node, dict):
                    raise UpstreamProtocolError("Product edge from Shopify has no node")
                items.extend(parse_product_node(node))

            logger.debug(
                "Fetched page %d: %d products, %d items so far",
                pages, len(edges), len(items),
            )

            if not page_info.get("hasNextPage"):
                break
            if not edges:
                logger.warning(
                    "Shopify reported hasNextPage on an empty page %d; stopping pagination",
                    pages,
                )
                break

            cursor = edges[-1].get("cursor")
            if not cursor:
                raise UpstreamProtocolError("Product edge from Shopify is missing its cursor")

        logger.info("Fetched %d catalog items across %d pages", len(items), pages)
        return items

    async def validate_credentials(self) -> bool:
        """Check the domain and token with a shop-name lookup."""
        try:
            data = await self._graphql(SHOP_QUERY)
            return isinstance(data.get("shop"), dict)
        except Exception as e:
            logger.info("Shopify credential check failed: %s", e)
            return False
