"""Base catalog provider interface."""

from abc import ABC, abstractmethod

from inventory_sync.models.catalog import CatalogItem


class CatalogProvider(ABC):
    """
    Abstract base class for commerce platform catalog sources.

    A provider owns its HTTP resources; call close() (or use it as an async
    context manager) when finished.
    """

    @property
    @abstractmethod
    def platform_name(self) -> str:
        """Return the platform name (e.g., 'shopify')."""
        ...

    @abstractmethod
    async def fetch_catalog(self) -> list[CatalogItem]:
        """
        Fetch the complete catalog, following pagination to the end.

        Returns:
            Every item across all pages. Either the whole catalog is returned
            or an InventorySyncError is raised; partial results are never
            returned.
        """
        ...

    async def validate_credentials(self) -> bool:
        """
        Check that the configured credentials are accepted by the platform.

        Returns:
            True if a minimal authenticated request succeeds.
        """
        return True

    async def close(self) -> None:
        """Release network resources."""
        return None

    async def __aenter__(self) -> "CatalogProvider":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()
