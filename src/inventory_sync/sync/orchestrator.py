"""Run one catalog sync as a background asyncio task."""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, TypeVar

from inventory_sync.config import Settings
from inventory_sync.exceptions import short_error_message
from inventory_sync.integrations.base import CatalogProvider
from inventory_sync.integrations.shopify.catalog import ShopifyCatalogClient
from inventory_sync.models.catalog import Catalog, SyncOutcome
from inventory_sync.observability.logging import LogContext
from inventory_sync.storage.credentials import CredentialStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

ClientFactory = Callable[[], CatalogProvider]
CompletionCallback = Callable[[SyncOutcome], None]


class SyncState(str, Enum):
    """Whether a sync is currently in flight."""

    IDLE = "idle"
    SYNCING = "syncing"


async def run_off_loop(fn: Callable[..., T], *args: Any) -> T:
    """Run a blocking callable (e.g. PIN hashing, SQLite I/O) in a worker thread."""
    return await asyncio.to_thread(fn, *args)


class SyncOrchestrator:
    """
    Coordinates catalog syncs for an interactive caller.

    Each sync runs as one asyncio task with three observable effects: a
    SyncOutcome carrying either the new items or a short error message, the
    attached Catalog replaced only on success, and the state returning to
    IDLE whatever happened. There is no automatic retry; call start_sync()
    again after a failure.
    """

    def __init__(
        self,
        client_factory: ClientFactory,
        *,
        catalog: Catalog | None = None,
        on_complete: CompletionCallback | None = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            client_factory: Builds a fresh CatalogProvider for each run. May
                raise ConfigurationError or DecryptionError.
            catalog: Optional catalog replaced after each successful sync.
            on_complete: Optional callback invoked with every SyncOutcome.
        """
        self._client_factory = client_factory
        self.catalog = catalog
        self.on_complete = on_complete
        self._state = SyncState.IDLE
        self._task: asyncio.Task[SyncOutcome] | None = None

    @classmethod
    def for_shopify(
        cls,
        credentials: CredentialStore,
        settings: Settings,
        *,
        catalog: Catalog | None = None,
        on_complete: CompletionCallback | None = None,
    ) -> "SyncOrchestrator":
        """Orchestrator whose clients are built from stored Shopify credentials."""
        return cls(
            lambda: ShopifyCatalogClient.from_credentials(credentials, settings),
            catalog=catalog,
            on_complete=on_complete,
        )

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def is_syncing(self) -> bool:
        return self._state is SyncState.SYNCING

    def start_sync(self) -> "asyncio.Task[SyncOutcome]":
        """
        Start a sync in the background and return its task.

        If a sync started by this orchestrator is still running, that task is
        returned instead of starting a second one. Must be called from a
        running event loop.
        """
        if self._task is not None and not self._task.done():
            logger.info("Sync already in progress; returning the running task")
            return self._task

        self._state = SyncState.SYNCING
        self._task = asyncio.create_task(self._run())
        return self._task

    async def sync(self) -> SyncOutcome:
        """Start a sync and wait for its outcome."""
        return await self.start_sync()

    async def _run(self) -> SyncOutcome:
        sync_id = uuid.uuid4().hex[:8]
        started_at = datetime.now(timezone.utc)

        try:
            with LogContext(sync_id=sync_id):
                logger.info("Catalog sync %s started", sync_id)
                client = self._client_factory()
                try:
                    items = await client.fetch_catalog()
                finally:
                    await client.close()
        except Exception as e:
            message = short_error_message(e)
            logger.warning("Catalog sync %s failed: %s", sync_id, message, exc_info=True)
            outcome = SyncOutcome(
                succeeded=False,
                error=message,
                started_at=started_at,
                finished_at=datetime.now(timezone.utc),
            )
        else:
            if self.catalog is not None:
                self.catalog.replace(items)
            outcome = SyncOutcome(
                succeeded=True,
                items=items,
                started_at=started_at,
                finished_at=datetime.now(timezone.utc),
            )
            logger.info(
                "Catalog sync %s finished: %d items in %.2fs",
                sync_id, len(items), outcome.duration_seconds(),
            )
        finally:
            self._state = SyncState.IDLE

        self._notify(outcome)
        return outcome

    def _notify(self, outcome: SyncOutcome) -> None:
        if self.on_complete is None:
            return
        try:
            self.on_complete(outcome)
        except Exception:
            logger.exception("Sync completion callback raised")

    async def validate_credentials(self) -> bool:
        """Check stored credentials against the platform; never raises."""
        try:
            client = self._client_factory()
        except Exception as e:
            logger.info("Cannot validate credentials: %s", short_error_message(e))
            return False
        try:
            return await client.validate_credentials()
        finally:
            await client.close()
