"""Application wiring: owns the settings database and the sync components."""

import logging
from dataclasses import dataclass

from inventory_sync.auth.pin_gate import PinGate
from inventory_sync.config import Settings, get_settings
from inventory_sync.models.catalog import Catalog
from inventory_sync.storage.credentials import CredentialStore
from inventory_sync.storage.crypto import TokenCipher
from inventory_sync.storage.settings_store import SettingsStore
from inventory_sync.sync.orchestrator import CompletionCallback, SyncOrchestrator

logger = logging.getLogger(__name__)


@dataclass
class AppComponents:
    """Container for application components."""

    settings_store: SettingsStore
    credentials: CredentialStore
    catalog: Catalog
    orchestrator: SyncOrchestrator
    pin_gate: PinGate


class InventorySyncApp:
    """
    Top-level object handed to a presentation layer.

    Opens the settings database once in initialize() and closes it once in
    shutdown(). Components share that single handle by reference.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        on_sync_complete: CompletionCallback | None = None,
    ) -> None:
        """
        Initialize the application.

        Args:
            settings: Configuration settings. Uses defaults if not provided.
            on_sync_complete: Callback for every finished sync.
        """
        self.settings = settings or get_settings()
        self._on_sync_complete = on_sync_complete
        self._components: AppComponents | None = None

    def initialize(self) -> None:
        """Open the settings database and build components."""
        if self._components is not None:
            return

        settings_store = SettingsStore(self.settings.database_path)
        settings_store.connect()

        cipher = TokenCipher.from_settings(self.settings)
        credentials = CredentialStore(settings_store, cipher)
        catalog = Catalog()
        orchestrator = SyncOrchestrator.for_shopify(
            credentials,
            self.settings,
            catalog=catalog,
            on_complete=self._on_sync_complete,
        )
        pin_gate = PinGate(credentials, max_attempts=self.settings.max_pin_attempts)

        self._components = AppComponents(
            settings_store=settings_store,
            credentials=credentials,
            catalog=catalog,
            orchestrator=orchestrator,
            pin_gate=pin_gate,
        )
        logger.info("Inventory sync initialized (database=%s)", self.settings.database_path)

    def shutdown(self) -> None:
        """Close the settings database."""
        if self._components:
            self._components.settings_store.close()
        self._components = None

    def __enter__(self) -> "InventorySyncApp":
        self.initialize()
        return self

    def __exit__(self, *args) -> None:
        self.shutdown()

    @property
    def components(self) -> AppComponents:
        """Get application components."""
        if not self._components:
            raise RuntimeError("App not initialized. Call initialize() first.")
        return self._components

    @property
    def credentials(self) -> CredentialStore:
        return self.components.credentials

    @property
    def catalog(self) -> Catalog:
        return self.components.catalog

    @property
    def orchestrator(self) -> SyncOrchestrator:
        return self.components.orchestrator

    @property
    def pin_gate(self) -> PinGate:
        return self.components.pin_gate
