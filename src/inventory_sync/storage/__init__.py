"""Local persistence: settings database and encrypted credentials."""

from inventory_sync.storage.credentials import CredentialStore, ShopifyCredentials
from inventory_sync.storage.crypto import TokenCipher, derive_key
from inventory_sync.storage.settings_store import SettingsStore

__all__ = [
    "CredentialStore",
    "SettingsStore",
    "ShopifyCredentials",
    "TokenCipher",
    "derive_key",
]
