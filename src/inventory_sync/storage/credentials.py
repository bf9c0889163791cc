"""PIN and Shopify credential storage."""

import base64
import hashlib
import hmac
import logging
from typing import NamedTuple

from inventory_sync.exceptions import ConfigurationError, DecryptionError
from inventory_sync.storage.crypto import TokenCipher
from inventory_sync.storage.settings_store import (
    PIN_HASH_KEY,
    SHOPIFY_DOMAIN_KEY,
    SHOPIFY_TOKEN_KEY,
    SettingsStore,
)

logger = logging.getLogger(__name__)


class ShopifyCredentials(NamedTuple):
    domain: str
    token: str


def hash_pin(pin: str) -> str:
    """SHA-256 digest of the PIN, base64 encoded."""
    digest = hashlib.sha256(pin.encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")


class CredentialStore:
    """
    Local credentials: a hashed login PIN plus the Shopify domain and token.

    The token is encrypted at rest with TokenCipher; the domain is plaintext.
    Input shape (4-digit PIN, non-empty domain) is checked by the setup flow,
    not here.
    """

    def __init__(self, settings_store: SettingsStore, cipher: TokenCipher) -> None:
        self._store = settings_store
        self._cipher = cipher

    def is_pin_configured(self) -> bool:
        return self._store.get(PIN_HASH_KEY) is not None

    def store_pin(self, pin: str) -> None:
        self._store.set(PIN_HASH_KEY, hash_pin(pin))
        logger.info("PIN hash stored")

    def validate_pin(self, pin: str) -> bool:
        """True iff a PIN is configured and pin hashes to the stored digest."""
        stored = self._store.get(PIN_HASH_KEY)
        if stored is None:
            return False
        return hmac.compare_digest(stored.encode("ascii"), hash_pin(pin).encode("ascii"))

    def store_shopify_token(self, token: str) -> None:
        self._store.set(SHOPIFY_TOKEN_KEY, self._cipher.encrypt(token))
        logger.info("Shopify token stored (encrypted)")

    def get_shopify_token(self) -> str | None:
        """
        Decrypt and return the stored token.

        Returns None when no token is stored. Raises DecryptionError when the
        stored value is corrupt or was encrypted under a different key.
        """
        encrypted = self._store.get(SHOPIFY_TOKEN_KEY)
        if encrypted is None:
            return None
        return self._cipher.decrypt(encrypted)

    def store_shopify_domain(self, domain: str) -> None:
        self._store.set(SHOPIFY_DOMAIN_KEY, domain)
        logger.info("Shopify domain stored: %s", domain)

    def get_shopify_domain(self) -> str | None:
        return self._store.get(SHOPIFY_DOMAIN_KEY)

    def is_shopify_configured(self) -> bool:
        """True iff both the token and the domain are retrievable."""
        try:
            token = self.get_shopify_token()
        except DecryptionError as e:
            logger.warning("Stored Shopify token is unreadable: %s", e.detail)
            return False
        return token is not None and self.get_shopify_domain() is not None

    def require_shopify_credentials(self) -> ShopifyCredentials:
        """
        Return the stored domain and token.

        Raises:
            ConfigurationError: If either setting is missing.
            DecryptionError: If the token cannot be decrypted.
        """
        domain = self.get_shopify_domain()
        if not domain:
            raise ConfigurationError("Shopify store domain is not configured")
        token = self.get_shopify_token()
        if not token:
            raise ConfigurationError("Shopify access token is not configured")
        return ShopifyCredentials(domain=domain, token=token)

    def clear_shopify_credentials(self) -> None:
        """Remove the stored token and domain; the PIN is kept."""
        self._store.delete(SHOPIFY_TOKEN_KEY)
        self._store.delete(SHOPIFY_DOMAIN_KEY)
        logger.info("Shopify credentials cleared")
