"""AES-GCM encryption for the stored Shopify access token."""

import base64
import binascii
import hashlib
import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from inventory_sync.config import Settings
from inventory_sync.exceptions import DecryptionError

logger = logging.getLogger(__name__)

SECRET_ENV_VAR = "INVENTORYFLOW_SECRET"
# Weak fallback seed, used only when INVENTORYFLOW_SECRET is unset
DEFAULT_KEY_SEED = "InventoryFlowDefaultKey2024"
NONCE_LENGTH = 12
TAG_LENGTH = 16


def derive_key(secret: str | None) -> bytes:
    """Derive a 256-bit key as the SHA-256 digest of secret (or the fallback seed)."""
    seed = secret if secret else DEFAULT_KEY_SEED
    return hashlib.sha256(seed.encode("utf-8")).digest()


class TokenCipher:
    """
    Encrypts short secrets with AES-256-GCM.

    Output is base64(nonce || ciphertext || tag) with a fresh random 12-byte
    nonce for every call.
    """

    def __init__(self, secret: str | None = None) -> None:
        self.uses_default_key = not secret
        self._aead = AESGCM(derive_key(secret))

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenCipher":
        """Build a cipher from settings, warning loudly when the fallback key is in use."""
        cipher = cls(settings.encryption_secret or None)
        if cipher.uses_default_key:
            logger.warning(
                "%s is not set; the Shopify token is encrypted with the built-in "
                "default key, which is NOT secure. Set %s to a private value.",
                SECRET_ENV_VAR,
                SECRET_ENV_VAR,
            )
        return cipher

    def encrypt(self, plaintext: str) -> str:
        nonce = os.urandom(NONCE_LENGTH)
        ciphertext = self._aead.encrypt(nonce, plaintext.encode("utf-8"), None)
        return base64.b64encode(nonce + ciphertext).decode("ascii")

    def decrypt(self, token: str) -> str:
        """Decrypt a value produced by encrypt(); raises DecryptionError on any failure."""
        try:
            combined = base64.b64decode(token.encode("ascii"), validate=True)
        except (binascii.Error, ValueError, UnicodeEncodeError) as e:
            raise DecryptionError(detail="Stored token is not valid base64") from e

        if len(combined) < NONCE_LENGTH + TAG_LENGTH:
            raise DecryptionError(detail="Stored token is too short")

        nonce, ciphertext = combined[:NONCE_LENGTH], combined[NONCE_LENGTH:]
        try:
            plaintext = self._aead.decrypt(nonce, ciphertext, None)
        except InvalidTag as e:
            raise DecryptionError(
                detail="Authentication failed; the token was altered or the key changed"
            ) from e

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionError(detail="Decrypted token is not UTF-8") from e
