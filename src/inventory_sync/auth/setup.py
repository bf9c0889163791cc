"""First-run setup: input validation and credential persistence."""

import logging
import re

from pydantic import BaseModel, Field

from inventory_sync.exceptions import SetupValidationError
from inventory_sync.storage.credentials import CredentialStore

logger = logging.getLogger(__name__)

PIN_LENGTH = 4
MYSHOPIFY_SUFFIX = ".myshopify.com"

_PIN_RE = re.compile(rf"[0-9]{{{PIN_LENGTH}}}")


def validate_pin_format(pin: str | None) -> str:
    """Return pin unchanged if it is exactly four ASCII digits."""
    if pin is None or not _PIN_RE.fullmatch(pin):
        raise SetupValidationError(f"PIN must be exactly {PIN_LENGTH} digits")
    return pin


def normalize_shop_domain(domain: str | None) -> str:
    """
    Clean up a store domain as typed by the user.

    Trims and lowercases; a bare store handle such as "my-store" becomes
    "my-store.myshopify.com". Custom domains containing a dot are kept as-is.
    """
    cleaned = (domain or "").strip().lower()
    if not cleaned:
        raise SetupValidationError("Please enter your Shopify store domain")
    if MYSHOPIFY_SUFFIX not in cleaned and "." not in cleaned:
        cleaned = f"{cleaned}{MYSHOPIFY_SUFFIX}"
    return cleaned


class SetupRequest(BaseModel):
    """Values collected by the first-run setup form."""

    pin: str = Field(description="New 4-digit PIN")
    confirm_pin: str = Field(description="PIN typed a second time")
    domain: str = Field(description="Shopify store domain or handle")
    token: str = Field(description="Shopify Admin API access token")

    def validate_input(self) -> tuple[str, str]:
        """
        Check the form and return (normalized_domain, stripped_token).

        Raises:
            SetupValidationError: On the first problem found.
        """
        validate_pin_format(self.pin)
        if self.pin != self.confirm_pin:
            raise SetupValidationError("PINs do not match")
        domain = normalize_shop_domain(self.domain)
        token = self.token.strip()
        if not token:
            raise SetupValidationError("Please enter your Shopify Admin API token")
        return domain, token


def complete_setup(credentials: CredentialStore, request: SetupRequest) -> str:
    """
    Validate the setup form and persist PIN, domain, and token.

    Returns:
        The normalized domain that was stored.
    """
    domain, token = request.validate_input()
    credentials.store_pin(request.pin)
    credentials.store_shopify_domain(domain)
    credentials.store_shopify_token(token)
    logger.info("Setup completed for %s", domain)
    return domain
