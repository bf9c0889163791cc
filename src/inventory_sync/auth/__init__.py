"""First-run setup and PIN login."""

from inventory_sync.auth.pin_gate import PinAttempt, PinGate
from inventory_sync.auth.setup import (
    SetupRequest,
    complete_setup,
    normalize_shop_domain,
    validate_pin_format,
)

__all__ = [
    "PinAttempt",
    "PinGate",
    "SetupRequest",
    "complete_setup",
    "normalize_shop_domain",
    "validate_pin_format",
]
