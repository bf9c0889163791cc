"""PIN login gate with a per-process attempt limit."""

import logging
from dataclasses import dataclass

from inventory_sync.auth.setup import validate_pin_format
from inventory_sync.exceptions import PinLockedError
from inventory_sync.storage.credentials import CredentialStore
from inventory_sync.sync.orchestrator import run_off_loop

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


@dataclass(frozen=True)
class PinAttempt:
    """Result of one PIN submission."""

    accepted: bool
    remaining_attempts: int

    @property
    def message(self) -> str:
        if self.accepted:
            return "PIN accepted"
        if self.remaining_attempts > 0:
            return f"Invalid PIN. {self.remaining_attempts} attempts remaining."
        return "Too many failed attempts. Please restart the application."


class PinGate:
    """
    Tracks failed PIN attempts for one process.

    The credential store holds no lockout state; once max_attempts wrong
    PINs have been submitted the gate refuses further attempts until the
    process restarts.
    """

    def __init__(self, credentials: CredentialStore, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> None:
        self._credentials = credentials
        self.max_attempts = max_attempts
        self.failed_attempts = 0

    @property
    def remaining_attempts(self) -> int:
        return max(self.max_attempts - self.failed_attempts, 0)

    @property
    def is_locked(self) -> bool:
        return self.remaining_attempts == 0

    async def submit(self, pin: str) -> PinAttempt:
        """
        Check a PIN off the event loop.

        Raises:
            SetupValidationError: If pin is not four digits (not counted as an attempt).
            PinLockedError: If the attempt limit was already reached.
        """
        validate_pin_format(pin)
        if self.is_locked:
            raise PinLockedError()

        valid = await run_off_loop(self._credentials.validate_pin, pin)
        if valid:
            self.failed_attempts = 0
            return PinAttempt(accepted=True, remaining_attempts=self.max_attempts)

        self.failed_attempts += 1
        logger.warning(
            "Invalid PIN submitted (%d/%d)", self.failed_attempts, self.max_attempts
        )
        return PinAttempt(accepted=False, remaining_attempts=self.remaining_attempts)
