"""Domain exceptions for inventory sync.

Every error raised by the core derives from InventorySyncError so callers can
reduce any failure to one short message with short_error_message().
"""


class InventorySyncError(Exception):
    """Base exception for inventory sync domain errors."""

    def __init__(self, message: str, *, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or message


class ConfigurationError(InventorySyncError):
    """Raised when a required setting is missing."""


class TransportError(InventorySyncError):
    """Raised on network failure, timeout, or a non-2xx HTTP status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message, detail=detail)
        self.status_code = status_code


class UpstreamProtocolError(InventorySyncError):
    """Raised on malformed JSON, missing fields, or a GraphQL error payload."""


class DecryptionError(InventorySyncError):
    """Raised when stored ciphertext is malformed or fails authentication."""

    def __init__(
        self,
        message: str = "Stored Shopify token could not be decrypted",
        detail: str | None = None,
    ) -> None:
        super().__init__(message, detail=detail)


class StorageError(InventorySyncError):
    """Raised when the local settings database is unavailable or fails."""


class SetupValidationError(InventorySyncError):
    """Raised when setup or login input has the wrong shape."""


class PinLockedError(InventorySyncError):
    """Raised once the PIN attempt limit has been reached."""

    def __init__(
        self,
        message: str = "Too many failed attempts. Please restart the application.",
        detail: str | None = None,
    ) -> None:
        super().__init__(message, detail=detail)


def short_error_message(exc: BaseException) -> str:
    """
    Reduce an exception chain to its most specific message.

    Walks __cause__ (then __context__) towards the root. The deepest
    InventorySyncError in the chain wins, since its message is already
    phrased for the user; otherwise the innermost exception's text is used.
    """
    chain: list[BaseException] = []
    current: BaseException | None = exc
    while current is not None and all(current is not e for e in chain):
        chain.append(current)
        current = current.__cause__ or current.__context__

    for err in reversed(chain):
        if isinstance(err, InventorySyncError):
            return err.message

    text = str(chain[-1]).strip()
    return text or type(chain[-1]).__name__
