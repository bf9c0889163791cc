"""Unit tests for domain exceptions."""

from inventory_sync.exceptions import (
    DecryptionError,
    InventorySyncError,
    PinLockedError,
    TransportError,
    UpstreamProtocolError,
    short_error_message,
)


def _chain(*excs: BaseException) -> BaseException:
    """Link excs so each one's __cause__ is the next; return the outermost."""
    for outer, inner in zip(excs, excs[1:]):
        outer.__cause__ = inner
    return excs[0]


class TestExceptions:
    """Tests for exception attributes."""

    def test_detail_defaults_to_message(self):
        err = InventorySyncError("boom")
        assert err.message == "boom"
        assert err.detail == "boom"
        assert str(err) == "boom"

    def test_transport_status(self):
        err = TransportError("failed", status_code=503, detail="body")
        assert err.status_code == 503
        assert err.detail == "body"

    def test_default_messages(self):
        assert "decrypted" in DecryptionError().message
        assert "Too many failed attempts" in PinLockedError().message


class TestShortErrorMessage:
    """Tests for short_error_message."""

    def test_plain_exception(self):
        assert short_error_message(ValueError("bad value")) == "bad value"

    def test_innermost_plain_message(self):
        """Wrapper messages are dropped in favour of the root cause."""
        err = _chain(RuntimeError("Failed to fetch products: x"), OSError("x"))
        assert short_error_message(err) == "x"

    def test_deepest_domain_error_wins(self):
        """A domain error's message beats a lower-level library error."""
        err = _chain(
            RuntimeError("wrapper"),
            UpstreamProtocolError("Invalid response from Shopify API"),
            ValueError("Expecting value: line 1 column 1 (char 0)"),
        )
        assert short_error_message(err) == "Invalid response from Shopify API"

    def test_context_followed(self):
        try:
            try:
                raise KeyError("inner")
            except KeyError:
                raise RuntimeError("outer")
        except RuntimeError as e:
            assert short_error_message(e) == "'inner'"

    def test_empty_message_uses_type(self):
        assert short_error_message(TimeoutError()) == "TimeoutError"

    def test_cycle_safe(self):
        a = ValueError("a")
        b = ValueError("b")
        a.__cause__ = b
        b.__cause__ = a
        assert short_error_message(a) in {"a", "b"}
