"""Unit tests for the sync orchestrator."""

import asyncio
import logging

import httpx
import pytest

from inventory_sync.config import Settings
from inventory_sync.exceptions import ConfigurationError, TransportError
from inventory_sync.integrations.base import CatalogProvider
from inventory_sync.integrations.shopify.catalog import ShopifyCatalogClient
from inventory_sync.models.catalog import Catalog, CatalogItem
from inventory_sync.observability.logging import get_log_context
from inventory_sync.sync.orchestrator import SyncOrchestrator, SyncState, run_off_loop


def _item(sku: str, level: int = 1) -> CatalogItem:
    return CatalogItem(product_id=f"gid://shopify/Product/{sku}", name=sku, sku=sku, inventory_level=level)


class FakeProvider(CatalogProvider):
    """In-memory provider that returns items or raises, optionally after a gate."""

    def __init__(
        self,
        items: list[CatalogItem] | None = None,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
        valid: bool = True,
    ) -> None:
        self.items = items or []
        self.error = error
        self.gate = gate
        self.valid = valid
        self.fetch_calls = 0
        self.closed = False
        self.log_context: dict = {}

    @property
    def platform_name(self) -> str:
        return "fake"

    async def fetch_catalog(self) -> list[CatalogItem]:
        self.fetch_calls += 1
        self.log_context = get_log_context()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.items)

    async def validate_credentials(self) -> bool:
        return self.valid

    async def close(self) -> None:
        self.closed = True


class TestSyncOrchestrator:
    """Tests for SyncOrchestrator outcomes and state."""

    @pytest.mark.asyncio
    async def test_success_replaces_catalog(self):
        """A successful sync replaces the attached catalog wholesale."""
        catalog = Catalog([_item("OLD")])
        provider = FakeProvider(items=[_item("NEW-1"), _item("NEW-2")])
        orchestrator = SyncOrchestrator(lambda: provider, catalog=catalog)

        outcome = await orchestrator.sync()

        assert outcome.succeeded is True
        assert outcome.error is None
        assert [i.sku for i in outcome.items] == ["NEW-1", "NEW-2"]
        assert [i.sku for i in catalog.items] == ["NEW-1", "NEW-2"]
        assert catalog.last_synced_at is not None
        assert provider.closed is True
        assert orchestrator.state is SyncState.IDLE

    @pytest.mark.asyncio
    async def test_failure_preserves_catalog(self):
        """A failed sync leaves the previous catalog untouched."""
        catalog = Catalog([_item("KEEP")])
        provider = FakeProvider(error=TransportError("API request failed with status: 503", status_code=503))
        orchestrator = SyncOrchestrator(lambda: provider, catalog=catalog)

        outcome = await orchestrator.sync()

        assert outcome.succeeded is False
        assert outcome.items == []
        assert outcome.error == "API request failed with status: 503"
        assert [i.sku for i in catalog.items] == ["KEEP"]
        assert catalog.last_synced_at is None
        assert provider.closed is True
        assert orchestrator.state is SyncState.IDLE

    @pytest.mark.asyncio
    async def test_upstream_errors_preserve_catalog(self, shopify_transport):
        """GraphQL errors with empty data fail the sync and keep old items."""
        catalog = Catalog([_item("KEEP-1"), _item("KEEP-2")])
        _, transport = shopify_transport([
            httpx.Response(200, json={"errors": [{"message": "Internal error"}], "data": None}),
        ])
        orchestrator = SyncOrchestrator(
            lambda: ShopifyCatalogClient("shop.myshopify.com", "t", transport=transport),
            catalog=catalog,
        )

        outcome = await orchestrator.sync()

        assert outcome.succeeded is False
        assert outcome.error == "Shopify API error: Internal error"
        assert [i.sku for i in catalog.items] == ["KEEP-1", "KEEP-2"]

    @pytest.mark.asyncio
    async def test_malformed_variant_edge_reported(self, shopify_transport, page_factory):
        """A null variant edge fails the sync with a readable message."""
        node = {"id": "gid://shopify/Product/1", "title": "Hoodie", "variants": {"edges": [None]}}
        _, transport = shopify_transport([httpx.Response(200, json=page_factory([node], ["c1"], False))])
        orchestrator = SyncOrchestrator(
            lambda: ShopifyCatalogClient("shop.myshopify.com", "t", transport=transport),
        )

        outcome = await orchestrator.sync()

        assert outcome.succeeded is False
        assert outcome.error == "Invalid response from Shopify API"

    @pytest.mark.asyncio
    async def test_factory_error_reported(self):
        """Missing configuration is reported as a failed outcome."""

        def factory():
            raise ConfigurationError("Shopify store domain is not configured")

        orchestrator = SyncOrchestrator(factory)
        outcome = await orchestrator.sync()

        assert outcome.succeeded is False
        assert outcome.error == "Shopify store domain is not configured"
        assert orchestrator.state is SyncState.IDLE

    @pytest.mark.asyncio
    async def test_wrapped_error_trimmed(self):
        """Only the innermost message of a wrapped error is reported."""
        try:
            try:
                raise ValueError("socket closed")
            except ValueError as inner:
                raise RuntimeError("Failed to fetch products: socket closed") from inner
        except RuntimeError as e:
            wrapped = e

        orchestrator = SyncOrchestrator(lambda: FakeProvider(error=wrapped))
        outcome = await orchestrator.sync()

        assert outcome.error == "socket closed"

    @pytest.mark.asyncio
    async def test_state_while_running(self):
        """State is SYNCING while the task runs and IDLE afterwards."""
        gate = asyncio.Event()
        provider = FakeProvider(items=[_item("A")], gate=gate)
        orchestrator = SyncOrchestrator(lambda: provider)

        task = orchestrator.start_sync()
        await asyncio.sleep(0)
        assert orchestrator.state is SyncState.SYNCING
        assert orchestrator.is_syncing is True

        gate.set()
        outcome = await task
        assert outcome.succeeded is True
        assert orchestrator.state is SyncState.IDLE

    @pytest.mark.asyncio
    async def test_second_start_returns_running_task(self):
        """Starting again while running reuses the in-flight task."""
        gate = asyncio.Event()
        provider = FakeProvider(items=[_item("A")], gate=gate)
        orchestrator = SyncOrchestrator(lambda: provider)

        first = orchestrator.start_sync()
        second = orchestrator.start_sync()
        assert first is second

        gate.set()
        await first
        assert provider.fetch_calls == 1

    @pytest.mark.asyncio
    async def test_overlapping_syncs_keep_separate_log_context(self):
        """Two overlapping syncs finishing in start order each log their own sync_id."""
        gate_a, gate_b = asyncio.Event(), asyncio.Event()
        provider_a = FakeProvider(items=[_item("A")], gate=gate_a)
        provider_b = FakeProvider(items=[_item("B")], gate=gate_b)
        factory = logging.getLogRecordFactory()

        task_a = SyncOrchestrator(lambda: provider_a).start_sync()
        task_b = SyncOrchestrator(lambda: provider_b).start_sync()
        await asyncio.sleep(0)

        gate_a.set()
        await task_a
        gate_b.set()
        await task_b

        id_a = provider_a.log_context.get("sync_id")
        id_b = provider_b.log_context.get("sync_id")
        assert id_a and id_b and id_a != id_b
        assert get_log_context() == {}
        assert logging.getLogRecordFactory() is factory

    @pytest.mark.asyncio
    async def test_callback_invoked(self):
        """on_complete receives each outcome after the state returns to IDLE."""
        seen = []
        orchestrator = SyncOrchestrator(lambda: FakeProvider(items=[_item("A")]))

        def on_complete(outcome):
            seen.append((outcome.succeeded, orchestrator.state))

        orchestrator.on_complete = on_complete
        await orchestrator.sync()

        orchestrator._client_factory = lambda: FakeProvider(error=TransportError("down"))
        await orchestrator.sync()

        assert seen == [(True, SyncState.IDLE), (False, SyncState.IDLE)]

    @pytest.mark.asyncio
    async def test_callback_error_does_not_break_sync(self):
        """A raising callback is logged and the outcome still returned."""

        def on_complete(outcome):
            raise RuntimeError("UI gone")

        orchestrator = SyncOrchestrator(lambda: FakeProvider(items=[_item("A")]), on_complete=on_complete)
        outcome = await orchestrator.sync()
        assert outcome.succeeded is True

    @pytest.mark.asyncio
    async def test_no_retry(self):
        """A failure is terminal for that run."""
        provider = FakeProvider(error=TransportError("down"))
        orchestrator = SyncOrchestrator(lambda: provider)

        await orchestrator.sync()
        assert provider.fetch_calls == 1

    @pytest.mark.asyncio
    async def test_outcome_duration(self):
        """Outcome timestamps are ordered."""
        outcome = await SyncOrchestrator(lambda: FakeProvider()).sync()
        assert outcome.finished_at >= outcome.started_at
        assert outcome.duration_seconds() >= 0


class TestValidateCredentials:
    """Tests for orchestrator credential validation."""

    @pytest.mark.asyncio
    async def test_delegates_to_provider(self):
        """The provider's answer is returned and the client closed."""
        provider = FakeProvider(valid=True)
        assert await SyncOrchestrator(lambda: provider).validate_credentials() is True
        assert provider.closed is True

        assert await SyncOrchestrator(lambda: FakeProvider(valid=False)).validate_credentials() is False

    @pytest.mark.asyncio
    async def test_unconfigured(self, credentials):
        """No stored credentials means False, not an exception."""
        orchestrator = SyncOrchestrator.for_shopify(credentials, Settings())
        assert await orchestrator.validate_credentials() is False


class TestRunOffLoop:
    """Tests for run_off_loop."""

    @pytest.mark.asyncio
    async def test_runs_in_thread(self, credentials):
        """Blocking store calls can be awaited."""
        credentials.store_pin("1234")
        assert await run_off_loop(credentials.validate_pin, "1234") is True
        assert await run_off_loop(credentials.validate_pin, "0000") is False
