"""Command-line front end: first-run setup, credential check, and catalog sync."""

import argparse
import asyncio
import getpass
import sys

from inventory_sync.app import InventorySyncApp
from inventory_sync.auth.setup import SetupRequest, complete_setup
from inventory_sync.config import get_settings
from inventory_sync.exceptions import InventorySyncError, short_error_message
from inventory_sync.models.catalog import CatalogItem, StockStatus, filter_items
from inventory_sync.observability.logging import configure_logging

STATUS_LABELS = {
    StockStatus.OUT_OF_STOCK: "OUT",
    StockStatus.LOW_STOCK: "LOW",
    StockStatus.IN_STOCK: "OK",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inventory-sync",
        description="Sync Shopify products and inventory levels",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    setup = sub.add_parser("setup", help="Store PIN and Shopify credentials")
    setup.add_argument("--domain", required=True, help="Store domain or handle (e.g. my-store)")
    setup.add_argument(
        "--token",
        default=None,
        help="Admin API access token (prompted for if omitted)",
    )

    sub.add_parser("check", help="Report configuration and test the Shopify credentials")

    sync = sub.add_parser("sync", help="Unlock with PIN and fetch the catalog")
    sync.add_argument("--search", default=None, help="Only show items whose SKU or name match")
    return parser


def format_table(items: list[CatalogItem]) -> str:
    """Render items as a fixed-width text table."""
    lines = [f"{'SKU':<20} {'PRODUCT':<40} {'QTY':>6}  STATUS"]
    for item in items:
        lines.append(
            f"{item.sku[:20]:<20} {item.name[:40]:<40} {item.inventory_level:>6}  "
            f"{STATUS_LABELS[item.stock_status]}"
        )
    return "\n".join(lines)


def _cmd_setup(app: InventorySyncApp, args: argparse.Namespace) -> int:
    if app.credentials.is_pin_configured():
        print("A PIN is already configured; only the Shopify credentials will be replaced.")
    token = args.token or getpass.getpass("Shopify Admin API token: ")

    if app.credentials.is_pin_configured():
        pin = getpass.getpass("Current PIN: ")
        if not app.credentials.validate_pin(pin):
            print("Invalid PIN.")
            return 1
        confirm = pin
    else:
        pin = getpass.getpass("New 4-digit PIN: ")
        confirm = getpass.getpass("Confirm PIN: ")

    domain = complete_setup(
        app.credentials,
        SetupRequest(pin=pin, confirm_pin=confirm, domain=args.domain, token=token),
    )
    print(f"Saved credentials for {domain}")
    return 0


async def _cmd_check(app: InventorySyncApp) -> int:
    creds = app.credentials
    print(f"PIN configured:     {creds.is_pin_configured()}")
    print(f"Shopify configured: {creds.is_shopify_configured()}")
    if app.settings.encryption_secret == "":
        print("Warning: INVENTORYFLOW_SECRET is not set; the token uses the default key.")
    ok = await app.orchestrator.validate_credentials()
    print(f"Credentials valid:  {ok}")
    return 0 if ok else 1


async def _unlock(app: InventorySyncApp) -> bool:
    gate = app.pin_gate
    while not gate.is_locked:
        pin = getpass.getpass("PIN: ")
        try:
            attempt = await gate.submit(pin)
        except InventorySyncError as e:
            print(e.message)
            continue
        if attempt.accepted:
            return True
        print(attempt.message)
    return False


async def _cmd_sync(app: InventorySyncApp, args: argparse.Namespace) -> int:
    if not app.credentials.is_pin_configured():
        print("No PIN configured. Run 'inventory-sync setup' first.")
        return 1
    if not await _unlock(app):
        return 1

    print("Syncing inventory from Shopify...")
    outcome = await app.orchestrator.sync()
    if not outcome.succeeded:
        print(f"Sync failed: {outcome.error}")
        return 1

    shown = filter_items(app.catalog.items, args.search)
    print(format_table(shown))
    print(f"\n{len(shown)} of {len(app.catalog)} items ({outcome.duration_seconds():.1f}s)")
    return 0


async def run(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_json)

    try:
        with InventorySyncApp(settings) as app:
            if args.command == "setup":
                return _cmd_setup(app, args)
            if args.command == "check":
                return await _cmd_check(app)
            return await _cmd_sync(app, args)
    except InventorySyncError as e:
        print(f"Error: {short_error_message(e)}")
        return 1


def main() -> None:
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
