"""Background catalog sync."""

from inventory_sync.sync.orchestrator import SyncOrchestrator, SyncState, run_off_loop

__all__ = [
    "SyncOrchestrator",
    "SyncState",
    "run_off_loop",
]
