from .app_state import AppDataStore
from .quote_lifecycle import QuoteDraft, QuoteSaveOutcome, ReceiptIssue
from .sync_engine import PendingPush, SyncEngine
from .sync_status_tracker import SyncStatus, SyncStatusTracker
from .workspace import Workspace

__all__ = [
    "AppDataStore",
    "QuoteDraft",
    "QuoteSaveOutcome",
    "ReceiptIssue",
    "PendingPush",
    "SyncEngine",
    "SyncStatus",
    "SyncStatusTracker",
    "Workspace",
]
