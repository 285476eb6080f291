from .snapshot_store import SnapshotStore
from .remote_store import RemoteStore, Row
from .sync_status import SyncStatusReporter

__all__ = [
    "SnapshotStore",
    "RemoteStore",
    "Row",
    "SyncStatusReporter",
]
