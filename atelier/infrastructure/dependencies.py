"""FastAPI dependency injection — wires infrastructure to the application layer."""

import logging
from pathlib import Path

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine

from atelier.application.interfaces import RemoteStore
from atelier.application.services import (
    AppDataStore,
    SyncEngine,
    SyncStatusTracker,
    Workspace,
)
from atelier.config import Settings
from atelier.domain.entities import BusinessSettings
from atelier.infrastructure.database import SQLAlchemyRemoteStore, create_engine, create_session_factory
from atelier.infrastructure.postgrest import PostgrestRemoteStore
from atelier.infrastructure.storage.local_snapshot_store import JsonSnapshotStore

logger = logging.getLogger(__name__)


def build_remote_store(settings: Settings) -> tuple[RemoteStore | None, AsyncEngine | None]:
    """Create the configured remote mirror (and its engine, for the database backend)."""
    backend = settings.remote_backend
    if backend == "database":
        if settings.database_url.startswith("sqlite:///"):
            Path(settings.database_url.removeprefix("sqlite:///")).parent.mkdir(
                parents=True, exist_ok=True
            )
        engine = create_engine(settings.database_url)
        return SQLAlchemyRemoteStore(create_session_factory(engine)), engine
    if backend == "postgrest":
        if not settings.postgrest_url.strip():
            logger.warning("POSTGREST_URL is not configured; running local-only")
            return None, None
        store = PostgrestRemoteStore(
            settings.postgrest_url,
            settings.postgrest_api_key,
            extended_columns=settings.postgrest_extended_columns,
        )
        return store, None
    return None, None


def build_workspace(settings: Settings, remote_store: RemoteStore | None = None) -> Workspace:
    """Wire snapshot store, sync engine and state container into a Workspace."""
    seed = BusinessSettings(
        brand_name=settings.default_brand_name,
        default_margin=settings.default_margin_percent,
    )
    snapshot_store = JsonSnapshotStore(settings.snapshot_path, seed_settings=seed)
    sync = SyncEngine(
        snapshot_store,
        remote_store,
        reporter=SyncStatusTracker(),
        timeout_ms=settings.sync_timeout_ms,
        retry_queue_size=settings.sync_retry_queue_size,
    )
    return Workspace(AppDataStore(snapshot_store), sync)


def get_workspace(request: Request) -> Workspace:
    """Provides the application-wide Workspace built during startup."""
    return request.app.state.workspace
