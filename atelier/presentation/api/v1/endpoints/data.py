"""Whole-snapshot and sync endpoints."""

from fastapi import APIRouter, Depends

from atelier.application.schemas import AppDataDocument, RetryResponse, SyncStatusResponse
from atelier.application.services import Workspace
from atelier.infrastructure.dependencies import get_workspace

router = APIRouter(tags=["Data & Sync"])


@router.get("/data", response_model=AppDataDocument)
async def get_data(workspace: Workspace = Depends(get_workspace)) -> AppDataDocument:
    """Return the current business data set."""
    return AppDataDocument.from_app_data(workspace.data)


@router.post("/sync/refresh", response_model=AppDataDocument)
async def refresh(workspace: Workspace = Depends(get_workspace)) -> AppDataDocument:
    """Reconcile with the remote mirror; the local snapshot wins on any failure."""
    data = await workspace.refresh()
    return AppDataDocument.from_app_data(data)


@router.get("/sync/status", response_model=SyncStatusResponse)
async def sync_status(workspace: Workspace = Depends(get_workspace)) -> SyncStatusResponse:
    return SyncStatusResponse.from_status(workspace.sync_backend, workspace.sync_status())


@router.post("/sync/retry", response_model=RetryResponse)
async def retry_pending(workspace: Workspace = Depends(get_workspace)) -> RetryResponse:
    """Replay pushes that previously failed to reach the remote mirror."""
    succeeded = await workspace.retry_pending()
    return RetryResponse(succeeded=succeeded, pending=workspace.sync_status().pending_retries)
