"""Business settings endpoints. Settings are local and never pushed."""

from fastapi import APIRouter, Depends

from atelier.application.schemas import SettingsDocument, SettingsUpdate
from atelier.application.services import Workspace
from atelier.infrastructure.dependencies import get_workspace

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=SettingsDocument)
async def get_settings(workspace: Workspace = Depends(get_workspace)) -> SettingsDocument:
    return SettingsDocument.from_entity(workspace.data.settings)


@router.patch("", response_model=SettingsDocument)
async def update_settings(
    data: SettingsUpdate,
    workspace: Workspace = Depends(get_workspace),
) -> SettingsDocument:
    """Apply a partial settings update."""
    settings = workspace.update_settings(**data.changes())
    return SettingsDocument.from_entity(settings)
