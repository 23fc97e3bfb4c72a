"""Admin endpoints for the runtime settings table."""

from fastapi import APIRouter, Depends

from chatdesk.auth.dependencies import CurrentUser, require_admin
from chatdesk.runtime_settings import store
from chatdesk.runtime_settings.schemas import SaveSettingsRequest
from chatdesk.runtime_settings.service import get_settings_view, save_settings

router = APIRouter(prefix="/api/v1/admin/settings", tags=["Admin"])


@router.get("", summary="Get runtime settings", description="Return runtime settings with the API key masked.")
async def get(admin: CurrentUser = Depends(require_admin)):
    return {"status": "success", "data": get_settings_view().model_dump()}


@router.post("", summary="Save runtime settings", description="Upsert each provided setting. A masked API key is left unchanged.")
async def save(body: SaveSettingsRequest, admin: CurrentUser = Depends(require_admin)):
    written = save_settings(body.settings)
    return {"status": "success", "data": {"updated": written}}


@router.post("/sync", summary="Synchronize settings", description="Copy the environment API key into the settings table and seed missing defaults.")
async def sync(admin: CurrentUser = Depends(require_admin)):
    touched = store.sync_defaults()
    return {"status": "success", "data": {"message": "Settings synchronized", "settings": touched}}
