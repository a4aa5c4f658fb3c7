"""Settings API routes.

Endpoints:
- GET  /api/settings - Current settings (secrets masked)
- POST /api/settings - Update one or more settings
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from portboard.config import SettingsManager
from portboard.web.dependencies import get_settings_manager, to_http_error

router = APIRouter()


@router.get("/settings")
async def get_settings(manager: SettingsManager = Depends(get_settings_manager)) -> dict:
    return manager.to_public_dict()


@router.post("/settings")
async def update_settings(
    values: dict[str, Any] = Body(...),
    manager: SettingsManager = Depends(get_settings_manager),
) -> dict:
    try:
        manager.update(values)
    except ValueError as e:
        raise to_http_error(e) from e
    return {"success": True}
