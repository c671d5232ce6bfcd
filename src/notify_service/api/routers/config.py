from __future__ import annotations

from fastapi import APIRouter

from notify_service.api.deps import VapidKeysDep
from notify_service.api.schemas.system import ConfigResponse

router = APIRouter(prefix="/api", tags=["config"])


@router.get("/config", response_model=ConfigResponse)
async def get_config(keys: VapidKeysDep) -> ConfigResponse:
    return ConfigResponse(vapid_public_key=keys.public_key)
