from __future__ import annotations

from fastapi import APIRouter

from notify_service.api.deps import HistoryDep, StoreDep
from notify_service.api.schemas.system import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/healthz", response_model=HealthResponse)
async def healthz(store: StoreDep, history: HistoryDep) -> HealthResponse:
    return HealthResponse(subscribers=len(store), messages=len(history))
