from __future__ import annotations

import logging

from fastapi import APIRouter

from notify_service.api.deps import StoreDep
from notify_service.api.schemas.subscription import SubscribeRequest, SubscribeResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["subscriptions"])


@router.post("/subscribe", response_model=SubscribeResponse, status_code=201)
async def subscribe(store: StoreDep, body: SubscribeRequest | None = None) -> SubscribeResponse:
    # A missing body is an empty request; the store rejects it with 400.
    body = body or SubscribeRequest()
    subscription = await store.add(body.subscription)
    logger.info("Stored push subscription endpoint=%s", subscription.endpoint)
    return SubscribeResponse(total_subscribers=len(store))
