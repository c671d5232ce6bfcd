from __future__ import annotations

from fastapi import APIRouter, Request

from notify_service.api.deps import HistoryDep, IntakeDep
from notify_service.api.schemas.message import (
    MessageListResponse,
    MessageResponse,
    SendMessageRequest,
    SendMessageResponse,
)

router = APIRouter(prefix="/api", tags=["messages"])


@router.get("/messages", response_model=MessageListResponse)
async def list_messages(request: Request, history: HistoryDep) -> MessageListResponse:
    replay = request.app.state.settings.HISTORY_REPLAY
    return MessageListResponse(
        messages=[MessageResponse.model_validate(m.to_dict()) for m in history.recent(replay)],
    )


@router.post("/send", response_model=SendMessageResponse, status_code=201)
async def send_message(
    intake: IntakeDep,
    body: SendMessageRequest | None = None,
) -> SendMessageResponse:
    body = body or SendMessageRequest()
    message = await intake.submit(body.sender, body.text, body.image_data_url)
    return SendMessageResponse(message=MessageResponse.model_validate(message.to_dict()))
