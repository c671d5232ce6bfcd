from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SendMessageRequest(_CamelModel):
    sender: str | None = None
    text: str | None = None
    image_data_url: str | None = None


class MessageResponse(_CamelModel):
    id: UUID
    sender: str
    text: str
    image_data_url: str
    created_at: str


class MessageListResponse(_CamelModel):
    messages: list[MessageResponse]


class SendMessageResponse(_CamelModel):
    success: bool = True
    message: MessageResponse
