from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SubscribeRequest(BaseModel):
    # Validated by the store so a missing endpoint maps to 400, not 422.
    subscription: Any = None


class SubscribeResponse(BaseModel):
    success: bool = True
    total_subscribers: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
