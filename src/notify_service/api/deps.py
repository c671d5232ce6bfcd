"""FastAPI dependency injection helpers.

Components live on ``app.state`` for the lifetime of the process; they are
created in the application lifespan.
"""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from notify_service.infrastructure.push.vapid import VapidKeys
from notify_service.services.history import HistoryBuffer
from notify_service.services.message_intake import MessageIntake
from notify_service.services.subscription_store import SubscriptionStore


def get_store(request: Request) -> SubscriptionStore:
    return request.app.state.subscriptions


def get_history(request: Request) -> HistoryBuffer:
    return request.app.state.history


def get_intake(request: Request) -> MessageIntake:
    return request.app.state.intake


def get_vapid_keys(request: Request) -> VapidKeys:
    return request.app.state.vapid_keys


StoreDep = Annotated[SubscriptionStore, Depends(get_store)]
HistoryDep = Annotated[HistoryBuffer, Depends(get_history)]
IntakeDep = Annotated[MessageIntake, Depends(get_intake)]
VapidKeysDep = Annotated[VapidKeys, Depends(get_vapid_keys)]
