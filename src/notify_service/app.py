from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from notify_service.api.middleware.correlation_id import CorrelationIdMiddleware
from notify_service.api.middleware.metrics import RequestTimingMiddleware
from notify_service.api.routers import config, health, messages, realtime, subscriptions
from notify_service.application.exceptions import (
    PayloadTooLarge,
    StorageWriteFailure,
    ValidationError,
)
from notify_service.application.ports.push import PushSender
from notify_service.config import Settings, settings as default_settings
from notify_service.infrastructure.push.vapid import load_vapid_keys
from notify_service.infrastructure.push.webpush_sender import WebPushSender
from notify_service.infrastructure.storage.json_file import JsonFileSubscriptionStorage
from notify_service.infrastructure.ws.manager import ConnectionManager
from notify_service.services.history import HistoryBuffer
from notify_service.services.message_intake import MessageIntake
from notify_service.services.push_dispatcher import PushDispatcher
from notify_service.services.subscription_store import SubscriptionStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the process-lifetime components and hang them off ``app.state``."""
    cfg: Settings = app.state.settings

    store = SubscriptionStore(JsonFileSubscriptionStorage(cfg.SUBSCRIPTIONS_FILE))
    await store.load()

    keys = load_vapid_keys(cfg.VAPID_PUBLIC_KEY, cfg.VAPID_PRIVATE_KEY)
    sender: PushSender = app.state.push_sender or WebPushSender(
        keys, cfg.VAPID_CLAIMS_SUB, ttl=cfg.PUSH_TTL, timeout=cfg.PUSH_TIMEOUT,
    )

    history = HistoryBuffer(cfg.HISTORY_CAPACITY)
    broadcaster = ConnectionManager(history, cfg.HISTORY_REPLAY)
    dispatcher = PushDispatcher(
        store,
        sender,
        prune_policy=cfg.PUSH_PRUNE_POLICY,
        click_url=cfg.NOTIFICATION_URL,
    )
    intake = MessageIntake(
        history, broadcaster, dispatcher, max_image_bytes=cfg.MAX_IMAGE_BYTES,
    )

    app.state.vapid_keys = keys
    app.state.subscriptions = store
    app.state.history = history
    app.state.broadcaster = broadcaster
    app.state.intake = intake
    logger.info("Notification service ready (subscribers=%d)", len(store))

    yield

    await intake.drain()
    logger.info("Notification service stopped")


def create_app(
    settings: Settings | None = None,
    push_sender: PushSender | None = None,
) -> FastAPI:
    cfg = settings or default_settings
    app = FastAPI(
        title="Broadcast Notification Service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.push_sender = push_sender

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(config.router)
    app.include_router(messages.router)
    app.include_router(subscriptions.router)
    app.include_router(realtime.router)

    if cfg.STATIC_DIR and Path(cfg.STATIC_DIR).is_dir():
        app.mount("/", StaticFiles(directory=cfg.STATIC_DIR, html=True), name="static")

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": exc.detail})

    @app.exception_handler(PayloadTooLarge)
    async def _too_large(_req: Request, exc: PayloadTooLarge) -> JSONResponse:
        return JSONResponse(status_code=413, content={"detail": exc.detail})

    @app.exception_handler(StorageWriteFailure)
    async def _storage(_req: Request, exc: StorageWriteFailure) -> JSONResponse:
        logger.error("Subscription storage write failed: %s", exc.detail)
        return JSONResponse(status_code=503, content={"detail": "Subscription storage unavailable."})
