"""Entrypoint: python -m notify_service"""
from __future__ import annotations

import logging

import uvicorn

from notify_service.api.middleware.correlation_id import RequestIdLogFilter
from notify_service.config import settings


def main() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s [%(request_id)s]: %(message)s",
    )
    for handler in logging.getLogger().handlers:
        handler.addFilter(RequestIdLogFilter())
    uvicorn.run(
        "notify_service.app:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL,
    )


if __name__ == "__main__":
    main()
