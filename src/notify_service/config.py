from __future__ import annotations

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

from notify_service.domain.value_objects.enums import PrunePolicy


class Settings(BaseSettings):
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "info"

    # Both must be set; otherwise a key pair is generated per process.
    VAPID_PUBLIC_KEY: str | None = None
    VAPID_PRIVATE_KEY: str | None = None
    VAPID_CLAIMS_SUB: str = "mailto:admin@example.com"

    SUBSCRIPTIONS_FILE: str = "data/subscriptions.json"

    HISTORY_CAPACITY: int = 100
    HISTORY_REPLAY: int = 50

    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024

    # Seconds the push service holds a message for an unreachable device (4 weeks).
    PUSH_TTL: int = 2419200
    PUSH_TIMEOUT: float = 10.0
    PUSH_PRUNE_POLICY: PrunePolicy = PrunePolicy.ANY

    NOTIFICATION_URL: str = "/"

    CORS_ORIGINS: list[str] = ["*"]
    STATIC_DIR: str | None = None

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
