from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class ValidationError(AppError):
    pass


class InvalidSubscription(ValidationError):
    pass


class EmptyMessage(ValidationError):
    pass


class PayloadTooLarge(AppError):
    pass


class StorageError(AppError):
    pass


class StorageReadFailure(StorageError):
    pass


class StorageWriteFailure(StorageError):
    pass


class TransportClosed(AppError):
    pass


class DeliveryFailure(AppError):
    """A single push delivery attempt was rejected or could not be made."""

    GONE_STATUSES = frozenset({404, 410})

    def __init__(self, endpoint: str, status_code: int | None = None, detail: str = "") -> None:
        self.endpoint = endpoint
        self.status_code = status_code
        super().__init__(detail or f"push delivery failed (status={status_code})")

    @property
    def is_gone(self) -> bool:
        return self.status_code in self.GONE_STATUSES
