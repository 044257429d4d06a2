"""Errors raised by the notification core."""

from __future__ import annotations

from typing import Sequence


class TemplateNotFoundError(LookupError):
    """Raised when a notification type has no registered template."""

    def __init__(self, notification_type: object) -> None:
        super().__init__(f"No notification template registered for {notification_type!r}")
        self.notification_type = notification_type


class StorageError(RuntimeError):
    """Raised when the document store cannot complete an operation."""


class BulkOperationError(StorageError):
    """Raised when some sub-operations of a fan-out failed.

    Successful writes are not rolled back; ``succeeded`` lists the affected
    identifiers and ``failures`` the exceptions raised by the others.
    """

    def __init__(
        self,
        message: str,
        *,
        succeeded: Sequence[str],
        failures: Sequence[BaseException],
    ) -> None:
        super().__init__(message)
        self.succeeded = list(succeeded)
        self.failures = list(failures)


__all__ = ["BulkOperationError", "StorageError", "TemplateNotFoundError"]
