"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from markethub.domain.entities import (
    ALL_ROLES,
    Notification,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
)
from markethub.domain.templates import get_template


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    recipient_id: str
    recipient_role: str | None = None
    type: NotificationType
    icon: str
    title: str
    message: str
    priority: NotificationPriority
    status: NotificationStatus
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    read_at: datetime | None = None
    expires_at: datetime | None = None

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationRead":
        return cls(
            id=notification.id or "",
            recipient_id=notification.recipient_id,
            recipient_role=notification.recipient_role,
            type=notification.type,
            icon=get_template(notification.type).icon,
            title=notification.title,
            message=notification.message,
            priority=notification.priority,
            status=notification.status,
            metadata=notification.metadata.to_document(),
            created_at=notification.created_at,
            read_at=notification.read_at,
            expires_at=notification.expires_at,
        )


class UnreadCountRead(BaseModel):
    count: int = Field(..., ge=0)


class MarkAllReadResponse(BaseModel):
    updated: int = Field(..., ge=0, description="Notifications switched to read")


class BroadcastRequest(BaseModel):
    """Custom announcement sent by an administrator to whole roles."""

    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    priority: NotificationPriority = NotificationPriority.MEDIUM
    target_roles: list[str] = Field(..., min_length=1)

    @field_validator("title", "message")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @field_validator("target_roles")
    @classmethod
    def _known_roles(cls, roles: list[str]) -> list[str]:
        unknown = sorted(set(roles) - set(ALL_ROLES))
        if unknown:
            raise ValueError(f"unknown roles: {', '.join(unknown)}")
        return list(dict.fromkeys(roles))


class BroadcastResponse(BaseModel):
    recipients: int = Field(..., ge=0)


class MaintenanceRequest(BaseModel):
    maintenance_date: date
    duration: str = Field(..., min_length=1, examples=["2 hours"])


class MaintenanceResponse(BaseModel):
    delivered: bool


__all__ = [
    "BroadcastRequest",
    "BroadcastResponse",
    "MaintenanceRequest",
    "MaintenanceResponse",
    "MarkAllReadResponse",
    "NotificationRead",
    "UnreadCountRead",
]
