from .notification import (
    BroadcastRequest,
    BroadcastResponse,
    MaintenanceRequest,
    MaintenanceResponse,
    MarkAllReadResponse,
    NotificationRead,
    UnreadCountRead,
)

__all__ = [
    "BroadcastRequest",
    "BroadcastResponse",
    "MaintenanceRequest",
    "MaintenanceResponse",
    "MarkAllReadResponse",
    "NotificationRead",
    "UnreadCountRead",
]
