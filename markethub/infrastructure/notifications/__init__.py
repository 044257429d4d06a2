"""Realtime notification helpers for the infrastructure layer."""

from .payloads import serialize_notification, snapshot_message

__all__ = [
    "serialize_notification",
    "snapshot_message",
]
