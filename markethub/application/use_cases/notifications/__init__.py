"""Public helpers for emitting and managing notifications."""

from .samples import clear_user_notifications, create_sample_notifications
from .service import NotificationCallback, NotificationService, get_notification_service
from .templating import PLACEHOLDER_TOKENS, render_placeholders
from .triggers import (
    ORDER_STATUS_NOTIFICATIONS,
    TriggerOutcome,
    on_abuse_report_filed,
    on_cart_item_price_drop,
    on_order_placed,
    on_order_status_change,
    on_payout_processed,
    on_product_created,
    on_review_submitted,
    on_security_alert,
    on_system_maintenance,
    on_user_registration,
    on_wishlist_item_back_in_stock,
)

__all__ = [
    "NotificationCallback",
    "NotificationService",
    "ORDER_STATUS_NOTIFICATIONS",
    "PLACEHOLDER_TOKENS",
    "TriggerOutcome",
    "clear_user_notifications",
    "create_sample_notifications",
    "get_notification_service",
    "on_abuse_report_filed",
    "on_cart_item_price_drop",
    "on_order_placed",
    "on_order_status_change",
    "on_payout_processed",
    "on_product_created",
    "on_review_submitted",
    "on_security_alert",
    "on_system_maintenance",
    "on_user_registration",
    "on_wishlist_item_back_in_stock",
    "render_placeholders",
]
