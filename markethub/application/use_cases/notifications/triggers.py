"""Map marketplace events to notifications.

Every trigger is best-effort: it returns a :class:`TriggerOutcome` and never
raises, so the order, report or registration that fired it completes even
when the notification store is unavailable.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from datetime import date

from markethub.domain.entities import (
    ALL_ROLES,
    NotificationMetadata,
    NotificationOverrides,
    NotificationPriority,
    NotificationType,
)
from markethub.utils import format_amount, format_short_date

from .service import NotificationService

logger = logging.getLogger(__name__)

ORDER_STATUS_NOTIFICATIONS: dict[str, NotificationType] = {
    "confirmed": NotificationType.ORDER_CONFIRMED,
    "shipped": NotificationType.ORDER_SHIPPED,
    "delivered": NotificationType.ORDER_DELIVERED,
    "cancelled": NotificationType.ORDER_CANCELLED,
}


@dataclass(frozen=True)
class TriggerOutcome:
    """Result of a trigger; callers are free to ignore it."""

    event: str
    delivered: bool
    skipped: bool = False
    error: Exception | None = None


async def _dispatch(event: str, action: Awaitable[object]) -> TriggerOutcome:
    try:
        await action
    except Exception as exc:
        # Swallow point: notification failures stop here.
        logger.exception("Notification trigger '%s' failed", event)
        return TriggerOutcome(event=event, delivered=False, error=exc)
    return TriggerOutcome(event=event, delivered=True)


async def on_user_registration(
    service: NotificationService, *, user_id: str, user_name: str, user_role: str
) -> TriggerOutcome:
    """Welcome the new user and tell the admins who signed up."""

    async def notify() -> None:
        await service.create_notification(
            user_id,
            NotificationType.WELCOME,
            NotificationOverrides(
                metadata=NotificationMetadata(user_name=user_name, action_url="/dashboard")
            ),
        )
        if user_role == "vendor":
            admin_type, action_url = NotificationType.NEW_VENDOR_APPLICATION, "/admin/vendors"
        else:
            admin_type, action_url = NotificationType.NEW_USER_REGISTERED, "/admin/users"
        await service.create_admin_notification(
            admin_type,
            NotificationOverrides(
                metadata=NotificationMetadata(
                    user_id=user_id, user_name=user_name, action_url=action_url
                )
            ),
        )

    return await _dispatch("user_registration", notify())


async def on_product_created(
    service: NotificationService,
    *,
    product_id: str,
    product_name: str,
    vendor_id: str,
    vendor_name: str,
) -> TriggerOutcome:
    """Ask moderators to review a newly listed product."""

    overrides = NotificationOverrides(
        metadata=NotificationMetadata(
            product_id=product_id,
            product_name=product_name,
            vendor_id=vendor_id,
            vendor_name=vendor_name,
            action_url="/admin/products",
        )
    )
    return await _dispatch(
        "product_created",
        service.create_moderator_notification(
            NotificationType.PRODUCT_PENDING_APPROVAL, overrides
        ),
    )


async def on_order_placed(
    service: NotificationService,
    *,
    order_id: str,
    customer_id: str,
    vendor_id: str,
    amount: float,
) -> TriggerOutcome:
    """Confirm the order to the customer and announce it to the vendor."""

    async def notify() -> None:
        await service.create_notification(
            customer_id,
            NotificationType.ORDER_PLACED,
            NotificationOverrides(
                metadata=NotificationMetadata(
                    order_id=order_id, amount=amount, action_url=f"/orders/{order_id}"
                )
            ),
        )
        await service.create_notification(
            vendor_id,
            NotificationType.NEW_ORDER_RECEIVED,
            NotificationOverrides(
                metadata=NotificationMetadata(
                    order_id=order_id,
                    amount=amount,
                    action_url=f"/vendor/orders/{order_id}",
                )
            ),
        )

    return await _dispatch("order_placed", notify())


async def on_order_status_change(
    service: NotificationService, *, order_id: str, customer_id: str, new_status: str
) -> TriggerOutcome:
    """Tell the customer about confirmed, shipped, delivered or cancelled orders."""

    notification_type = ORDER_STATUS_NOTIFICATIONS.get(new_status)
    if notification_type is None:
        logger.debug("Order %s moved to '%s'; nothing to notify", order_id, new_status)
        return TriggerOutcome(event="order_status_change", delivered=False, skipped=True)

    return await _dispatch(
        "order_status_change",
        service.create_notification(
            customer_id,
            notification_type,
            NotificationOverrides(
                metadata=NotificationMetadata(
                    order_id=order_id, action_url=f"/orders/{order_id}"
                )
            ),
        ),
    )


async def on_review_submitted(
    service: NotificationService, *, review_id: str, product_id: str, product_name: str
) -> TriggerOutcome:
    overrides = NotificationOverrides(
        metadata=NotificationMetadata(
            product_id=product_id, product_name=product_name, action_url="/admin/reviews"
        )
    )
    return await _dispatch(
        "review_submitted",
        service.create_moderator_notification(
            NotificationType.REVIEW_PENDING_MODERATION, overrides
        ),
    )


async def on_abuse_report_filed(
    service: NotificationService,
    *,
    report_id: str,
    reported_item_type: str,
    reported_item_id: str,
) -> TriggerOutcome:
    overrides = NotificationOverrides(
        priority=NotificationPriority.HIGH,
        metadata=NotificationMetadata(
            reported_item_type=reported_item_type,
            reported_item_id=reported_item_id,
            action_url="/admin/reports-abuse",
        ),
    )
    return await _dispatch(
        "abuse_report_filed",
        service.create_admin_notification(NotificationType.ABUSE_REPORT_FILED, overrides),
    )


async def on_payout_processed(
    service: NotificationService, *, vendor_id: str, amount: float, payout_id: str
) -> TriggerOutcome:
    overrides = NotificationOverrides(
        metadata=NotificationMetadata(
            amount=amount, action_url=f"/vendor/payouts/{payout_id}"
        )
    )
    return await _dispatch(
        "payout_processed",
        service.create_notification(vendor_id, NotificationType.PAYOUT_PROCESSED, overrides),
    )


async def on_system_maintenance(
    service: NotificationService, *, maintenance_date: date, duration: str
) -> TriggerOutcome:
    """Warn every user, whatever their role, about planned downtime."""

    overrides = NotificationOverrides(
        priority=NotificationPriority.HIGH,
        message=(
            f"Scheduled maintenance will begin on {format_short_date(maintenance_date)} "
            f"and last approximately {duration}"
        ),
        metadata=NotificationMetadata(action_url="/maintenance-info"),
    )
    return await _dispatch(
        "system_maintenance",
        service.create_role_notification(
            ALL_ROLES, NotificationType.SYSTEM_MAINTENANCE, overrides
        ),
    )


async def on_security_alert(
    service: NotificationService, *, user_id: str, alert_type: str, details: str
) -> TriggerOutcome:
    overrides = NotificationOverrides(
        priority=NotificationPriority.URGENT,
        message=f"Security Alert: {details}",
        metadata=NotificationMetadata(alert_type=alert_type, action_url="/account/security"),
    )
    return await _dispatch(
        "security_alert",
        service.create_notification(user_id, NotificationType.SECURITY_ALERT, overrides),
    )


async def on_wishlist_item_back_in_stock(
    service: NotificationService, *, user_id: str, product_id: str, product_name: str
) -> TriggerOutcome:
    overrides = NotificationOverrides(
        metadata=NotificationMetadata(
            product_id=product_id,
            product_name=product_name,
            action_url=f"/products/{product_id}",
        )
    )
    return await _dispatch(
        "wishlist_item_back_in_stock",
        service.create_notification(
            user_id, NotificationType.PRODUCT_BACK_IN_STOCK, overrides
        ),
    )


async def on_cart_item_price_drop(
    service: NotificationService,
    *,
    user_id: str,
    product_id: str,
    product_name: str,
    old_price: float,
    new_price: float,
) -> TriggerOutcome:
    """Tell the cart owner how much they now save on ``product_name``."""

    savings = old_price - new_price
    overrides = NotificationOverrides(
        message=(
            f'Great news! "{product_name}" in your cart dropped by '
            f"₦{format_amount(savings)}"
        ),
        metadata=NotificationMetadata(
            product_id=product_id,
            product_name=product_name,
            amount=savings,
            action_url="/cart",
        ),
    )
    return await _dispatch(
        "cart_item_price_drop",
        service.create_notification(user_id, NotificationType.CART_ITEM_PRICE_DROP, overrides),
    )


__all__ = [
    "ORDER_STATUS_NOTIFICATIONS",
    "TriggerOutcome",
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
]
