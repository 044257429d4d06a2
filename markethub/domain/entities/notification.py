"""Domain entities representing user notifications."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationType(str, Enum):
    """Closed set of notification kinds produced by the marketplace."""

    # Product
    PRODUCT_CREATED = "product_created"
    PRODUCT_APPROVED = "product_approved"
    PRODUCT_REJECTED = "product_rejected"
    PRODUCT_OUT_OF_STOCK = "product_out_of_stock"
    PRODUCT_BACK_IN_STOCK = "product_back_in_stock"
    WISHLIST_ITEM_SALE = "wishlist_item_sale"
    CART_ITEM_PRICE_DROP = "cart_item_price_drop"

    # Order
    ORDER_PLACED = "order_placed"
    ORDER_CONFIRMED = "order_confirmed"
    ORDER_SHIPPED = "order_shipped"
    ORDER_DELIVERED = "order_delivered"
    ORDER_CANCELLED = "order_cancelled"
    ORDER_REFUNDED = "order_refunded"

    # Vendor
    VENDOR_APPROVED = "vendor_approved"
    VENDOR_REJECTED = "vendor_rejected"
    VENDOR_SUSPENDED = "vendor_suspended"
    NEW_ORDER_RECEIVED = "new_order_received"
    PAYOUT_PROCESSED = "payout_processed"
    PAYOUT_PENDING = "payout_pending"

    # Admin and moderation
    NEW_USER_REGISTERED = "new_user_registered"
    NEW_VENDOR_APPLICATION = "new_vendor_application"
    PRODUCT_PENDING_APPROVAL = "product_pending_approval"
    REVIEW_PENDING_MODERATION = "review_pending_moderation"
    AD_PENDING_APPROVAL = "ad_pending_approval"
    ABUSE_REPORT_FILED = "abuse_report_filed"
    SYSTEM_MAINTENANCE = "system_maintenance"
    SECURITY_ALERT = "security_alert"

    # Storefront
    FAVORITE_STORE_NEW_PRODUCT = "favorite_store_new_product"
    FAVORITE_STORE_SALE = "favorite_store_sale"
    STORE_FOLLOWED = "store_followed"
    STORE_UNFOLLOWED = "store_unfollowed"

    # Communication
    NEW_MESSAGE = "new_message"
    NEW_QUESTION = "new_question"
    QUESTION_ANSWERED = "question_answered"
    NEW_REVIEW = "new_review"

    # General
    WELCOME = "welcome"
    ACCOUNT_VERIFIED = "account_verified"
    PASSWORD_CHANGED = "password_changed"
    PROFILE_UPDATED = "profile_updated"


class NotificationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class NotificationStatus(str, Enum):
    UNREAD = "unread"
    READ = "read"
    # Reserved; no trigger archives notifications yet.
    ARCHIVED = "archived"


@dataclass
class NotificationMetadata:
    """Optional context attached to a notification.

    Any subset of the fields may be present. Templates read the ones they
    need and the UI uses ``action_url``/``action_text`` for call-to-action
    buttons.
    """

    product_id: str | None = None
    product_name: str | None = None
    order_id: str | None = None
    vendor_id: str | None = None
    vendor_name: str | None = None
    store_id: str | None = None
    store_name: str | None = None
    user_id: str | None = None
    user_name: str | None = None
    amount: float | None = None
    rating: float | None = None
    conversation_id: str | None = None
    sender_name: str | None = None
    sender_role: str | None = None
    reported_item_type: str | None = None
    reported_item_id: str | None = None
    alert_type: str | None = None
    image_url: str | None = None
    action_url: str | None = None
    action_text: str | None = None

    def to_document(self) -> dict[str, Any]:
        """Return the populated fields only, ready to be persisted."""

        return {key: value for key, value in asdict(self).items() if value is not None}

    @classmethod
    def from_document(cls, data: dict[str, Any] | None) -> "NotificationMetadata":
        """Build metadata from a stored mapping, ignoring unknown keys."""

        if not data:
            return cls()
        known = {item.name for item in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


@dataclass
class NotificationOverrides:
    """Values a caller may supply on top of the template defaults."""

    title: str | None = None
    message: str | None = None
    priority: NotificationPriority | None = None
    recipient_role: str | None = None
    expires_at: datetime | None = None
    metadata: NotificationMetadata | None = None


@dataclass
class Notification:
    """Message delivered to a specific recipient."""

    id: str | None
    recipient_id: str
    type: NotificationType
    title: str
    message: str
    priority: NotificationPriority
    status: NotificationStatus = NotificationStatus.UNREAD
    recipient_role: str | None = None
    metadata: NotificationMetadata = field(default_factory=NotificationMetadata)
    created_at: datetime | None = None
    read_at: datetime | None = None
    # Advisory only; nothing sweeps expired notifications.
    expires_at: datetime | None = None

    @property
    def is_unread(self) -> bool:
        return self.status == NotificationStatus.UNREAD


__all__ = [
    "Notification",
    "NotificationMetadata",
    "NotificationOverrides",
    "NotificationPriority",
    "NotificationStatus",
    "NotificationType",
]
