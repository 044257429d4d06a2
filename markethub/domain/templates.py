"""Static title/message templates for every notification type."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .entities import NotificationPriority, NotificationType
from .exceptions import TemplateNotFoundError

LOW = NotificationPriority.LOW
MEDIUM = NotificationPriority.MEDIUM
HIGH = NotificationPriority.HIGH
URGENT = NotificationPriority.URGENT


@dataclass(frozen=True)
class NotificationTemplate:
    """Title and message with ``{placeholder}`` tokens plus display defaults."""

    title: str
    message: str
    priority: NotificationPriority
    icon: str


_T = NotificationType

NOTIFICATION_TEMPLATES: Mapping[NotificationType, NotificationTemplate] = MappingProxyType(
    {
        # Product
        _T.PRODUCT_CREATED: NotificationTemplate(
            "New Product Added",
            'A new product "{productName}" has been added to the marketplace',
            LOW,
            "📦",
        ),
        _T.PRODUCT_APPROVED: NotificationTemplate(
            "Product Approved",
            'Your product "{productName}" has been approved and is now live',
            MEDIUM,
            "✅",
        ),
        _T.PRODUCT_REJECTED: NotificationTemplate(
            "Product Rejected",
            'Your product "{productName}" was rejected. Please review and resubmit',
            HIGH,
            "❌",
        ),
        _T.PRODUCT_OUT_OF_STOCK: NotificationTemplate(
            "Product Out of Stock",
            'Your product "{productName}" is now out of stock',
            MEDIUM,
            "📉",
        ),
        _T.PRODUCT_BACK_IN_STOCK: NotificationTemplate(
            "Back in Stock!",
            '"{productName}" from your wishlist is back in stock',
            MEDIUM,
            "🔄",
        ),
        _T.WISHLIST_ITEM_SALE: NotificationTemplate(
            "Wishlist Item on Sale!",
            '"{productName}" from your wishlist is now on sale',
            MEDIUM,
            "🏷️",
        ),
        _T.CART_ITEM_PRICE_DROP: NotificationTemplate(
            "Price Drop Alert!",
            "An item in your cart has dropped in price",
            MEDIUM,
            "💰",
        ),
        # Order
        _T.ORDER_PLACED: NotificationTemplate(
            "Order Placed",
            "Your order #{orderId} has been placed successfully",
            MEDIUM,
            "🛒",
        ),
        _T.ORDER_CONFIRMED: NotificationTemplate(
            "Order Confirmed",
            "Your order #{orderId} has been confirmed by the vendor",
            MEDIUM,
            "✅",
        ),
        _T.ORDER_SHIPPED: NotificationTemplate(
            "Order Shipped", "Your order #{orderId} has been shipped", MEDIUM, "🚚"
        ),
        _T.ORDER_DELIVERED: NotificationTemplate(
            "Order Delivered", "Your order #{orderId} has been delivered", MEDIUM, "📦"
        ),
        _T.ORDER_CANCELLED: NotificationTemplate(
            "Order Cancelled", "Your order #{orderId} has been cancelled", HIGH, "❌"
        ),
        _T.ORDER_REFUNDED: NotificationTemplate(
            "Refund Processed",
            "Your refund for order #{orderId} has been processed",
            MEDIUM,
            "💳",
        ),
        # Vendor
        _T.VENDOR_APPROVED: NotificationTemplate(
            "Vendor Account Approved",
            "Congratulations! Your vendor account has been approved",
            HIGH,
            "🎉",
        ),
        _T.VENDOR_REJECTED: NotificationTemplate(
            "Vendor Application Rejected",
            "Your vendor application was rejected. Please review requirements",
            HIGH,
            "❌",
        ),
        _T.VENDOR_SUSPENDED: NotificationTemplate(
            "Account Suspended",
            "Your vendor account has been suspended. Contact support",
            URGENT,
            "⚠️",
        ),
        _T.NEW_ORDER_RECEIVED: NotificationTemplate(
            "New Order Received", "You have received a new order #{orderId}", HIGH, "🛒"
        ),
        _T.PAYOUT_PROCESSED: NotificationTemplate(
            "Payout Processed", "Your payout of ₦{amount} has been processed", MEDIUM, "💰"
        ),
        _T.PAYOUT_PENDING: NotificationTemplate(
            "Payout Pending", "Your payout request is being processed", LOW, "⏳"
        ),
        # Admin and moderation
        _T.NEW_USER_REGISTERED: NotificationTemplate(
            "New User Registration", 'A new user "{userName}" has registered', LOW, "👤"
        ),
        _T.NEW_VENDOR_APPLICATION: NotificationTemplate(
            "New Vendor Application",
            'New vendor application from "{vendorName}" requires review',
            MEDIUM,
            "🏪",
        ),
        _T.PRODUCT_PENDING_APPROVAL: NotificationTemplate(
            "Product Pending Approval",
            'New product "{productName}" is pending approval',
            MEDIUM,
            "📦",
        ),
        _T.REVIEW_PENDING_MODERATION: NotificationTemplate(
            "Review Pending Moderation", "A new review requires moderation", MEDIUM, "⭐"
        ),
        _T.AD_PENDING_APPROVAL: NotificationTemplate(
            "Ad Pending Approval",
            "New advertisement campaign requires approval",
            MEDIUM,
            "📢",
        ),
        _T.ABUSE_REPORT_FILED: NotificationTemplate(
            "Abuse Report Filed", "A new abuse report has been filed", HIGH, "🚨"
        ),
        _T.SYSTEM_MAINTENANCE: NotificationTemplate(
            "System Maintenance", "Scheduled maintenance will begin soon", HIGH, "🔧"
        ),
        _T.SECURITY_ALERT: NotificationTemplate(
            "Security Alert", "Unusual activity detected on your account", URGENT, "🔒"
        ),
        # Storefront
        _T.FAVORITE_STORE_NEW_PRODUCT: NotificationTemplate(
            "New Product from Favorite Store",
            '"{storeName}" added a new product: "{productName}"',
            MEDIUM,
            "🏪",
        ),
        _T.FAVORITE_STORE_SALE: NotificationTemplate(
            "Sale at Favorite Store", '"{storeName}" is having a sale!', MEDIUM, "🏷️"
        ),
        _T.STORE_FOLLOWED: NotificationTemplate(
            "New Follower", "Someone started following your store", LOW, "👥"
        ),
        _T.STORE_UNFOLLOWED: NotificationTemplate(
            "Store Unfollowed", "Someone unfollowed your store", LOW, "👥"
        ),
        # Communication
        _T.NEW_MESSAGE: NotificationTemplate(
            "New Message", "You have a new message from {senderName}", MEDIUM, "💬"
        ),
        _T.NEW_QUESTION: NotificationTemplate(
            "New Product Question",
            'Someone asked a question about "{productName}"',
            MEDIUM,
            "❓",
        ),
        _T.QUESTION_ANSWERED: NotificationTemplate(
            "Question Answered",
            'Your question about "{productName}" was answered',
            MEDIUM,
            "💡",
        ),
        _T.NEW_REVIEW: NotificationTemplate(
            "New Product Review",
            'You received a new review for "{productName}"',
            MEDIUM,
            "⭐",
        ),
        # General
        _T.WELCOME: NotificationTemplate(
            "Welcome to MarketHub!",
            "Welcome to Nigeria's premier e-commerce platform",
            MEDIUM,
            "🎉",
        ),
        _T.ACCOUNT_VERIFIED: NotificationTemplate(
            "Account Verified", "Your account has been successfully verified", MEDIUM, "✅"
        ),
        _T.PASSWORD_CHANGED: NotificationTemplate(
            "Password Changed", "Your password has been successfully changed", MEDIUM, "🔒"
        ),
        _T.PROFILE_UPDATED: NotificationTemplate(
            "Profile Updated", "Your profile has been successfully updated", LOW, "👤"
        ),
    }
)

_missing = [kind.value for kind in NotificationType if kind not in NOTIFICATION_TEMPLATES]
if _missing:  # pragma: no cover - caught by the template tests
    raise RuntimeError(f"Missing notification templates: {', '.join(_missing)}")
del _missing


def get_template(notification_type: NotificationType | str) -> NotificationTemplate:
    """Return the template registered for ``notification_type``."""

    try:
        kind = NotificationType(notification_type)
    except ValueError as exc:
        raise TemplateNotFoundError(notification_type) from exc
    try:
        return NOTIFICATION_TEMPLATES[kind]
    except KeyError as exc:  # pragma: no cover - guarded by the import-time check
        raise TemplateNotFoundError(notification_type) from exc


__all__ = ["NOTIFICATION_TEMPLATES", "NotificationTemplate", "get_template"]
