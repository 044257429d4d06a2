"""Placeholder substitution for notification templates."""

from __future__ import annotations

import re
from typing import Callable, Mapping

from markethub.domain.entities import NotificationMetadata
from markethub.utils import format_amount

_RESOLVERS: Mapping[str, Callable[[NotificationMetadata], str]] = {
    "productName": lambda metadata: metadata.product_name or "",
    "vendorName": lambda metadata: metadata.vendor_name or "",
    "storeName": lambda metadata: metadata.store_name or "",
    "userName": lambda metadata: metadata.user_name or "",
    "orderId": lambda metadata: metadata.order_id or "",
    "amount": lambda metadata: format_amount(metadata.amount),
    "senderName": lambda metadata: metadata.sender_name or "",
}

PLACEHOLDER_TOKENS = tuple(f"{{{name}}}" for name in _RESOLVERS)

_TOKEN_PATTERN = re.compile(r"\{(" + "|".join(_RESOLVERS) + r")\}")


def render_placeholders(text: str, metadata: NotificationMetadata | None) -> str:
    """Replace every known token in ``text`` with the matching metadata value.

    Tokens whose value is missing become empty strings. Substitution is a
    single pass, so metadata values are never re-scanned for tokens.
    """

    metadata = metadata or NotificationMetadata()
    return _TOKEN_PATTERN.sub(lambda match: _RESOLVERS[match.group(1)](metadata), text)


__all__ = ["PLACEHOLDER_TOKENS", "render_placeholders"]
