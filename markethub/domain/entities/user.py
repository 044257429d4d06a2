"""Domain entity representing a marketplace user."""

from dataclasses import dataclass
from datetime import datetime

ADMIN_ROLES = ("admin", "super_admin")
MODERATION_ROLES = ("moderator", "admin", "super_admin")
ALL_ROLES = ("customer", "vendor", "admin", "super_admin", "moderator", "support")


@dataclass
class User:
    """Directory entry for a user; the identity provider owns the rest."""

    id: str
    role: str
    name: str | None = None
    email: str | None = None
    created_at: datetime | None = None

    def is_admin(self) -> bool:
        """Return ``True`` when the user is an administrator."""

        return self.role.lower() in ADMIN_ROLES


__all__ = ["ADMIN_ROLES", "ALL_ROLES", "MODERATION_ROLES", "User"]
