"""Read access to the user directory."""

from __future__ import annotations

from collections.abc import Iterable

from markethub.domain.entities import User
from markethub.infrastructure.store import USERS, DocumentStore, Record
from markethub.utils import ensure_app_timezone


class UserRepository:
    """Resolve users and role membership from the ``users`` collection."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def get(self, user_id: str) -> User | None:
        document = await self.store.get(USERS, user_id)
        return self._to_entity(document) if document is not None else None

    async def list_ids_by_roles(self, roles: Iterable[str]) -> list[str]:
        """Return the ids of every user whose role is in ``roles`` right now."""

        wanted = sorted({role for role in roles if role})
        if not wanted:
            return []
        documents = await self.store.query(USERS, [("role", "in", wanted)])
        return [document["id"] for document in documents]

    async def create(self, user: User) -> User:
        """Register ``user`` in the directory (used by seeding scripts and tests)."""

        user.id = await self.store.insert(
            USERS,
            {
                "id": user.id,
                "role": user.role,
                "name": user.name,
                "email": user.email,
                "created_at": user.created_at,
            },
        )
        return user

    @staticmethod
    def _to_entity(document: Record) -> User:
        return User(
            id=document["id"],
            role=document["role"],
            name=document.get("name"),
            email=document.get("email"),
            created_at=ensure_app_timezone(document.get("created_at")),
        )


__all__ = ["UserRepository"]
