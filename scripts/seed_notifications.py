"""Utility script to reset a user's notifications during development."""

from __future__ import annotations

import argparse

import anyio

from markethub.application.use_cases.notifications import (
    clear_user_notifications,
    create_sample_notifications,
    get_notification_service,
)
from markethub.domain.entities import ALL_ROLES, User
from markethub.domain.exceptions import StorageError


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for seeding."""

    parser = argparse.ArgumentParser(
        description="Clear a user's notifications and create a sample welcome notification.",
    )
    parser.add_argument("user_id", help="Identifier of the user whose feed is reset")
    parser.add_argument(
        "--clear-only",
        action="store_true",
        help="Only delete the existing notifications.",
    )
    parser.add_argument(
        "--register-role",
        choices=ALL_ROLES,
        default=None,
        help="Also add the user to the directory with this role (used by role broadcasts).",
    )
    parser.add_argument("--name", default=None, help="Display name stored in the directory")
    return parser.parse_args()


async def run(args: argparse.Namespace) -> None:
    service = get_notification_service()

    if args.register_role:
        existing = await service.users.get(args.user_id)
        if existing is None:
            await service.users.create(User(id=args.user_id, role=args.register_role, name=args.name))
            print(f"Registered {args.user_id} as {args.register_role}")

    if args.clear_only:
        removed = await clear_user_notifications(service, args.user_id)
        print(f"Removed {removed} notifications for {args.user_id}")
        return

    notification_id = await create_sample_notifications(service, args.user_id)
    print(
        "Sample notifications created:\n"
        f"  User: {args.user_id}\n"
        f"  Welcome notification: {notification_id}"
    )


def main() -> None:
    """Seed notifications using the provided command line arguments."""

    args = parse_args()
    try:
        anyio.run(run, args)
    except StorageError as exc:
        raise SystemExit(f"Could not reach the notification store: {exc}") from exc


if __name__ == "__main__":
    main()
