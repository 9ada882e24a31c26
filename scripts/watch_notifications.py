"""Utility script to poll notifications for a user and print new ones."""

from __future__ import annotations

import argparse
import asyncio
import logging

from sqlalchemy.exc import SQLAlchemyError

from notification_client.application import NotificationClient
from notification_client.config import get_settings
from notification_client.domain.entities import Notification, badge_label


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the watcher."""

    parser = argparse.ArgumentParser(
        description="Poll the notification store and print notifications as they arrive.",
    )
    parser.add_argument("user_id", help="Identifier of the user to watch")
    parser.add_argument(
        "--token",
        default=None,
        help="Bearer token for the store (defaults to ACCESS_TOKEN from the environment)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every poll cycle at debug level.",
    )
    return parser.parse_args()


def print_notification(notification: Notification) -> None:
    print(f"{notification.type.icon} {notification.title}: {notification.message}")


async def watch(user_id: str, token: str | None) -> None:
    settings = get_settings()
    if token:
        settings = settings.model_copy(update={"access_token": token})

    async with NotificationClient.from_settings(settings) as client:
        count = await client.get_unread_count()
        print(f"Unread notifications: {badge_label(count) or 0}")
        client.on_notification(print_notification)
        client.initialize(user_id)
        while True:
            await asyncio.sleep(3600)


def main() -> None:
    """Watch notifications until interrupted."""

    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        asyncio.run(watch(args.user_id, args.token))
    except KeyboardInterrupt:
        pass
    except SQLAlchemyError as exc:
        raise SystemExit(f"Could not open the checkpoint database: {exc}") from exc


if __name__ == "__main__":
    main()
