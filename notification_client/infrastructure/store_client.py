"""HTTP client for the remote notification store."""

from __future__ import annotations

import logging
from typing import Any, Callable
from urllib.parse import quote

import httpx

from notification_client.config import Settings
from notification_client.domain.entities import Notification, NotificationPage

from .serialization import MalformedNotificationError, parse_notification

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None]


class NotificationStoreError(Exception):
    """Base error for notification store request failures."""


class NotificationStoreConnectionError(NotificationStoreError):
    """Raised when the store cannot be reached."""


class NotificationStoreResponseError(NotificationStoreError):
    """Raised when the store answers with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotificationStoreAuthError(NotificationStoreResponseError):
    """Raised when the store rejects the credentials."""


class NotificationStoreClient:
    """Thin async wrapper over the notification REST endpoints.

    Transport problems and non-2xx answers raise :class:`NotificationStoreError`
    subclasses. Bodies that do not match the expected envelope are defaulted
    (empty list, zero, ``has_more=False``) and logged.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        token_provider: TokenProvider | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self._token_provider = token_provider or (lambda: settings.access_token)
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            base_url=settings.api_base_url,
            timeout=httpx.Timeout(settings.request_timeout_seconds),
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def list_unread(self) -> list[Notification]:
        body = await self._request("GET", "/notifications", params={"unread_only": "true"})
        return self._parse_notifications(_envelope(body).get("notifications"))

    async def list_page(self, page: int, limit: int) -> NotificationPage:
        body = await self._request(
            "GET", "/notifications", params={"page": page, "limit": limit}
        )
        data = _envelope(body)
        items = self._parse_notifications(data.get("notifications"))
        has_more = data.get("hasMore")
        return NotificationPage(
            items=items[:limit],
            has_more=has_more if isinstance(has_more, bool) else False,
        )

    async def unread_count(self) -> int:
        body = await self._request("GET", "/notifications/unread-count")
        count = _envelope(body).get("count")
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            if count is not None:
                logger.error("Unread count response is malformed: %r", count)
            return 0
        return count

    async def mark_read(self, notification_id: str) -> None:
        await self._request("PUT", f"/notifications/{quote(notification_id, safe='')}/read")

    async def mark_all_read(self) -> None:
        await self._request("PUT", "/notifications/mark-all-read")

    async def delete(self, notification_id: str) -> None:
        await self._request("DELETE", f"/notifications/{quote(notification_id, safe='')}")

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self._token_provider()
        if not token:
            logger.warning("No access token available; sending request without Authorization")
            return headers
        headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(
        self, method: str, path: str, *, params: dict[str, Any] | None = None
    ) -> Any:
        url = f"{self.settings.api_prefix}{path}"
        try:
            response = await self.http.request(
                method, url, params=params, headers=self._headers()
            )
        except httpx.HTTPError as exc:
            msg = f"Request {method} {url} failed: {exc}"
            raise NotificationStoreConnectionError(msg) from exc

        if response.status_code in {401, 403}:
            raise NotificationStoreAuthError(
                f"Store rejected credentials for {method} {url}",
                status_code=response.status_code,
            )
        if not response.is_success:
            raise NotificationStoreResponseError(
                f"Store answered {response.status_code} for {method} {url}",
                status_code=response.status_code,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            logger.error("Store returned a non-JSON body for %s %s", method, url)
            return None

    @staticmethod
    def _parse_notifications(records: Any) -> list[Notification]:
        if not isinstance(records, list):
            if records is not None:
                logger.error("Notification list response is malformed: %r", type(records))
            return []

        notifications: list[Notification] = []
        for record in records:
            try:
                notifications.append(parse_notification(record))
            except MalformedNotificationError as exc:
                logger.error("Skipping malformed notification record: %s", exc)
        return notifications


def _envelope(body: Any) -> dict[str, Any]:
    if not isinstance(body, dict):
        return {}
    data = body.get("data")
    return data if isinstance(data, dict) else {}


__all__ = [
    "NotificationStoreAuthError",
    "NotificationStoreClient",
    "NotificationStoreConnectionError",
    "NotificationStoreError",
    "NotificationStoreResponseError",
    "TokenProvider",
]
