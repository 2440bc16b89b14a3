from __future__ import annotations

from functools import lru_cache

import httpx
from loguru import logger

from lifeline.core.config import get_settings
from lifeline.core.errors import DependencyError


class NotificationService:
    """Client for the outbound e-mail endpoint: recipients, subject and message body."""

    def __init__(
        self,
        *,
        url: str | None,
        token: str | None = None,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url
        self.token = token
        self.timeout = timeout
        self.client = client or httpx.Client(timeout=timeout)

    def send(self, *, emails: list[str], subject: str, message: str) -> None:
        if not self.url:
            raise DependencyError("Notification endpoint is not configured")

        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = self.client.post(
                self.url,
                json={"emails": emails, "subject": subject, "message": message},
                headers=headers,
            )
        except httpx.HTTPError as exc:
            logger.warning("Notification request failed: {error}", error=exc)
            raise DependencyError("Failed to send donation request emails.") from exc

        if response.is_error:
            logger.warning(
                "Notification endpoint returned {status}: {body}",
                status=response.status_code,
                body=response.text,
            )
            raise DependencyError(response.text or f"Notification endpoint returned {response.status_code}")

        logger.info("Sent '{subject}' to {count} recipient(s)", subject=subject, count=len(emails))


@lru_cache
def get_notification_service() -> NotificationService:
    settings = get_settings()
    return NotificationService(
        url=settings.notify_url,
        token=settings.notify_token,
        timeout=settings.notify_timeout_sec,
    )
