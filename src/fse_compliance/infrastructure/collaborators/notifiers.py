"""Notifier adapters."""

import logging
from typing import Optional

import httpx

from fse_compliance.application.ports.collaborators import NotificationRequest, Notifier
from fse_compliance.domain.exceptions import NotificationError
from fse_compliance.infrastructure.logging import get_logger, log_with_extra

logger = get_logger(__name__)


class LoggingNotifier(Notifier):
    """Writes the summary to the log instead of sending it."""

    async def send_summary(self, request: NotificationRequest) -> None:
        """Log the summary message."""
        log_with_extra(
            logger,
            logging.INFO,
            f"Summary for {request.contact_address}: {request.message}",
            contact_address=request.contact_address,
            facility_name=request.facility_name,
            total_score=request.total_score,
            star_rating=request.star_rating,
            compliance_tier=request.compliance_tier
        )


class WebhookNotifier(Notifier):
    """POSTs the summary as JSON to a messaging gateway."""

    def __init__(
        self,
        webhook_url: str,
        timeout_seconds: float = 10.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        if not webhook_url:
            raise ValueError("Webhook URL is required for the webhook notifier")
        self._webhook_url = webhook_url
        self._timeout = timeout_seconds
        self._client = client

    async def send_summary(self, request: NotificationRequest) -> None:
        """Deliver the summary; any transport error or non-2xx reply is a failure."""
        body = {
            "to": request.contact_address,
            "message": request.message,
            "facility_name": request.facility_name,
            "total_score": request.total_score,
            "star_rating": request.star_rating,
            "compliance_tier": request.compliance_tier,
        }
        try:
            if self._client is not None:
                response = await self._client.post(self._webhook_url, json=body, timeout=self._timeout)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self._webhook_url, json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise NotificationError(f"Messaging gateway returned {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise NotificationError(f"Messaging gateway unreachable: {exc}") from exc
