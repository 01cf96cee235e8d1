"""Best-effort delivery of assessment summaries."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional, Set

from fse_compliance.application.ports.collaborators import NotificationRequest, Notifier
from fse_compliance.domain.exceptions import NotificationError, PreconditionNotMet
from fse_compliance.domain.value_objects.assessment_result import AssessmentResult
from fse_compliance.infrastructure.logging import (
    get_logger,
    log_collaborator_failure,
    log_with_extra
)


class DeliveryStatus(Enum):
    """Notification delivery status enumeration."""
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class NotificationOutcome:
    """Immutable record of one delivery attempt."""

    status: DeliveryStatus
    contact_address: str
    message: str
    detail: str = ""
    recorded_at: Optional[datetime] = None

    @property
    def is_warning(self) -> bool:
        """Check if the outcome should be shown to the user as a warning."""
        return self.status in (DeliveryStatus.FAILED, DeliveryStatus.SKIPPED)


def build_notification_request(result: AssessmentResult) -> NotificationRequest:
    """Build the summary for a completed assessment."""
    return NotificationRequest(
        contact_address=result.background.contact_address,
        facility_name=result.background.facility_name,
        total_score=result.total_score,
        star_rating=result.stars,
        compliance_tier=result.tier.value
    )


class NotificationDispatcher:
    """Sends summaries through a Notifier without blocking the workflow.

    ``submit`` is safe to call from synchronous code: with a running event
    loop delivery is scheduled as a task, otherwise it is queued until
    ``drain`` is awaited. Failures are recorded, never raised.
    """

    def __init__(self, notifier: Notifier):
        self._notifier = notifier
        self._queued: List[NotificationRequest] = []
        self._tasks: Set[asyncio.Task] = set()
        self._last_request: Optional[NotificationRequest] = None
        self._last_outcome: Optional[NotificationOutcome] = None
        self._logger = get_logger(__name__)

    @property
    def last_outcome(self) -> Optional[NotificationOutcome]:
        """Get the most recent delivery outcome."""
        return self._last_outcome

    @property
    def last_request(self) -> Optional[NotificationRequest]:
        """Get the most recently submitted summary."""
        return self._last_request

    def submit(self, result: AssessmentResult) -> None:
        """Dispatch the summary of a completed assessment."""
        request = build_notification_request(result)
        self._last_request = request

        if not request.contact_address:
            self._record(DeliveryStatus.SKIPPED, request, "No phone number or email recorded")
            self._logger.warning(
                f"Skipping summary for assessment {result.assessment_id}: no contact address"
            )
            return

        self._record(DeliveryStatus.PENDING, request)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._queued.append(request)
            return

        task = loop.create_task(self.deliver(request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def deliver(self, request: NotificationRequest) -> NotificationOutcome:
        """Attempt one delivery and record the outcome."""
        try:
            await self._notifier.send_summary(request)
        except Exception as exc:
            log_collaborator_failure(
                self._logger,
                "notifier",
                "send_summary",
                exc,
                contact_address=request.contact_address
            )
            detail = str(exc) if isinstance(exc, NotificationError) else f"Unexpected notifier error: {exc}"
            return self._record(DeliveryStatus.FAILED, request, detail)

        log_with_extra(
            self._logger,
            logging.INFO,
            f"Summary sent to {request.contact_address}",
            contact_address=request.contact_address,
            facility_name=request.facility_name,
            total_score=request.total_score
        )
        return self._record(DeliveryStatus.SENT, request)

    async def drain(self) -> List[NotificationOutcome]:
        """Deliver queued summaries and wait for scheduled ones."""
        outcomes = []
        while self._queued:
            outcomes.append(await self.deliver(self._queued.pop(0)))
        if self._tasks:
            outcomes.extend(await asyncio.gather(*list(self._tasks)))
        return outcomes

    async def resend(self) -> NotificationOutcome:
        """Re-invoke delivery of the last summary once.

        Raises:
            PreconditionNotMet: If nothing was submitted or no contact is recorded
        """
        if self._last_request is None:
            raise PreconditionNotMet("No completed assessment summary to send")
        if not self._last_request.contact_address:
            raise PreconditionNotMet("No phone number or email recorded for the facility")
        return await self.deliver(self._last_request)

    def forget(self) -> None:
        """Drop the last summary and outcome, as when a new assessment starts.

        Deliveries still in flight are cancelled.
        """
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()
        self._queued.clear()
        self._last_request = None
        self._last_outcome = None

    def _record(self, status: DeliveryStatus, request: NotificationRequest, detail: str = "") -> NotificationOutcome:
        outcome = NotificationOutcome(
            status=status,
            contact_address=request.contact_address,
            message=request.message,
            detail=detail,
            recorded_at=datetime.utcnow()
        )
        # Outcomes of a forgotten summary must not resurface.
        if request is self._last_request:
            self._last_outcome = outcome
        return outcome
