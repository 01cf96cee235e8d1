"""Assessment service coordinating live workflow sessions."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from fse_compliance.application.ports.collaborators import GeocodeResult, Notifier, SignatureCapture
from fse_compliance.application.services.location_service import LocationService
from fse_compliance.application.services.notification_dispatcher import (
    NotificationDispatcher,
    NotificationOutcome
)
from fse_compliance.application.services.report_view import AssessmentReport, ReportView
from fse_compliance.application.services.workflow_controller import WorkflowController, WorkflowState
from fse_compliance.domain.entities.assessment import Assessment
from fse_compliance.domain.exceptions import AssessmentValidationError, InvalidTransitionError
from fse_compliance.domain.value_objects.assessment_result import AnswerValue, AssessmentResult
from fse_compliance.domain.value_objects.coordinates import Coordinates
from fse_compliance.infrastructure.logging import get_logger, log_with_extra

if TYPE_CHECKING:
    from fse_compliance.application.ports.repositories import AssessmentSessionRepository


class SessionNotFoundError(LookupError):
    """Raised when no live session exists for an ID."""

    def __init__(self, session_id: UUID):
        super().__init__(f"Assessment session {session_id} not found")
        self.session_id = session_id


@dataclass
class AssessmentSession:
    """One user's interactive assessment lifecycle."""

    controller: WorkflowController
    dispatcher: NotificationDispatcher
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def assessment(self) -> Assessment:
        """Get the assessment currently being worked on."""
        return self.controller.model


class AssessmentService:
    """Service for running assessment sessions and their business rules."""

    def __init__(
        self,
        session_repository: "AssessmentSessionRepository",
        notifier: Notifier,
        location_service: LocationService,
        signature_capture: SignatureCapture
    ):
        """Initialize assessment service with its collaborators."""
        self._session_repository = session_repository
        self._notifier = notifier
        self._location_service = location_service
        self._signature_capture = signature_capture
        self._logger = get_logger(__name__)

    async def start_session(self) -> AssessmentSession:
        """Start a new session in Editing(0) with an empty assessment."""
        controller = WorkflowController()
        dispatcher = NotificationDispatcher(self._notifier)
        controller.add_completion_listener(dispatcher.submit)
        session = AssessmentSession(controller=controller, dispatcher=dispatcher)

        saved = await self._session_repository.save(session)
        log_with_extra(
            self._logger,
            logging.INFO,
            f"Assessment session {saved.id} started",
            session_id=str(saved.id),
            assessment_id=str(saved.assessment.id)
        )
        return saved

    async def get_session(self, session_id: UUID) -> AssessmentSession:
        """Get a live session.

        Raises:
            SessionNotFoundError: If no session exists for the ID
        """
        session = await self._session_repository.find_by_id(session_id)
        if session is None:
            self._logger.warning(f"Assessment session {session_id} not found")
            raise SessionNotFoundError(session_id)
        return session

    async def list_sessions(self) -> List[AssessmentSession]:
        """Get all live sessions."""
        return await self._session_repository.find_all()

    async def close_session(self, session_id: UUID) -> None:
        """Discard a session."""
        if not await self._session_repository.delete(session_id):
            raise SessionNotFoundError(session_id)
        self._logger.info(f"Assessment session {session_id} closed")

    async def update_background(self, session_id: UUID, changes: Dict[str, object]) -> AssessmentSession:
        """Update background fields of the current assessment."""
        session = await self.get_session(session_id)
        session.assessment.update_background_fields(changes)
        self._logger.debug(f"Background updated for session {session_id}: {sorted(changes)}")
        return session

    async def update_section_item(
        self,
        session_id: UUID,
        section: str,
        item_key: str,
        value: object
    ) -> AnswerValue:
        """Record one checklist answer."""
        session = await self.get_session(session_id)
        return session.assessment.update_section_item(section, item_key, value)

    async def set_signature(self, session_id: UUID, party: str, raw: str) -> AssessmentSession:
        """Commit a drawn signature for a party.

        Raises:
            AssessmentValidationError: If the drawing is not a usable image handle
        """
        session = await self.get_session(session_id)
        try:
            handle = self._signature_capture.commit(raw)
        except ValueError as exc:
            raise AssessmentValidationError(str(exc)) from exc
        session.assessment.set_signature(party, handle)
        self._logger.info(f"Signature captured for {party} in session {session_id}")
        return session

    async def clear_signature(self, session_id: UUID, party: str) -> AssessmentSession:
        """Clear a party's signature."""
        session = await self.get_session(session_id)
        session.assessment.set_signature(party, self._signature_capture.clear())
        return session

    async def next_section(self, session_id: UUID) -> AssessmentSession:
        """Move to the next step."""
        session = await self.get_session(session_id)
        session.controller.next_section()
        return session

    async def previous_section(self, session_id: UUID) -> AssessmentSession:
        """Move to the previous step."""
        session = await self.get_session(session_id)
        session.controller.previous_section()
        return session

    async def go_to_section(self, session_id: UUID, step: str) -> AssessmentSession:
        """Jump to a step."""
        session = await self.get_session(session_id)
        try:
            session.controller.go_to(step)
        except ValueError as exc:
            raise AssessmentValidationError(str(exc)) from exc
        return session

    async def request_signatures(self, session_id: UUID) -> AssessmentSession:
        """Start collecting signatures."""
        session = await self.get_session(session_id)
        session.controller.request_signatures()
        return session

    async def cancel_signatures(self, session_id: UUID) -> AssessmentSession:
        """Go back to editing the last section."""
        session = await self.get_session(session_id)
        session.controller.cancel_signatures()
        return session

    async def finalize(self, session_id: UUID) -> AssessmentResult:
        """Complete the assessment. The summary is dispatched in the background.

        Raises:
            PreconditionNotMet: If not awaiting signatures or a signature is missing
        """
        session = await self.get_session(session_id)
        return session.controller.finalize()

    async def reset(self, session_id: UUID) -> AssessmentSession:
        """Start a new assessment in the same session after completion."""
        session = await self.get_session(session_id)
        session.controller.reset()
        session.dispatcher.forget()
        return session

    async def get_report(self, session_id: UUID) -> AssessmentReport:
        """Get the report of a completed assessment.

        Raises:
            InvalidTransitionError: If the assessment is not completed yet
        """
        session = await self.get_session(session_id)
        result = session.controller.result
        if session.controller.state != WorkflowState.COMPLETED or result is None:
            raise InvalidTransitionError("view the report", session.controller.state.value.replace("_", " "))
        return ReportView.project(result)

    async def notification_status(self, session_id: UUID) -> Optional[NotificationOutcome]:
        """Get the outcome of the latest summary dispatch."""
        session = await self.get_session(session_id)
        return session.dispatcher.last_outcome

    async def resend_notification(self, session_id: UUID) -> NotificationOutcome:
        """Re-send the summary of the completed assessment once."""
        session = await self.get_session(session_id)
        if session.controller.state != WorkflowState.COMPLETED:
            raise InvalidTransitionError("resend the summary", session.controller.state.value.replace("_", " "))
        return await session.dispatcher.resend()

    async def search_address(self, session_id: UUID, query: str) -> GeocodeResult:
        """Look up an address and apply it to the assessment."""
        session = await self.get_session(session_id)
        return await self._location_service.search_address(session.assessment, query)

    async def select_point(self, session_id: UUID, coordinates: Coordinates) -> str:
        """Apply a point chosen on the map."""
        session = await self.get_session(session_id)
        return await self._location_service.select_point(session.assessment, coordinates)

    async def use_current_location(self, session_id: UUID) -> Coordinates:
        """Apply the current device location."""
        session = await self.get_session(session_id)
        return await self._location_service.use_current_location(session.assessment)
