"""Assessment workflow endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from ....application.services.assessment_service import AssessmentService, AssessmentSession
from ....application.services.notification_dispatcher import NotificationOutcome
from ....application.services.workflow_controller import WORKFLOW_STEPS
from ....domain.value_objects.checklist_section import ChecklistSection, TOTAL_MAX_SCORE
from ....domain.value_objects.rating import Rating
from ....infrastructure.services import get_assessment_service
from ..schemas.assessment_schemas import (
    BackgroundResponse,
    BackgroundUpdateRequest,
    CatalogItemResponse,
    CatalogResponse,
    CatalogSectionResponse,
    CoordinatesResponse,
    GoToStepRequest,
    ItemAnswerRequest,
    ItemAnswerResponse,
    NotificationResponse,
    ReportResponse,
    ResultResponse,
    SectionAnswersResponse,
    SessionListResponse,
    SessionResponse,
    SignatureRequest,
    SignatureStatusResponse,
)

router = APIRouter()


def _answer_value(value) -> bool | str:
    return value if isinstance(value, bool) else value.value


def _notification_response(outcome: Optional[NotificationOutcome]) -> Optional[NotificationResponse]:
    if outcome is None:
        return None
    return NotificationResponse.model_validate(outcome, from_attributes=True)


def _session_response(session: AssessmentSession) -> SessionResponse:
    """Convert a live session to its response model."""
    controller = session.controller
    assessment = session.assessment
    background = assessment.background

    sections = []
    for section in ChecklistSection:
        answers = assessment.section_answers(section)
        sections.append(SectionAnswersResponse(
            section=section.value,
            label=section.label,
            answers={key: _answer_value(value) for key, value in answers.answers.items()},
            answered_count=answers.answered_count,
            item_count=len(section.definition.items)
        ))

    result = None
    if controller.result is not None:
        result = ResultResponse(
            total_score=controller.result.total_score,
            max_score=controller.result.max_score,
            stars=controller.result.stars,
            tier=controller.result.tier.value,
            section_scores={
                section.value: earned
                for section, earned in controller.result.scores_by_section().items()
            },
            completed_at=controller.result.completed_at
        )

    return SessionResponse(
        id=session.id,
        assessment_id=assessment.id,
        state=controller.state.value,
        current_step=controller.current_step,
        section_index=controller.section_index,
        steps=list(WORKFLOW_STEPS),
        ready_to_finalize=assessment.is_ready_to_finalize(),
        background=BackgroundResponse(
            facility_name=background.facility_name,
            address=background.address,
            owner_name=background.owner_name,
            phone_number=background.phone_number,
            email=background.email,
            inspector_name=background.inspector_name,
            inspection_date=background.inspection_date,
            facility_type=background.facility_type,
            coordinates=(
                CoordinatesResponse.model_validate(background.coordinates, from_attributes=True)
                if background.has_location else None
            )
        ),
        sections=sections,
        signatures=SignatureStatusResponse(
            inspector_signed=bool(assessment.signatures.inspector),
            facility_owner_signed=bool(assessment.signatures.facility_owner)
        ),
        result=result,
        notification=_notification_response(session.dispatcher.last_outcome),
        updated_at=assessment.updated_at
    )


@router.get("/catalog", response_model=CatalogResponse)
async def get_catalog() -> CatalogResponse:
    """Get the checklist sections, items and rating labels."""
    return CatalogResponse(
        steps=list(WORKFLOW_STEPS),
        sections=[
            CatalogSectionResponse(
                key=section.value,
                label=section.label,
                kind=section.definition.kind.value,
                per_item_max=section.definition.per_item_max,
                max_score=section.definition.max_score,
                items=[CatalogItemResponse(key=item.key, label=item.label) for item in section.definition.items]
            )
            for section in ChecklistSection
        ],
        ratings=[rating.value for rating in Rating if rating.is_set],
        total_max_score=TOTAL_MAX_SCORE
    )


@router.post("/", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def start_assessment(
    service: AssessmentService = Depends(get_assessment_service)
) -> SessionResponse:
    """
    Start a new assessment session.

    The session begins on the background step with an empty assessment.
    """
    session = await service.start_session()
    return _session_response(session)


@router.get("/", response_model=SessionListResponse)
async def list_assessments(
    service: AssessmentService = Depends(get_assessment_service)
) -> SessionListResponse:
    """List live assessment sessions."""
    sessions = await service.list_sessions()
    return SessionListResponse(
        sessions=[_session_response(session) for session in sessions],
        total=len(sessions)
    )


@router.get("/{session_id}", response_model=SessionResponse)
async def get_assessment(
    session_id: UUID,
    service: AssessmentService = Depends(get_assessment_service)
) -> SessionResponse:
    """Get the current state of an assessment session."""
    return _session_response(await service.get_session(session_id))


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_assessment(
    session_id: UUID,
    service: AssessmentService = Depends(get_assessment_service)
) -> Response:
    """Discard an assessment session."""
    await service.close_session(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{session_id}/background", response_model=SessionResponse)
async def update_background(
    session_id: UUID,
    request: BackgroundUpdateRequest,
    service: AssessmentService = Depends(get_assessment_service)
) -> SessionResponse:
    """
    Update background information.

    Only fields present in the request are changed. Sending null for the
    inspection date clears it.
    """
    changes = request.model_dump(exclude_unset=True)
    for key, value in list(changes.items()):
        if value is None and key != "inspection_date":
            changes[key] = ""
    session = await service.update_background(session_id, changes)
    return _session_response(session)


@router.put("/{session_id}/sections/{section}/items/{item_key}", response_model=ItemAnswerResponse)
async def update_section_item(
    session_id: UUID,
    section: str,
    item_key: str,
    request: ItemAnswerRequest,
    service: AssessmentService = Depends(get_assessment_service)
) -> ItemAnswerResponse:
    """Record the answer for one checklist item."""
    value = await service.update_section_item(session_id, section, item_key, request.value)
    return ItemAnswerResponse(section=section, item=item_key, value=_answer_value(value))


@router.put("/{session_id}/signatures/{party}", response_model=SessionResponse)
async def sign_assessment(
    session_id: UUID,
    party: str,
    request: SignatureRequest,
    service: AssessmentService = Depends(get_assessment_service)
) -> SessionResponse:
    """Store a committed signature for the inspector or the facility owner."""
    session = await service.set_signature(session_id, party, request.image)
    return _session_response(session)


@router.delete("/{session_id}/signatures/{party}", response_model=SessionResponse)
async def clear_signature(
    session_id: UUID,
    party: str,
    service: AssessmentService = Depends(get_assessment_service)
) -> SessionResponse:
    """Clear a signature."""
    session = await service.clear_signature(session_id, party)
    return _session_response(session)


@router.post("/{session_id}/next", response_model=SessionResponse)
async def next_section(
    session_id: UUID,
    service: AssessmentService = Depends(get_assessment_service)
) -> SessionResponse:
    """Move to the next step."""
    return _session_response(await service.next_section(session_id))


@router.post("/{session_id}/previous", response_model=SessionResponse)
async def previous_section(
    session_id: UUID,
    service: AssessmentService = Depends(get_assessment_service)
) -> SessionResponse:
    """Move to the previous step."""
    return _session_response(await service.previous_section(session_id))


@router.post("/{session_id}/go-to", response_model=SessionResponse)
async def go_to_section(
    session_id: UUID,
    request: GoToStepRequest,
    service: AssessmentService = Depends(get_assessment_service)
) -> SessionResponse:
    """Jump to a step."""
    return _session_response(await service.go_to_section(session_id, request.step))


@router.post("/{session_id}/request-signatures", response_model=SessionResponse)
async def request_signatures(
    session_id: UUID,
    service: AssessmentService = Depends(get_assessment_service)
) -> SessionResponse:
    """Proceed from the last section to signature collection."""
    return _session_response(await service.request_signatures(session_id))


@router.post("/{session_id}/cancel-signatures", response_model=SessionResponse)
async def cancel_signatures(
    session_id: UUID,
    service: AssessmentService = Depends(get_assessment_service)
) -> SessionResponse:
    """Return from signature collection to the last section."""
    return _session_response(await service.cancel_signatures(session_id))


@router.post("/{session_id}/finalize", response_model=SessionResponse)
async def finalize_assessment(
    session_id: UUID,
    service: AssessmentService = Depends(get_assessment_service)
) -> SessionResponse:
    """
    Complete the assessment.

    Requires both signatures. The score, star rating and compliance tier are
    computed and the summary is sent to the facility contact in the background.
    """
    await service.finalize(session_id)
    return _session_response(await service.get_session(session_id))


@router.post("/{session_id}/reset", response_model=SessionResponse)
async def reset_assessment(
    session_id: UUID,
    service: AssessmentService = Depends(get_assessment_service)
) -> SessionResponse:
    """Start a new assessment after completion."""
    return _session_response(await service.reset(session_id))


@router.get("/{session_id}/report", response_model=ReportResponse)
async def get_report(
    session_id: UUID,
    service: AssessmentService = Depends(get_assessment_service)
) -> ReportResponse:
    """Get the report of a completed assessment."""
    report = await service.get_report(session_id)
    return ReportResponse.model_validate(report, from_attributes=True)


@router.get("/{session_id}/notification", response_model=Optional[NotificationResponse])
async def get_notification_status(
    session_id: UUID,
    service: AssessmentService = Depends(get_assessment_service)
) -> Optional[NotificationResponse]:
    """Get the outcome of the latest summary dispatch."""
    return _notification_response(await service.notification_status(session_id))


@router.post("/{session_id}/notification/resend", response_model=NotificationResponse)
async def resend_notification(
    session_id: UUID,
    service: AssessmentService = Depends(get_assessment_service)
) -> NotificationResponse:
    """Send the summary again."""
    return _notification_response(await service.resend_notification(session_id))
