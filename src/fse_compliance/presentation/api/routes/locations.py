"""Facility location endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends

from ....application.services.assessment_service import AssessmentService
from ....domain.value_objects.coordinates import Coordinates
from ....infrastructure.services import get_assessment_service
from ..schemas.assessment_schemas import AddressSearchRequest, CoordinatesRequest, LocationResponse

router = APIRouter()


@router.post("/{session_id}/location/search", response_model=LocationResponse)
async def search_address(
    session_id: UUID,
    request: AddressSearchRequest,
    service: AssessmentService = Depends(get_assessment_service)
) -> LocationResponse:
    """Look up an address and use it as the facility location."""
    result = await service.search_address(session_id, request.query)
    return LocationResponse(
        latitude=result.coordinates.latitude,
        longitude=result.coordinates.longitude,
        address=result.formatted_address
    )


@router.post("/{session_id}/location/select", response_model=LocationResponse)
async def select_point(
    session_id: UUID,
    request: CoordinatesRequest,
    service: AssessmentService = Depends(get_assessment_service)
) -> LocationResponse:
    """
    Use a point chosen on the map as the facility location.

    When the address cannot be resolved, the coordinates are used as the address.
    """
    coordinates = Coordinates(request.latitude, request.longitude)
    address = await service.select_point(session_id, coordinates)
    return LocationResponse(latitude=coordinates.latitude, longitude=coordinates.longitude, address=address)


@router.post("/{session_id}/location/current", response_model=LocationResponse)
async def use_current_location(
    session_id: UUID,
    service: AssessmentService = Depends(get_assessment_service)
) -> LocationResponse:
    """Use the current device location as the facility location."""
    coordinates = await service.use_current_location(session_id)
    session = await service.get_session(session_id)
    return LocationResponse(
        latitude=coordinates.latitude,
        longitude=coordinates.longitude,
        address=session.assessment.background.address
    )
