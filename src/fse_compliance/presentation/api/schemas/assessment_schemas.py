"""Pydantic schemas for assessment API requests and responses."""

from datetime import date, datetime
from typing import Dict, List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from ....application.services.notification_dispatcher import DeliveryStatus


# Requests
class BackgroundUpdateRequest(BaseModel):
    """Partial update of background fields; omitted fields are left unchanged."""
    facility_name: Optional[str] = Field(None, max_length=200)
    address: Optional[str] = Field(None, max_length=500)
    owner_name: Optional[str] = Field(None, max_length=200)
    phone_number: Optional[str] = Field(None, max_length=40)
    email: Optional[str] = Field(None, max_length=254)
    inspector_name: Optional[str] = Field(None, max_length=200)
    inspection_date: Optional[date] = None
    facility_type: Optional[str] = Field(None, max_length=100)


class ItemAnswerRequest(BaseModel):
    """Answer for one checklist item: true/false for documentation, a rating label otherwise."""
    value: Union[StrictBool, str, None] = Field(..., description="Checked state or lowercase rating label")


class SignatureRequest(BaseModel):
    """Committed drawing from the signature pad."""
    image: str = Field(..., min_length=1, description="Image data URL")


class GoToStepRequest(BaseModel):
    """Request to jump to a workflow step."""
    step: str = Field(..., min_length=1)


class CoordinatesRequest(BaseModel):
    """A point chosen on the map or reported by the device."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class AddressSearchRequest(BaseModel):
    """Free-text address lookup."""
    query: str = Field(..., min_length=1, max_length=500)


# Responses
class CatalogItemResponse(BaseModel):
    """Checklist item in the catalog."""
    key: str
    label: str


class CatalogSectionResponse(BaseModel):
    """Checklist section in the catalog."""
    key: str
    label: str
    kind: str
    per_item_max: int
    max_score: int
    items: List[CatalogItemResponse]


class CatalogResponse(BaseModel):
    """Static checklist definition used to render the forms."""
    steps: List[str]
    sections: List[CatalogSectionResponse]
    ratings: List[str]
    total_max_score: int


class CoordinatesResponse(BaseModel):
    """Latitude and longitude."""
    model_config = ConfigDict(from_attributes=True)

    latitude: float
    longitude: float


class BackgroundResponse(BaseModel):
    """Background information."""
    model_config = ConfigDict(from_attributes=True)

    facility_name: str
    address: str
    owner_name: str
    phone_number: str
    email: str
    inspector_name: str
    inspection_date: Optional[date]
    facility_type: str
    coordinates: Optional[CoordinatesResponse]


class SectionAnswersResponse(BaseModel):
    """Answers recorded for one section."""
    section: str
    label: str
    answers: Dict[str, Union[bool, str]]
    answered_count: int
    item_count: int


class SignatureStatusResponse(BaseModel):
    """Which parties have signed."""
    inspector_signed: bool
    facility_owner_signed: bool


class NotificationResponse(BaseModel):
    """Outcome of the latest summary dispatch."""
    model_config = ConfigDict(from_attributes=True)

    status: DeliveryStatus
    contact_address: str
    message: str
    detail: str
    recorded_at: Optional[datetime]
    is_warning: bool


class ResultResponse(BaseModel):
    """Score and tier of a completed assessment."""
    total_score: int
    max_score: int
    stars: int
    tier: str
    section_scores: Dict[str, int]
    completed_at: datetime


class SessionResponse(BaseModel):
    """Current state of an assessment session."""
    id: UUID
    assessment_id: UUID
    state: str
    current_step: str
    section_index: int
    steps: List[str]
    ready_to_finalize: bool
    background: BackgroundResponse
    sections: List[SectionAnswersResponse]
    signatures: SignatureStatusResponse
    result: Optional[ResultResponse]
    notification: Optional[NotificationResponse]
    updated_at: datetime


class SessionListResponse(BaseModel):
    """Live sessions."""
    sessions: List[SessionResponse]
    total: int


class ItemAnswerResponse(BaseModel):
    """Normalized answer after an update."""
    section: str
    item: str
    value: Union[bool, str]


class LocationResponse(BaseModel):
    """Location applied to the assessment."""
    latitude: float
    longitude: float
    address: str


class BreakdownRowResponse(BaseModel):
    """One row of the report breakdown."""
    model_config = ConfigDict(from_attributes=True)

    section: str
    label: str
    earned: int
    max_score: int


class FacilityBlockResponse(BaseModel):
    """Facility block of the report."""
    model_config = ConfigDict(from_attributes=True)

    facility_name: str
    owner_name: str
    phone_number: str
    email: str
    address: str
    facility_type: str
    inspector_name: str
    inspection_date: Optional[date]


class LocationBlockResponse(BaseModel):
    """Location block of the report."""
    model_config = ConfigDict(from_attributes=True)

    latitude: float
    longitude: float
    label: str


class SignatureBlockResponse(BaseModel):
    """Signature handles for display."""
    model_config = ConfigDict(from_attributes=True)

    inspector: str
    facility_owner: str


class ReportResponse(BaseModel):
    """Printable report of a completed assessment."""
    model_config = ConfigDict(from_attributes=True)

    assessment_id: UUID
    total_score: int
    max_score: int
    stars: int
    tier: str
    is_compliant: bool
    breakdown: List[BreakdownRowResponse]
    facility: FacilityBlockResponse
    location: Optional[LocationBlockResponse]
    signatures: SignatureBlockResponse
    completed_at: datetime
