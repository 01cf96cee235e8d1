"""Read-only report projection of a completed assessment."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple
from uuid import UUID

from fse_compliance.domain.value_objects.assessment_result import AssessmentResult


@dataclass(frozen=True)
class BreakdownRow:
    """One line of the score breakdown table."""
    section: str
    label: str
    earned: int
    max_score: int


@dataclass(frozen=True)
class FacilityBlock:
    """Facility metadata shown on the report."""
    facility_name: str
    owner_name: str
    phone_number: str
    email: str
    address: str
    facility_type: str
    inspector_name: str
    inspection_date: Optional[date]


@dataclass(frozen=True)
class LocationBlock:
    """Facility location shown on the report."""
    latitude: float
    longitude: float
    label: str


@dataclass(frozen=True)
class SignatureBlock:
    """Signature handles for display."""
    inspector: str
    facility_owner: str


@dataclass(frozen=True)
class AssessmentReport:
    """Displayable breakdown of a completed assessment."""
    assessment_id: UUID
    total_score: int
    max_score: int
    stars: int
    tier: str
    is_compliant: bool
    breakdown: Tuple[BreakdownRow, ...]
    facility: FacilityBlock
    location: Optional[LocationBlock]
    signatures: SignatureBlock
    completed_at: datetime


class ReportView:
    """Projects an AssessmentResult into an AssessmentReport."""

    @staticmethod
    def project(result: AssessmentResult) -> AssessmentReport:
        """Build the report. The location block is omitted when no location was set."""
        background = result.background

        location = None
        if background.has_location:
            location = LocationBlock(
                latitude=background.coordinates.latitude,
                longitude=background.coordinates.longitude,
                label=background.coordinates.format_label()
            )

        return AssessmentReport(
            assessment_id=result.assessment_id,
            total_score=result.total_score,
            max_score=result.max_score,
            stars=result.stars,
            tier=result.tier.value,
            is_compliant=result.is_compliant,
            breakdown=tuple(
                BreakdownRow(
                    section=score.section.value,
                    label=score.label,
                    earned=score.earned,
                    max_score=score.max_score
                )
                for score in result.section_scores
            ),
            facility=FacilityBlock(
                facility_name=background.facility_name,
                owner_name=background.owner_name,
                phone_number=background.phone_number,
                email=background.email,
                address=background.address,
                facility_type=background.facility_type,
                inspector_name=background.inspector_name,
                inspection_date=background.inspection_date
            ),
            location=location,
            signatures=SignatureBlock(
                inspector=result.signatures.inspector,
                facility_owner=result.signatures.facility_owner
            ),
            completed_at=result.completed_at
        )
