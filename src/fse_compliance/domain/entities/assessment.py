"""Assessment entity holding the mutable working state of an on-site audit."""

from dataclasses import replace
from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional
from uuid import UUID, uuid4

from ..exceptions import AssessmentValidationError
from ..value_objects.assessment_result import AnswerValue
from ..value_objects.background_info import BackgroundInfo
from ..value_objects.checklist_section import ChecklistSection
from ..value_objects.coordinates import Coordinates
from ..value_objects.signatures import SignatureParty, Signatures
from .section_answers import SectionAnswerSet


class AssessmentStatus(Enum):
    """Assessment status enumeration."""
    EDITING = "editing"
    FROZEN = "frozen"


class Assessment:
    """Aggregate of background info, six section answer sets and two signatures."""

    def __init__(
        self,
        assessment_id: Optional[UUID] = None,
        background: Optional[BackgroundInfo] = None,
        created_at: Optional[datetime] = None
    ):
        """Initialize an empty assessment."""
        self._id = assessment_id or uuid4()
        self._background = background or BackgroundInfo()
        self._sections: Dict[ChecklistSection, SectionAnswerSet] = {
            section: SectionAnswerSet(section) for section in ChecklistSection
        }
        self._signatures = Signatures()
        self._status = AssessmentStatus.EDITING
        self._created_at = created_at or datetime.utcnow()
        self._updated_at = self._created_at

    @property
    def id(self) -> UUID:
        """Get assessment ID."""
        return self._id

    @property
    def background(self) -> BackgroundInfo:
        """Get background information."""
        return self._background

    @property
    def signatures(self) -> Signatures:
        """Get signature handles."""
        return self._signatures

    @property
    def status(self) -> AssessmentStatus:
        """Get assessment status."""
        return self._status

    @property
    def created_at(self) -> datetime:
        """Get creation timestamp."""
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        """Get last update timestamp."""
        return self._updated_at

    def section_answers(self, section: ChecklistSection) -> SectionAnswerSet:
        """Get a copy of the answers recorded for a section."""
        current = self._sections[ChecklistSection.parse(section)]
        return SectionAnswerSet(current.section, current.answers)

    def update_background(self, field: str, value: object) -> None:
        """Update one background field."""
        self.update_background_fields({field: value})

    def update_background_fields(self, changes: Dict[str, object]) -> None:
        """Update several background fields at once.

        Every value is validated before any is applied, so a rejected change
        leaves the background untouched.
        """
        self._require_editable()
        normalized = {
            field: self._normalize_background_value(field, value)
            for field, value in changes.items()
        }
        if not normalized:
            return

        self._background = replace(self._background, **normalized)
        self._touch()

    def set_location(self, coordinates: Coordinates, address: str) -> None:
        """Set coordinates and address together, as a location lookup does."""
        self._require_editable()
        if not isinstance(coordinates, Coordinates):
            raise AssessmentValidationError("Coordinates must be a Coordinates value")
        if not isinstance(address, str):
            raise AssessmentValidationError("Address must be text")

        self._background = replace(self._background, coordinates=coordinates, address=address.strip())
        self._touch()

    def update_section_item(self, section: ChecklistSection | str, item_key: str, value: object) -> AnswerValue:
        """Record one checklist answer."""
        self._require_editable()
        try:
            parsed_section = ChecklistSection.parse(section)
        except ValueError as exc:
            raise AssessmentValidationError(str(exc)) from exc

        normalized = self._sections[parsed_section].set_item(item_key, value)
        self._touch()
        return normalized

    def set_signature(self, party: SignatureParty | str, handle: str) -> None:
        """Store a signature handle; an empty handle clears the signature."""
        self._require_editable()
        try:
            parsed_party = SignatureParty.parse(party)
        except ValueError as exc:
            raise AssessmentValidationError(str(exc)) from exc
        if not isinstance(handle, str):
            raise AssessmentValidationError("Signature handle must be a string")

        self._signatures = self._signatures.with_signature(parsed_party, handle)
        self._touch()

    def clear_signature(self, party: SignatureParty | str) -> None:
        """Remove a signature."""
        self.set_signature(party, "")

    def is_ready_to_finalize(self) -> bool:
        """Check if both signatures are present. Section completeness is not required."""
        return self._signatures.is_complete

    def freeze(self) -> None:
        """Make the assessment read-only."""
        self._require_editable()
        self._status = AssessmentStatus.FROZEN
        self._touch()

    def is_editable(self) -> bool:
        """Check if assessment can be modified."""
        return self._status == AssessmentStatus.EDITING

    def is_frozen(self) -> bool:
        """Check if assessment is frozen."""
        return self._status == AssessmentStatus.FROZEN

    def is_blank(self) -> bool:
        """Check if nothing has been recorded yet."""
        return (
            self._background == BackgroundInfo()
            and self._signatures == Signatures()
            and all(answers.answered_count == 0 for answers in self._sections.values())
        )

    def _require_editable(self) -> None:
        if self._status == AssessmentStatus.FROZEN:
            raise AssessmentValidationError("Cannot modify a completed assessment")

    def _touch(self) -> None:
        self._updated_at = datetime.utcnow()

    def _normalize_background_value(self, field: str, value: object) -> object:
        if field not in BackgroundInfo.field_names():
            raise AssessmentValidationError(f"Unknown background field '{field}'")
        if field == "coordinates":
            if not isinstance(value, Coordinates):
                raise AssessmentValidationError("Coordinates must be a Coordinates value")
            return value
        if field == "inspection_date":
            return self._parse_inspection_date(value)
        if not isinstance(value, str):
            raise AssessmentValidationError(f"Background field '{field}' must be text")
        return value.strip()

    @staticmethod
    def _parse_inspection_date(value: object) -> Optional[date]:
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                return date.fromisoformat(value.strip())
            except ValueError:
                raise AssessmentValidationError(
                    f"Inspection date '{value}' is not an ISO date (YYYY-MM-DD)"
                ) from None
        raise AssessmentValidationError("Inspection date must be a date or ISO date string")

    def __eq__(self, other: object) -> bool:
        """Check equality based on assessment ID."""
        if not isinstance(other, Assessment):
            return False
        return self._id == other._id

    def __hash__(self) -> int:
        """Hash based on assessment ID."""
        return hash(self._id)

    def __str__(self) -> str:
        """String representation."""
        return f"Assessment({self._id}, {self._status.value})"

    def __repr__(self) -> str:
        """Detailed string representation."""
        return (
            f"Assessment(id={self._id}, facility_name='{self._background.facility_name}', "
            f"status={self._status.value}, created_at={self._created_at.isoformat()})"
        )
