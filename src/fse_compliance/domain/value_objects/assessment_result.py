"""Assessment result value object."""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Tuple, Union
from uuid import UUID

from .background_info import BackgroundInfo
from .checklist_section import ChecklistSection, TOTAL_MAX_SCORE
from .compliance_rating import ComplianceRating, ComplianceTier
from .rating import Rating
from .signatures import Signatures

AnswerValue = Union[bool, Rating]


@dataclass(frozen=True)
class SectionScore:
    """Immutable sub-score of one section, with the answers it was computed from."""

    section: ChecklistSection
    earned: int
    max_score: int
    answers: Tuple[Tuple[str, AnswerValue], ...] = ()

    def __post_init__(self) -> None:
        """Validate section score data."""
        if self.earned < 0:
            raise ValueError("Section score cannot be negative")
        if self.earned > self.max_score:
            raise ValueError("Section score cannot exceed section maximum")

    @property
    def label(self) -> str:
        """Get section display label."""
        return self.section.label

    def answer_for(self, item_key: str) -> Optional[AnswerValue]:
        """Get the recorded answer for an item key."""
        return dict(self.answers).get(item_key)


@dataclass(frozen=True)
class AssessmentResult:
    """Frozen outcome of a finalized assessment."""

    assessment_id: UUID
    background: BackgroundInfo
    section_scores: Tuple[SectionScore, ...]
    signatures: Signatures
    total_score: int
    rating: ComplianceRating
    completed_at: datetime

    def __post_init__(self) -> None:
        """Validate result consistency."""
        if not (0 <= self.total_score <= TOTAL_MAX_SCORE):
            raise ValueError(f"Total score must be between 0 and {TOTAL_MAX_SCORE}")
        if sum(score.earned for score in self.section_scores) != self.total_score:
            raise ValueError("Total score must equal the sum of section scores")

    @property
    def stars(self) -> int:
        """Get star rating."""
        return self.rating.stars

    @property
    def tier(self) -> ComplianceTier:
        """Get compliance tier."""
        return self.rating.tier

    @property
    def max_score(self) -> int:
        """Get maximum possible score."""
        return TOTAL_MAX_SCORE

    @property
    def is_compliant(self) -> bool:
        """Check if the facility reached the compliant threshold (70)."""
        return self.total_score >= 70

    def score_for(self, section: ChecklistSection) -> SectionScore:
        """Get the sub-score for a section."""
        for score in self.section_scores:
            if score.section == section:
                return score
        raise KeyError(section)

    def scores_by_section(self) -> Dict[ChecklistSection, int]:
        """Get earned points keyed by section."""
        return {score.section: score.earned for score in self.section_scores}
