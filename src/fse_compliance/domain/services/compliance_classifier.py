"""Total score to compliance tier classification."""

from ..value_objects.checklist_section import TOTAL_MAX_SCORE
from ..value_objects.compliance_rating import ComplianceRating, ComplianceTier

# Inclusive lower bounds, highest first.
TIER_THRESHOLDS = (
    (90, 5, ComplianceTier.EXCELLENT),
    (80, 4, ComplianceTier.GOOD),
    (70, 3, ComplianceTier.SATISFACTORY),
    (60, 2, ComplianceTier.NEEDS_IMPROVEMENT),
)


class ComplianceClassifier:
    """Classifies a total score into stars and a compliance tier."""

    @staticmethod
    def classify(total_score: int) -> ComplianceRating:
        """Classify a total score in [0, 100]."""
        if isinstance(total_score, bool) or not isinstance(total_score, int):
            raise ValueError("Total score must be an integer")
        if not (0 <= total_score <= TOTAL_MAX_SCORE):
            raise ValueError(f"Total score must be between 0 and {TOTAL_MAX_SCORE}")

        for threshold, stars, tier in TIER_THRESHOLDS:
            if total_score >= threshold:
                return ComplianceRating(stars=stars, tier=tier)
        return ComplianceRating(stars=1, tier=ComplianceTier.POOR)
