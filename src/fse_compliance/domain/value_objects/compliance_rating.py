"""Compliance rating value object."""

from dataclasses import dataclass
from enum import Enum


class ComplianceTier(Enum):
    """Compliance tier labels, best first."""
    EXCELLENT = "Excellent"
    GOOD = "Good"
    SATISFACTORY = "Satisfactory"
    NEEDS_IMPROVEMENT = "Needs Improvement"
    POOR = "Poor"


@dataclass(frozen=True)
class ComplianceRating:
    """Immutable star rating and tier for a total score."""

    stars: int
    tier: ComplianceTier

    def __post_init__(self) -> None:
        """Validate star range."""
        if not (1 <= self.stars <= 5):
            raise ValueError("Stars must be between 1 and 5 inclusive")

    @property
    def label(self) -> str:
        """Get the tier label."""
        return self.tier.value
