"""Ordinal rating value object."""

from enum import Enum


class Rating(Enum):
    """Ordinal rating for a checklist item."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    UNSET = "unset"

    @classmethod
    def parse(cls, value: "Rating | str | None") -> "Rating":
        """Parse a rating from its exact lowercase label; empty or None means unset."""
        if isinstance(value, Rating):
            return value
        if value is None or value == "":
            return cls.UNSET
        if not isinstance(value, str):
            raise ValueError(f"Rating must be a string label, got {type(value).__name__}")
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(r.value for r in cls)
            raise ValueError(f"Invalid rating '{value}'. Expected one of: {allowed}") from None

    def points(self, per_item_max: int) -> int:
        """Get points awarded for this rating.

        Good and fair are fixed values, not a fraction of the item maximum.
        """
        if self is Rating.EXCELLENT:
            return per_item_max
        if self is Rating.GOOD:
            return 3
        if self is Rating.FAIR:
            return 2
        return 0

    @property
    def is_set(self) -> bool:
        """Check if a rating was given."""
        return self is not Rating.UNSET
