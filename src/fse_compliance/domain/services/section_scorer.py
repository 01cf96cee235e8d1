"""Section scoring rules."""

from typing import Mapping, Optional

from ..value_objects.checklist_section import ChecklistSection, ItemKind
from ..value_objects.rating import Rating


class SectionScorer:
    """Maps one section's answers to its sub-score."""

    @staticmethod
    def score(section: ChecklistSection, answers: Mapping[str, object]) -> int:
        """Score a section.

        Items missing from ``answers`` count as unset. Keys the section does not
        define raise ``KeyError`` and values outside an item's domain raise
        ``ValueError``; both indicate a caller bug.
        """
        definition = section.definition
        for key in answers:
            if not definition.has_item(key):
                raise KeyError(f"Unknown item '{key}' for section {section.value}")

        return sum(
            SectionScorer.item_points(section, answers.get(key))
            for key in definition.item_keys
        )

    @staticmethod
    def item_points(section: ChecklistSection, value: Optional[object]) -> int:
        """Get the points a single answer contributes in a section.

        ``None`` means unanswered. Boolean sections take ``True``/``False``;
        rated sections take a ``Rating`` or its label.

        Raises:
            ValueError: If the value is outside the section's answer domain
        """
        definition = section.definition
        if definition.kind is ItemKind.BOOLEAN:
            if value is None:
                return 0
            if not isinstance(value, bool):
                raise ValueError(
                    f"Items in {section.value} expect true or false, got {value!r}"
                )
            return definition.per_item_max if value else 0
        return Rating.parse(value).points(definition.per_item_max)
