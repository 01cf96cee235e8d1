"""Section answer set entity."""

from typing import Dict, Optional, Tuple

from ..exceptions import AssessmentValidationError
from ..value_objects.assessment_result import AnswerValue
from ..value_objects.checklist_section import ChecklistSection, ItemKind
from ..value_objects.rating import Rating


class SectionAnswerSet:
    """Answers recorded for one checklist section."""

    def __init__(
        self,
        section: ChecklistSection,
        answers: Optional[Dict[str, AnswerValue]] = None
    ):
        """Initialize with every item unanswered, then apply ``answers``."""
        if not isinstance(section, ChecklistSection):
            raise AssessmentValidationError("Section must be a ChecklistSection enum")

        self._section = section
        self._answers: Dict[str, AnswerValue] = {
            key: self._blank_value() for key in section.definition.item_keys
        }
        for key, value in (answers or {}).items():
            self.set_item(key, value)

    @property
    def section(self) -> ChecklistSection:
        """Get the section these answers belong to."""
        return self._section

    @property
    def answers(self) -> Dict[str, AnswerValue]:
        """Get answers keyed by item."""
        return self._answers.copy()

    def get_item(self, item_key: str) -> AnswerValue:
        """Get the answer for an item."""
        self._require_known_item(item_key)
        return self._answers[item_key]

    def set_item(self, item_key: str, value: object) -> AnswerValue:
        """Record an answer for an item and return the normalized value."""
        self._require_known_item(item_key)

        if self._section.definition.kind is ItemKind.BOOLEAN:
            if not isinstance(value, bool):
                raise AssessmentValidationError(
                    f"Item '{item_key}' in {self._section.value} expects true or false"
                )
            normalized: AnswerValue = value
        else:
            try:
                normalized = Rating.parse(value)
            except ValueError as exc:
                raise AssessmentValidationError(str(exc)) from exc

        self._answers[item_key] = normalized
        return normalized

    @property
    def answered_count(self) -> int:
        """Count items with an answer (checked, or rated)."""
        if self._section.definition.kind is ItemKind.BOOLEAN:
            return sum(1 for value in self._answers.values() if value is True)
        return sum(1 for value in self._answers.values() if value.is_set)

    def snapshot(self) -> Tuple[Tuple[str, AnswerValue], ...]:
        """Get an immutable copy of the answers in catalog order."""
        return tuple((key, self._answers[key]) for key in self._section.definition.item_keys)

    def _blank_value(self) -> AnswerValue:
        if self._section.definition.kind is ItemKind.BOOLEAN:
            return False
        return Rating.UNSET

    def _require_known_item(self, item_key: str) -> None:
        if not self._section.definition.has_item(item_key):
            raise AssessmentValidationError(
                f"Unknown item '{item_key}' for section {self._section.value}"
            )

    def __eq__(self, other: object) -> bool:
        """Check equality based on section and answers."""
        if not isinstance(other, SectionAnswerSet):
            return False
        return self._section == other._section and self._answers == other._answers

    def __repr__(self) -> str:
        """Detailed string representation."""
        return f"SectionAnswerSet(section={self._section.value}, answered={self.answered_count})"
