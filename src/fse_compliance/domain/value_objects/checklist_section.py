"""Checklist sections and their item catalog."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple


class ItemKind(Enum):
    """How items of a section are answered."""
    BOOLEAN = "boolean"
    ORDINAL = "ordinal"


@dataclass(frozen=True)
class ChecklistItem:
    """A single checklist question."""
    key: str
    label: str


@dataclass(frozen=True)
class SectionDefinition:
    """Static definition of a scored checklist section."""

    label: str
    kind: ItemKind
    per_item_max: int
    items: Tuple[ChecklistItem, ...]

    @property
    def max_score(self) -> int:
        """Get the maximum points for the section."""
        return self.per_item_max * len(self.items)

    @property
    def item_keys(self) -> List[str]:
        """Get item keys in display order."""
        return [item.key for item in self.items]

    def has_item(self, item_key: str) -> bool:
        """Check if the section defines an item key."""
        return any(item.key == item_key for item in self.items)


class ChecklistSection(Enum):
    """Enumeration of scored checklist sections, in workflow order."""

    DOCUMENTATION = "documentation"
    PERSONAL_HYGIENE = "personal_hygiene"
    MATERIAL_SOURCING = "material_sourcing"
    WATER_SOURCES = "water_sources"
    WASTE_DISPOSAL = "waste_disposal"
    CLEANING = "cleaning"

    @property
    def definition(self) -> SectionDefinition:
        """Get the static definition for this section."""
        return SECTION_CATALOG[self]

    @property
    def label(self) -> str:
        """Get human-readable section name."""
        return self.definition.label

    @classmethod
    def parse(cls, value: "ChecklistSection | str") -> "ChecklistSection":
        """Parse a section from its key."""
        if isinstance(value, ChecklistSection):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown checklist section '{value}'") from None


def _items(*pairs: Tuple[str, str]) -> Tuple[ChecklistItem, ...]:
    return tuple(ChecklistItem(key=key, label=label) for key, label in pairs)


SECTION_CATALOG: Dict[ChecklistSection, SectionDefinition] = {
    ChecklistSection.DOCUMENTATION: SectionDefinition(
        label="Documentation",
        kind=ItemKind.BOOLEAN,
        per_item_max=5,
        items=_items(
            ("hygiene_certificate", "Hygiene Certificate of Food Handlers"),
            ("business_permit", "Business Operating Permit"),
            ("suitability_permit", "Suitability Permit"),
            ("hygiene_permit", "Hygiene Permit"),
        ),
    ),
    ChecklistSection.PERSONAL_HYGIENE: SectionDefinition(
        label="Personal Hygiene",
        kind=ItemKind.ORDINAL,
        per_item_max=4,
        items=_items(
            ("hand_washing", "Hand Washing Practices"),
            ("protective_clothing", "Protective Clothing"),
            ("hair_covering", "Hair Covering"),
            ("jewelry_removal", "Jewelry Removal"),
            ("health_status", "Health Status Monitoring"),
        ),
    ),
    ChecklistSection.MATERIAL_SOURCING: SectionDefinition(
        label="Material Sourcing",
        kind=ItemKind.ORDINAL,
        per_item_max=5,
        items=_items(
            ("supplier_approval", "Supplier Approval Process"),
            ("ingredient_quality", "Ingredient Quality Control"),
            ("storage_conditions", "Storage Conditions"),
            ("expiry_date_check", "Expiry Date Monitoring"),
        ),
    ),
    ChecklistSection.WATER_SOURCES: SectionDefinition(
        label="Water Sources",
        kind=ItemKind.ORDINAL,
        per_item_max=5,
        items=_items(
            ("water_quality", "Water Quality Testing"),
            ("storage_conditions", "Water Storage Conditions"),
        ),
    ),
    ChecklistSection.WASTE_DISPOSAL: SectionDefinition(
        label="Waste Disposal",
        kind=ItemKind.ORDINAL,
        per_item_max=5,
        items=_items(
            ("waste_segregation", "Waste Segregation"),
            ("disposal_method", "Disposal Methods"),
            ("pest_control", "Pest Control Measures"),
            ("drainage_maintenance", "Drainage Maintenance"),
        ),
    ),
    ChecklistSection.CLEANING: SectionDefinition(
        label="Cleaning",
        kind=ItemKind.ORDINAL,
        per_item_max=5,
        items=_items(
            ("cleaning_schedule", "Cleaning Schedule Adherence"),
            ("sanitization_procedures", "Sanitization Procedures"),
        ),
    ),
}

TOTAL_MAX_SCORE = sum(definition.max_score for definition in SECTION_CATALOG.values())

if TOTAL_MAX_SCORE != 100:
    raise RuntimeError(f"Checklist section maxima must sum to 100, got {TOTAL_MAX_SCORE}")
