"""Background information value object (unscored facility metadata)."""

from dataclasses import dataclass, field, fields
from datetime import date
from typing import Optional

from .coordinates import Coordinates


@dataclass(frozen=True)
class BackgroundInfo:
    """Immutable snapshot of the unscored part of an assessment."""

    facility_name: str = ""
    address: str = ""
    owner_name: str = ""
    phone_number: str = ""
    email: str = ""
    inspector_name: str = ""
    inspection_date: Optional[date] = None
    facility_type: str = ""
    coordinates: Coordinates = field(default_factory=Coordinates.unset)

    @classmethod
    def field_names(cls) -> list[str]:
        """Get the names of editable fields."""
        return [f.name for f in fields(cls)]

    @property
    def contact_address(self) -> str:
        """Get the address summaries are delivered to: phone first, then email."""
        return self.phone_number or self.email

    @property
    def has_location(self) -> bool:
        """Check if a location was recorded."""
        return self.coordinates.is_set
