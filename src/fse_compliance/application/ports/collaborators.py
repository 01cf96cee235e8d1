"""Port interfaces for external collaborators (Dependency Inversion Principle)."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from fse_compliance.domain.value_objects.coordinates import Coordinates


@dataclass(frozen=True)
class GeocodeResult:
    """Successful geocoding lookup."""
    coordinates: Coordinates
    formatted_address: str


@dataclass(frozen=True)
class NotificationRequest:
    """Summary of a completed assessment to deliver to the facility contact."""

    contact_address: str
    facility_name: str
    total_score: int
    star_rating: int
    compliance_tier: str

    @property
    def is_compliant(self) -> bool:
        """Check if the score reaches the compliant threshold."""
        return self.total_score >= 70

    @property
    def message(self) -> str:
        """Get the human-readable summary text."""
        verdict = "Compliant" if self.is_compliant else "Requires Improvement"
        return (
            f"FSE Assessment Complete for {self.facility_name}. "
            f"Score: {self.total_score}/100 ({self.star_rating} stars). {verdict}."
        )


class Geocoder(ABC):
    """Port interface for forward and reverse address lookup."""

    @abstractmethod
    async def lookup_address(self, query: str) -> GeocodeResult:
        """Resolve a free-text address. Raises GeocodingError when not found."""
        raise NotImplementedError

    @abstractmethod
    async def reverse_lookup(self, coordinates: Coordinates) -> GeocodeResult:
        """Resolve coordinates to an address. Raises GeocodingError on failure."""
        raise NotImplementedError


class LocationProvider(ABC):
    """Port interface for the current device location."""

    @abstractmethod
    async def current_device_location(self) -> Coordinates:
        """Get the device location. Raises LocationUnavailableError."""
        raise NotImplementedError


class Notifier(ABC):
    """Port interface for summary message delivery."""

    @abstractmethod
    async def send_summary(self, request: NotificationRequest) -> None:
        """Deliver a summary. Raises NotificationError on failure."""
        raise NotImplementedError


class SignatureCapture(ABC):
    """Port interface for the signature drawing surface."""

    @abstractmethod
    def commit(self, raw: str) -> str:
        """Turn a committed drawing into an opaque non-empty handle."""
        raise NotImplementedError

    def clear(self) -> str:
        """Get the handle of a cleared surface."""
        return ""
