"""Geographic coordinates value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Coordinates:
    """Immutable latitude/longitude pair. (0, 0) means no location was set."""

    latitude: float = 0.0
    longitude: float = 0.0

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if isinstance(self.latitude, bool) or not isinstance(self.latitude, (int, float)):
            raise ValueError("Latitude must be a number")
        if isinstance(self.longitude, bool) or not isinstance(self.longitude, (int, float)):
            raise ValueError("Longitude must be a number")
        if not (-90.0 <= self.latitude <= 90.0):
            raise ValueError("Latitude must be between -90 and 90")
        if not (-180.0 <= self.longitude <= 180.0):
            raise ValueError("Longitude must be between -180 and 180")

    @classmethod
    def unset(cls) -> "Coordinates":
        """Get the unset sentinel."""
        return cls(0.0, 0.0)

    @property
    def is_set(self) -> bool:
        """Check if these coordinates represent a real location."""
        return not (self.latitude == 0 and self.longitude == 0)

    def format_label(self) -> str:
        """Get a plain 'lat, lng' label with six decimals."""
        return f"{self.latitude:.6f}, {self.longitude:.6f}"
