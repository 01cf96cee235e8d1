"""Device location adapters."""

from typing import Optional

from fse_compliance.application.ports.collaborators import LocationProvider
from fse_compliance.domain.exceptions import LocationUnavailableError
from fse_compliance.domain.value_objects.coordinates import Coordinates


class FixedLocationProvider(LocationProvider):
    """Reports a configured device location, if one is configured."""

    def __init__(self, latitude: Optional[float] = None, longitude: Optional[float] = None):
        if (latitude is None) != (longitude is None):
            raise ValueError("Device latitude and longitude must be configured together")
        self._coordinates = Coordinates(latitude, longitude) if latitude is not None else None

    async def current_device_location(self) -> Coordinates:
        """Get the configured location."""
        if self._coordinates is None:
            raise LocationUnavailableError("Device location is not available")
        return self._coordinates
