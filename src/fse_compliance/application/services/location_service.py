"""Facility location lookups over the geocoding and device-location ports."""

import logging

from fse_compliance.application.ports.collaborators import GeocodeResult, Geocoder, LocationProvider
from fse_compliance.domain.entities.assessment import Assessment
from fse_compliance.domain.exceptions import (
    AssessmentValidationError,
    GeocodingError,
    LocationUnavailableError
)
from fse_compliance.domain.value_objects.coordinates import Coordinates
from fse_compliance.infrastructure.logging import (
    get_logger,
    log_collaborator_failure,
    log_with_extra
)


class LocationService:
    """Updates an assessment's coordinates and address from lookups."""

    def __init__(self, geocoder: Geocoder, location_provider: LocationProvider):
        """Initialize location service with collaborator ports."""
        self._geocoder = geocoder
        self._location_provider = location_provider
        self._logger = get_logger(__name__)

    async def search_address(self, assessment: Assessment, query: str) -> GeocodeResult:
        """Look up a free-text address and apply it.

        Args:
            assessment: Assessment to update
            query: Address typed by the user

        Returns:
            The lookup result that was applied

        Raises:
            AssessmentValidationError: If the query is blank
            GeocodingError: If the address cannot be found (assessment unchanged)
        """
        if not query or not query.strip():
            raise AssessmentValidationError("Address search query cannot be empty")

        try:
            result = await self._geocoder.lookup_address(query.strip())
        except GeocodingError as exc:
            log_collaborator_failure(self._logger, "geocoder", "lookup_address", exc, query=query)
            raise

        assessment.set_location(result.coordinates, result.formatted_address)
        self._log_applied(assessment, result.coordinates, result.formatted_address, "search")
        return result

    async def select_point(self, assessment: Assessment, coordinates: Coordinates) -> str:
        """Apply a chosen point, resolving its address when possible.

        A failed reverse lookup falls back to a plain coordinate label.

        Returns:
            The address that was applied
        """
        address = await self._reverse_or_label(coordinates)
        assessment.set_location(coordinates, address)
        self._log_applied(assessment, coordinates, address, "select")
        return address

    async def use_current_location(self, assessment: Assessment) -> Coordinates:
        """Apply the current device location.

        Raises:
            LocationUnavailableError: If the device location cannot be determined
        """
        try:
            coordinates = await self._location_provider.current_device_location()
        except LocationUnavailableError as exc:
            log_collaborator_failure(self._logger, "location_provider", "current_device_location", exc)
            raise

        await self.select_point(assessment, coordinates)
        return coordinates

    async def _reverse_or_label(self, coordinates: Coordinates) -> str:
        try:
            result = await self._geocoder.reverse_lookup(coordinates)
        except GeocodingError as exc:
            log_collaborator_failure(
                self._logger,
                "geocoder",
                "reverse_lookup",
                exc,
                latitude=coordinates.latitude,
                longitude=coordinates.longitude
            )
            return coordinates.format_label()
        return result.formatted_address or coordinates.format_label()

    def _log_applied(self, assessment: Assessment, coordinates: Coordinates, address: str, source: str) -> None:
        log_with_extra(
            self._logger,
            logging.INFO,
            f"Location updated for assessment {assessment.id}",
            assessment_id=str(assessment.id),
            latitude=coordinates.latitude,
            longitude=coordinates.longitude,
            address=address,
            location_source=source
        )
