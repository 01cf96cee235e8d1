"""Dependency injection and service factory."""

from typing import Optional, TYPE_CHECKING

import httpx

from fse_compliance.application.ports.collaborators import Notifier
from fse_compliance.application.services.assessment_service import AssessmentService
from fse_compliance.application.services.location_service import LocationService
from fse_compliance.infrastructure.collaborators.location_provider import FixedLocationProvider
from fse_compliance.infrastructure.collaborators.nominatim_geocoder import NominatimGeocoder
from fse_compliance.infrastructure.collaborators.notifiers import LoggingNotifier, WebhookNotifier
from fse_compliance.infrastructure.collaborators.signature_capture import DataUrlSignatureCapture
from fse_compliance.infrastructure.repositories.memory_repositories import InMemoryAssessmentSessionRepository

if TYPE_CHECKING:
    from fse_compliance.presentation.api.config import Settings


class ServiceFactory:
    """Factory for creating application services with proper dependencies."""

    def __init__(self, settings: "Settings"):
        self._settings = settings
        self._http_client: Optional[httpx.AsyncClient] = None
        # Sessions live for the lifetime of the process
        self._session_repository = InMemoryAssessmentSessionRepository()
        self._assessment_service: Optional[AssessmentService] = None

    async def initialize(self):
        """Open the shared HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient()
            # Rebuild so collaborators pick up the shared client
            self._assessment_service = None

    async def shutdown(self):
        """Close the shared HTTP client."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            self._assessment_service = None

    def get_assessment_service(self) -> AssessmentService:
        """Get the assessment service, building it on first use."""
        if self._assessment_service is None:
            self._assessment_service = AssessmentService(
                session_repository=self._session_repository,
                notifier=self._create_notifier(),
                location_service=self._create_location_service(),
                signature_capture=DataUrlSignatureCapture()
            )
        return self._assessment_service

    def _create_notifier(self) -> Notifier:
        if self._settings.notifier_backend == "webhook":
            return WebhookNotifier(
                webhook_url=self._settings.notifier_webhook_url,
                timeout_seconds=self._settings.notifier_timeout_seconds,
                client=self._http_client
            )
        return LoggingNotifier()

    def _create_location_service(self) -> LocationService:
        geocoder = NominatimGeocoder(
            base_url=self._settings.geocoder_base_url,
            user_agent=self._settings.geocoder_user_agent,
            timeout_seconds=self._settings.geocoder_timeout_seconds,
            client=self._http_client
        )
        location_provider = FixedLocationProvider(
            latitude=self._settings.device_latitude,
            longitude=self._settings.device_longitude
        )
        return LocationService(geocoder=geocoder, location_provider=location_provider)


# Global service factory instance
_service_factory: ServiceFactory | None = None


def get_service_factory() -> ServiceFactory:
    """Get the global service factory instance."""
    global _service_factory

    if _service_factory is None:
        from fse_compliance.presentation.api.config import get_settings
        _service_factory = ServiceFactory(get_settings())

    return _service_factory


def get_assessment_service() -> AssessmentService:
    """Get the application's assessment service."""
    return get_service_factory().get_assessment_service()


async def initialize_services():
    """Initialize application services."""
    factory = get_service_factory()
    await factory.initialize()


async def shutdown_services():
    """Shutdown application services."""
    factory = get_service_factory()
    await factory.shutdown()
