"""Unit tests for service wiring."""

import pytest

from fse_compliance.infrastructure.collaborators.notifiers import LoggingNotifier, WebhookNotifier
from fse_compliance.infrastructure.services import ServiceFactory
from fse_compliance.presentation.api.config import Settings


class TestSettings:
    """Test cases for Settings validation."""

    def test_defaults(self):
        """Test default settings."""
        settings = Settings()
        assert settings.api_prefix == "/api/v1"
        assert settings.notifier_backend == "log"
        assert settings.device_latitude is None

    def test_webhook_requires_url(self):
        """Test that the webhook backend needs a URL."""
        with pytest.raises(ValueError):
            Settings(notifier_backend="webhook")

    def test_cors_origins_from_string(self):
        """Test comma-separated CORS origins."""
        settings = Settings(allowed_origins="http://a.test, http://b.test")
        assert settings.allowed_origins == ["http://a.test", "http://b.test"]


class TestServiceFactory:
    """Test cases for ServiceFactory."""

    def test_service_is_cached(self):
        """Test that the same service is returned on repeated calls."""
        factory = ServiceFactory(Settings())
        assert factory.get_assessment_service() is factory.get_assessment_service()

    def test_logging_notifier_by_default(self):
        """Test the default notifier backend."""
        factory = ServiceFactory(Settings())
        assert isinstance(factory._create_notifier(), LoggingNotifier)

    def test_webhook_notifier(self):
        """Test the webhook notifier backend."""
        factory = ServiceFactory(Settings(notifier_backend="webhook", notifier_webhook_url="https://sms.example.test"))
        assert isinstance(factory._create_notifier(), WebhookNotifier)

    @pytest.mark.asyncio
    async def test_sessions_survive_client_lifecycle(self):
        """Test that live sessions outlast an HTTP client restart."""
        factory = ServiceFactory(Settings())
        session = await factory.get_assessment_service().start_session()

        await factory.initialize()
        rebuilt = factory.get_assessment_service()
        assert await rebuilt.get_session(session.id) is session

        await factory.shutdown()
