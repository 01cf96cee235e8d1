"""Unit tests for collaborator adapters."""

import json
import logging

import httpx
import pytest

from fse_compliance.application.ports.collaborators import NotificationRequest
from fse_compliance.domain.exceptions import (
    GeocodingError,
    LocationUnavailableError,
    NotificationError
)
from fse_compliance.domain.value_objects.coordinates import Coordinates
from fse_compliance.infrastructure.collaborators.location_provider import FixedLocationProvider
from fse_compliance.infrastructure.collaborators.nominatim_geocoder import NominatimGeocoder
from fse_compliance.infrastructure.collaborators.notifiers import LoggingNotifier, WebhookNotifier
from fse_compliance.infrastructure.collaborators.signature_capture import DataUrlSignatureCapture

BASE_URL = "https://geo.example.test"
PNG_SIGNATURE = "data:image/png;base64,iVBORw0KGgo="


def mock_client(handler) -> httpx.AsyncClient:
    """Create an HTTP client answering through a handler function."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def summary_request() -> NotificationRequest:
    """Create a sample summary."""
    return NotificationRequest(
        contact_address="+2348012345678",
        facility_name="Mama Put Kitchen",
        total_score=95,
        star_rating=5,
        compliance_tier="Excellent"
    )


class TestNominatimGeocoder:
    """Test cases for NominatimGeocoder."""

    @pytest.mark.asyncio
    async def test_lookup_address(self):
        """Test a successful forward lookup."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{
                "lat": "6.5244",
                "lon": "3.3792",
                "display_name": "Lagos, Lagos State, Nigeria",
            }])

        async with mock_client(handler) as client:
            geocoder = NominatimGeocoder(BASE_URL, "fse-compliance-tests", client=client)
            result = await geocoder.lookup_address("Lagos")

        assert result.coordinates == Coordinates(6.5244, 3.3792)
        assert result.formatted_address == "Lagos, Lagos State, Nigeria"
        assert seen[0].url.path == "/search"
        assert seen[0].url.params["q"] == "Lagos"
        assert seen[0].url.params["limit"] == "1"
        assert seen[0].headers["User-Agent"] == "fse-compliance-tests"

    @pytest.mark.asyncio
    async def test_lookup_address_not_found(self):
        """Test that an empty result list is a geocoding error."""
        async with mock_client(lambda request: httpx.Response(200, json=[])) as client:
            geocoder = NominatimGeocoder(BASE_URL, "tests", client=client)
            with pytest.raises(GeocodingError, match="No location found for 'Atlantis'"):
                await geocoder.lookup_address("Atlantis")

    @pytest.mark.asyncio
    async def test_lookup_address_server_error(self):
        """Test that HTTP errors become geocoding errors."""
        async with mock_client(lambda request: httpx.Response(503)) as client:
            geocoder = NominatimGeocoder(BASE_URL, "tests", client=client)
            with pytest.raises(GeocodingError, match="returned 503"):
                await geocoder.lookup_address("Lagos")

    @pytest.mark.asyncio
    async def test_lookup_address_unreachable(self):
        """Test that transport errors become geocoding errors."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        async with mock_client(handler) as client:
            geocoder = NominatimGeocoder(BASE_URL, "tests", client=client)
            with pytest.raises(GeocodingError, match="unreachable"):
                await geocoder.lookup_address("Lagos")

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        """Test that a non-JSON body becomes a geocoding error."""
        async with mock_client(lambda request: httpx.Response(200, content=b"<html>")) as client:
            geocoder = NominatimGeocoder(BASE_URL, "tests", client=client)
            with pytest.raises(GeocodingError, match="invalid JSON"):
                await geocoder.lookup_address("Lagos")

    @pytest.mark.asyncio
    async def test_reverse_lookup(self):
        """Test a successful reverse lookup."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"display_name": "Broad Street, Lagos"})

        async with mock_client(handler) as client:
            geocoder = NominatimGeocoder(BASE_URL, "tests", client=client)
            result = await geocoder.reverse_lookup(Coordinates(6.4541, 3.3947))

        assert result.formatted_address == "Broad Street, Lagos"
        assert result.coordinates == Coordinates(6.4541, 3.3947)
        assert seen[0].url.path == "/reverse"
        assert seen[0].url.params["lat"] == "6.4541"

    @pytest.mark.asyncio
    async def test_reverse_lookup_error_payload(self):
        """Test that an error payload is a geocoding error."""
        async with mock_client(lambda request: httpx.Response(200, json={"error": "Unable to geocode"})) as client:
            geocoder = NominatimGeocoder(BASE_URL, "tests", client=client)
            with pytest.raises(GeocodingError, match="No address found for 0.000000, 10.000000"):
                await geocoder.reverse_lookup(Coordinates(0.0, 10.0))


class TestWebhookNotifier:
    """Test cases for WebhookNotifier."""

    @pytest.mark.asyncio
    async def test_send_summary(self):
        """Test the posted payload."""
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(202)

        async with mock_client(handler) as client:
            notifier = WebhookNotifier("https://sms.example.test/send", client=client)
            await notifier.send_summary(summary_request())

        assert bodies == [{
            "to": "+2348012345678",
            "message": "FSE Assessment Complete for Mama Put Kitchen. Score: 95/100 (5 stars). Compliant.",
            "facility_name": "Mama Put Kitchen",
            "total_score": 95,
            "star_rating": 5,
            "compliance_tier": "Excellent",
        }]

    @pytest.mark.asyncio
    async def test_gateway_error(self):
        """Test that a non-2xx reply is a notification error."""
        async with mock_client(lambda request: httpx.Response(500)) as client:
            notifier = WebhookNotifier("https://sms.example.test/send", client=client)
            with pytest.raises(NotificationError, match="returned 500"):
                await notifier.send_summary(summary_request())

    @pytest.mark.asyncio
    async def test_gateway_unreachable(self):
        """Test that transport errors are notification errors."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("Timed out", request=request)

        async with mock_client(handler) as client:
            notifier = WebhookNotifier("https://sms.example.test/send", client=client)
            with pytest.raises(NotificationError, match="unreachable"):
                await notifier.send_summary(summary_request())

    def test_requires_url(self):
        """Test that a webhook URL is required."""
        with pytest.raises(ValueError, match="Webhook URL is required"):
            WebhookNotifier("")


class TestLoggingNotifier:
    """Test cases for LoggingNotifier."""

    @pytest.mark.asyncio
    async def test_logs_summary(self, caplog):
        """Test that the summary text is logged."""
        with caplog.at_level(logging.INFO):
            await LoggingNotifier().send_summary(summary_request())

        assert "Score: 95/100 (5 stars). Compliant." in caplog.text
        record = caplog.records[-1]
        assert record.contact_address == "+2348012345678"


class TestFixedLocationProvider:
    """Test cases for FixedLocationProvider."""

    @pytest.mark.asyncio
    async def test_configured_location(self):
        """Test that the configured location is reported."""
        provider = FixedLocationProvider(6.5244, 3.3792)
        assert await provider.current_device_location() == Coordinates(6.5244, 3.3792)

    @pytest.mark.asyncio
    async def test_unconfigured_location(self):
        """Test that no configuration means no location."""
        with pytest.raises(LocationUnavailableError):
            await FixedLocationProvider().current_device_location()

    def test_half_configured_location(self):
        """Test that both coordinates are required together."""
        with pytest.raises(ValueError, match="configured together"):
            FixedLocationProvider(latitude=6.5)


class TestDataUrlSignatureCapture:
    """Test cases for DataUrlSignatureCapture."""

    def test_commit_returns_handle(self):
        """Test that a valid drawing is returned as its own handle."""
        assert DataUrlSignatureCapture().commit(f"  {PNG_SIGNATURE}\n") == PNG_SIGNATURE

    @pytest.mark.parametrize("raw", ["", "   "])
    def test_empty_drawing(self, raw):
        """Test that empty drawings are rejected."""
        with pytest.raises(ValueError, match="Signature drawing is empty"):
            DataUrlSignatureCapture().commit(raw)

    @pytest.mark.parametrize("raw", ["John Doe", "data:text/plain;base64,aGVsbG8=", "data:image/png,rawbytes"])
    def test_not_an_image_data_url(self, raw):
        """Test that only base64 image data URLs are accepted."""
        with pytest.raises(ValueError, match="base64 image data URL"):
            DataUrlSignatureCapture().commit(raw)

    def test_too_large(self):
        """Test the size limit."""
        with pytest.raises(ValueError, match="exceeds 4 bytes"):
            DataUrlSignatureCapture(max_bytes=4).commit(PNG_SIGNATURE)

    def test_clear(self):
        """Test that clearing yields an empty handle."""
        assert DataUrlSignatureCapture().clear() == ""
