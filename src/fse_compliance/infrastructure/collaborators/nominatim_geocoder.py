"""Geocoder backed by a Nominatim-compatible HTTP API."""

from typing import Any, Dict, Optional

import httpx

from fse_compliance.application.ports.collaborators import GeocodeResult, Geocoder
from fse_compliance.domain.exceptions import GeocodingError
from fse_compliance.domain.value_objects.coordinates import Coordinates
from fse_compliance.infrastructure.logging import get_logger

logger = get_logger(__name__)


class NominatimGeocoder(Geocoder):
    """Forward and reverse lookups against ``/search`` and ``/reverse``."""

    def __init__(
        self,
        base_url: str,
        user_agent: str,
        timeout_seconds: float = 10.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        self._base_url = base_url.rstrip("/")
        self._headers = {"User-Agent": user_agent, "Accept": "application/json"}
        self._timeout = timeout_seconds
        self._client = client

    async def lookup_address(self, query: str) -> GeocodeResult:
        """Resolve a free-text address to its best match."""
        payload = await self._get("/search", {"q": query, "format": "jsonv2", "limit": 1})
        if not isinstance(payload, list) or not payload:
            raise GeocodingError(f"No location found for '{query}'")
        return self._to_result(payload[0])

    async def reverse_lookup(self, coordinates: Coordinates) -> GeocodeResult:
        """Resolve coordinates to a formatted address."""
        payload = await self._get(
            "/reverse",
            {"lat": coordinates.latitude, "lon": coordinates.longitude, "format": "jsonv2"}
        )
        if not isinstance(payload, dict) or "error" in payload:
            raise GeocodingError(f"No address found for {coordinates.format_label()}")
        return GeocodeResult(
            coordinates=coordinates,
            formatted_address=str(payload.get("display_name", "")).strip()
        )

    async def _get(self, path: str, params: Dict[str, Any]) -> Any:
        url = f"{self._base_url}{path}"
        try:
            if self._client is not None:
                response = await self._client.get(url, params=params, headers=self._headers, timeout=self._timeout)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(url, params=params, headers=self._headers)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            raise GeocodingError(f"Geocoding service returned {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise GeocodingError(f"Geocoding service unreachable: {exc}") from exc
        except ValueError as exc:
            raise GeocodingError("Geocoding service returned invalid JSON") from exc

    @staticmethod
    def _to_result(entry: Dict[str, Any]) -> GeocodeResult:
        try:
            coordinates = Coordinates(float(entry["lat"]), float(entry["lon"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocodingError("Geocoding service returned an unusable location") from exc
        return GeocodeResult(
            coordinates=coordinates,
            formatted_address=str(entry.get("display_name", "")).strip() or coordinates.format_label()
        )
