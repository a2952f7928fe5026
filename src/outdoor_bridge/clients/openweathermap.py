"""OpenWeatherMap API client for current weather conditions."""

import logging
import math
from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import ValidationError

from ..config import WeatherConfig
from ..errors import ParseError, error_for_response, error_for_transport
from ..location import LocationSpecifier
from ..schemas import Observation

logger = logging.getLogger(__name__)


def _require_number(data: dict[str, Any], key: str) -> float:
    """Return a finite numeric field or raise ParseError."""
    if key not in data or data[key] is None:
        raise ParseError(f"missing field {key!r}")
    value = data[key]
    # bool is an int subclass but never a valid measurement
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParseError(f"field {key!r} is not numeric: {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise ParseError(f"field {key!r} is not finite: {value!r}")
    return value


class OpenWeatherMapClient:
    """HTTP client for the OpenWeatherMap current weather endpoint.

    Each call issues exactly one GET request and either returns a fully
    populated Observation or raises a BridgeError describing whether the
    failure is worth retrying.
    """

    def __init__(
        self,
        config: WeatherConfig | None = None,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize OpenWeatherMap client.

        Args:
            config: Weather source configuration.
            timeout: Per-request timeout in seconds.
            http_client: Optional shared HTTP client. Not closed by close().
        """
        self.config = config or WeatherConfig()
        self.timeout = timeout
        self._http_client = http_client
        self._owns_client = http_client is None

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-initialize HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(follow_redirects=True)
            self._owns_client = True
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client if this instance created it."""
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None

    @property
    def url(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/weather"

    async def fetch_current(self, location: LocationSpecifier) -> Observation:
        """Fetch the current observation for a location.

        Args:
            location: Pre-validated location to query.

        Returns:
            Parsed Observation.

        Raises:
            AuthError: API key rejected (401/403).
            RateLimitedError: HTTP 429.
            TransientError: 5xx, timeout or connection failure.
            PermanentError: Any other non-success status.
            ParseError: 200 response with a malformed body.
        """
        params = {
            **location.query_params(),
            "appid": self.config.api_key,
            "units": "metric",
        }

        try:
            response = await self.http_client.get(self.url, params=params, timeout=self.timeout)
        except httpx.HTTPError as e:
            raise error_for_transport(e) from e

        if response.status_code != 200:
            raise error_for_response(response, self._error_detail(response))

        try:
            data = response.json()
        except ValueError as e:
            raise ParseError(f"response is not valid JSON: {e}", response.status_code) from e

        observation = self._parse_current_weather(location, data)
        logger.debug(
            "Fetched weather for %s: %.2f C, %.1f %%, %.1f hPa",
            location,
            observation.temperature_celsius,
            observation.humidity_percent,
            observation.pressure_hpa,
        )
        return observation

    @staticmethod
    def _error_detail(response: httpx.Response) -> str | None:
        """Extract the provider's error message, e.g. {"cod": 401, "message": "..."}."""
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and body.get("message"):
            code = body.get("cod", response.status_code)
            return f'error code {code} with message "{body["message"]}"'
        return None

    def _parse_current_weather(self, location: LocationSpecifier, data: Any) -> Observation:
        """Parse OpenWeatherMap response into Observation.

        Args:
            location: Location this data is for.
            data: Decoded JSON body.

        Returns:
            Observation with every field populated.

        Raises:
            ParseError: If required fields are missing or non-numeric.
        """
        if not isinstance(data, dict):
            raise ParseError("response body is not a JSON object")
        main = data.get("main")
        if not isinstance(main, dict):
            raise ParseError("missing object 'main'")

        temperature = _require_number(main, "temp")
        humidity = _require_number(main, "humidity")
        pressure = _require_number(main, "pressure")
        timestamp = _require_number(data, "dt")

        try:
            observed_at = datetime.fromtimestamp(timestamp, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise ParseError(f"invalid observation timestamp {timestamp!r}") from e

        try:
            return Observation(
                temperature_celsius=temperature,
                humidity_percent=humidity,
                pressure_hpa=pressure,
                observed_at=observed_at,
                source_location=str(location),
            )
        except ValidationError as e:
            raise ParseError(f"invalid observation: {e}") from e
