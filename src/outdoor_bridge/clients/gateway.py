"""IoT gateway client for publishing sensor readings."""

import logging
from typing import Sequence

import httpx

from ..config import GatewayConfig
from ..errors import error_for_response, error_for_transport
from ..schemas import SensorReading

logger = logging.getLogger(__name__)


class GatewayClient:
    """HTTP client that posts a batch of readings to the gateway.

    The batch is sent as one JSON document. A failure at any point is reported
    as a single error for the whole batch.
    """

    def __init__(
        self,
        config: GatewayConfig | None = None,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize gateway client.

        Args:
            config: Gateway configuration settings.
            timeout: Per-request timeout in seconds.
            http_client: Optional shared HTTP client. Not closed by close().
        """
        self.config = config or GatewayConfig()
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

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        return headers

    async def publish(self, readings: Sequence[SensorReading]) -> None:
        """Publish readings as one batch.

        Args:
            readings: Readings to send. An empty batch is a no-op.

        Raises:
            AuthError: Token rejected (401/403).
            RateLimitedError: HTTP 429.
            TransientError: 5xx, timeout or connection failure.
            PermanentError: Any other non-2xx status.
        """
        if not readings:
            return

        payload = {"readings": [r.to_payload() for r in readings]}

        try:
            response = await self.http_client.post(
                self.config.url,
                json=payload,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise error_for_transport(e) from e

        if not response.is_success:
            raise error_for_response(response, response.text[:200] or None)

        logger.debug("Gateway accepted %d readings (HTTP %d)", len(readings), response.status_code)
