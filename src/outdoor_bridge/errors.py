"""Error taxonomy shared by the weather and gateway clients.

Every failure a client can report is a ``BridgeError`` whose ``transient``
flag tells the retry executor whether another attempt may help:

- TransientError: timeouts, connection failures, 5xx responses
- RateLimitedError: HTTP 429, optionally carrying the server's Retry-After
- PermanentError: other 4xx responses
- AuthError: HTTP 401/403
- ParseError: a 2xx response whose body does not match the expected schema

ConfigurationError is raised only at startup and is never retried.
"""

import math
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

import httpx


class BridgeError(Exception):
    """Base class for failures of a single fetch or publish attempt."""

    transient: bool = False
    kind: str = "error"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.kind} (HTTP {self.status_code}): {self.message}"
        return f"{self.kind}: {self.message}"


class TransientError(BridgeError):
    """Failure that may succeed on retry."""

    transient = True
    kind = "transient"


class RateLimitedError(TransientError):
    """HTTP 429 response."""

    kind = "rate-limited"

    def __init__(
        self,
        message: str,
        status_code: int | None = 429,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, status_code)
        self.retry_after = retry_after


class PermanentError(BridgeError):
    """Failure that will not be fixed by retrying within this cycle."""

    kind = "permanent"


class AuthError(PermanentError):
    """Credentials were rejected (HTTP 401/403)."""

    kind = "auth"


class ParseError(PermanentError):
    """Response body is missing required fields or is malformed."""

    kind = "parse"


class ConfigurationError(Exception):
    """Invalid settings detected at startup. Fatal."""


def parse_retry_after(value: str | None, now: datetime | None = None) -> float | None:
    """Parse a Retry-After header into seconds.

    Accepts both delta-seconds and HTTP-date forms. Returns None when the
    header is absent or unparseable.
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        seconds = float(value)
        if not math.isfinite(seconds):
            return None
    except ValueError:
        try:
            when = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            return None
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        now = now or datetime.now(timezone.utc)
        seconds = (when - now).total_seconds()
    return max(seconds, 0.0)


def error_for_response(response: httpx.Response, detail: str | None = None) -> BridgeError:
    """Classify a non-success HTTP response.

    Args:
        response: Response with a non-2xx status code.
        detail: Optional human-readable detail extracted from the body.

    Returns:
        The BridgeError subclass matching the status code.
    """
    status = response.status_code
    message = detail or response.reason_phrase or "unexpected response"

    if status in (401, 403):
        return AuthError(message, status)
    if status == 429:
        retry_after = parse_retry_after(response.headers.get("Retry-After"))
        return RateLimitedError(message, status, retry_after=retry_after)
    if status >= 500:
        return TransientError(message, status)
    return PermanentError(message, status)


def error_for_transport(exc: httpx.HTTPError) -> BridgeError:
    """Classify an httpx transport-level exception.

    Timeouts, connection failures and other network errors are transient.
    Anything else raised by httpx before a response exists (invalid URL,
    unsupported protocol) cannot be fixed by retrying.
    """
    if isinstance(exc, httpx.TransportError) and not isinstance(exc, httpx.UnsupportedProtocol):
        return TransientError(f"{exc.__class__.__name__}: {exc}")
    return PermanentError(f"{exc.__class__.__name__}: {exc}")
