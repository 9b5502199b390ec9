"""
Google Calendar API client: bearer token transport.

Handles:
- Authenticated HTTP calls to Calendar API v3
- Rate limiting (10 req/s, shared by all calls on one client)
- Single retry on 429 honoring Retry-After
- Mapping non-success responses to RequestError
"""

import asyncio
import logging
import math
import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import quote

import httpx

from gcal_mcp.api.models import (
    Calendar,
    CalendarList,
    ColorsResponse,
    Event,
    EventList,
    FreeBusyRequest,
    FreeBusyResponse,
)
from gcal_mcp.settings import BASE_URL, settings


RATE_LIMIT_INTERVAL = 0.1  # seconds between requests
RETRY_FALLBACK_DELAY = 1.0  # seconds, when 429 carries no Retry-After

# Characters encodeURIComponent leaves alone besides alphanumerics and "_.-~"
_SEGMENT_SAFE = "!*'()"


logger = logging.getLogger(__name__)


# ============================================================================
# Exceptions
# ============================================================================

class CalendarAPIError(Exception):
    """Base class for Calendar API errors."""
    pass


class ConfigurationError(CalendarAPIError):
    """Client cannot be constructed, e.g. access token missing."""
    pass


class RequestError(CalendarAPIError):
    """
    Calendar API answered with a non-success status.

    Carries the status code and the raw response body, uninterpreted.
    """

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Google Calendar API error ({status_code}): {body}")


class RateLimitError(RequestError):
    """Rate limit still exceeded after the retry."""
    pass


def encode_segment(value: str) -> str:
    """Percent-encode a single path segment (calendar or event ID)."""
    return quote(value, safe=_SEGMENT_SAFE)


def parse_retry_after(value: Optional[str], fallback: float) -> float:
    """
    Convert a Retry-After header to a delay in seconds.

    Accepts delta-seconds or an HTTP date. Anything unparseable yields fallback.
    """
    if not value:
        return fallback

    value = value.strip()
    try:
        delay = float(value)
    except ValueError:
        pass
    else:
        if not math.isfinite(delay):
            logger.debug(f"Non-finite Retry-After header: {value!r}")
            return fallback
        return max(delay, 0.0)

    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        logger.debug(f"Unparseable Retry-After header: {value!r}")
        return fallback

    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    return max((retry_at - datetime.now(timezone.utc)).total_seconds(), 0.0)


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# ============================================================================
# Client
# ============================================================================

class GoogleCalendarClient:
    """
    Async Google Calendar API client authenticated with a bearer token.

    Usage:
        async with GoogleCalendarClient(token) as client:
            calendar = await client.get_calendar("primary")

    All requests made through one instance are spaced at least
    ``min_interval`` seconds apart, including concurrent calls and retries.
    """

    def __init__(
        self,
        access_token: Optional[str],
        *,
        base_url: str = BASE_URL,
        min_interval: float = RATE_LIMIT_INTERVAL,
        retry_fallback_delay: float = RETRY_FALLBACK_DELAY,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        if not access_token:
            raise ConfigurationError("GOOGLE_ACCESS_TOKEN is required")

        self._access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.min_interval = min_interval
        self.retry_fallback_delay = retry_fallback_delay
        self.timeout = timeout

        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None
        self._clock = clock
        self._sleep = sleep

        # Rate gate state, one per client
        self._rate_lock = asyncio.Lock()
        self._last_request: Optional[float] = None

    async def __aenter__(self) -> "GoogleCalendarClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._http is not None and not self._http.is_closed:
            await self._http.aclose()
        self._http = None

    def _get_http(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._http

    def _build_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._access_token}",
            "Content-Type": "application/json",
        }

    async def _rate_limit(self) -> None:
        """Wait until min_interval has passed since the previous attempt."""
        async with self._rate_lock:
            if self._last_request is not None:
                elapsed = self._clock() - self._last_request
                if elapsed < self.min_interval:
                    await self._sleep(self.min_interval - elapsed)
            self._last_request = self._clock()

    async def _send(
        self,
        method: str,
        url: str,
        query: list[tuple[str, str]],
        body: Optional[Any],
    ) -> httpx.Response:
        await self._rate_limit()
        return await self._get_http().request(
            method, url, params=query, headers=self._build_headers(), json=body
        )

    async def request(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """
        Perform an API request with rate limiting and one retry on 429.

        Args:
            method: HTTP method
            path: Resource path below the API root, segments already encoded
            body: JSON body for write operations
            params: Query parameters; None values are dropped, order is kept

        Returns:
            Parsed JSON response, or {} for 204 No Content

        Raises:
            RateLimitError: Still throttled after the retry
            RequestError: Any other non-success status
            httpx.HTTPError: Network level failure
        """
        query = [
            (key, _query_value(value))
            for key, value in (params or {}).items()
            if value is not None
        ]

        url = f"{self.base_url}{path}"

        response = await self._send(method, url, query, body)

        if response.status_code == 429:
            delay = parse_retry_after(
                response.headers.get("Retry-After"), self.retry_fallback_delay
            )
            logger.info(f"Rate limited on {method} {path}, retrying in {delay:g}s")
            await self._sleep(delay)
            response = await self._send(method, url, query, body)

        if not response.is_success:
            logger.warning(
                f"Calendar API error {response.status_code} on {method} {path}: "
                f"{response.text[:200]}"
            )
            error_cls = RateLimitError if response.status_code == 429 else RequestError
            raise error_cls(response.status_code, response.text)

        # DELETE returns 204 No Content
        if response.status_code == 204:
            return {}

        return response.json()

    # ------------------------------------------------------------------------
    # Calendars
    # ------------------------------------------------------------------------

    async def list_calendars(self, page_token: Optional[str] = None) -> CalendarList:
        """List calendars in the user's calendar list."""
        return await self.request(
            "GET", "/users/me/calendarList", params={"pageToken": page_token}
        )

    async def get_calendar(self, calendar_id: str) -> Calendar:
        """Get calendar metadata by ID."""
        return await self.request("GET", f"/calendars/{encode_segment(calendar_id)}")

    async def list_colors(self) -> ColorsResponse:
        """Get the color palette for calendars and events."""
        return await self.request("GET", "/colors")

    # ------------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------------

    async def list_events(
        self,
        calendar_id: str,
        time_min: Optional[str] = None,
        time_max: Optional[str] = None,
        q: Optional[str] = None,
        max_results: Optional[int] = None,
        page_token: Optional[str] = None,
        single_events: Optional[bool] = None,
        order_by: Optional[str] = None,
    ) -> EventList:
        """
        List events in a calendar.

        Filters left as None are not sent, so the API defaults apply.
        Returns a single page; pass nextPageToken back to continue.
        """
        params = {
            "timeMin": time_min,
            "timeMax": time_max,
            "q": q,
            "maxResults": max_results,
            "pageToken": page_token,
            "singleEvents": single_events,
            "orderBy": order_by,
        }
        return await self.request(
            "GET", f"/calendars/{encode_segment(calendar_id)}/events", params=params
        )

    async def get_event(self, calendar_id: str, event_id: str) -> Event:
        """Get event by ID."""
        return await self.request("GET", self._event_path(calendar_id, event_id))

    async def create_event(self, calendar_id: str, event: Event) -> Event:
        """Create event. Server fills in id, etag, htmlLink etc."""
        return await self.request(
            "POST", f"/calendars/{encode_segment(calendar_id)}/events", body=event
        )

    async def update_event(self, calendar_id: str, event_id: str, event: Event) -> Event:
        """
        Replace event.

        Full replacement: the caller supplies the complete event.
        """
        return await self.request("PUT", self._event_path(calendar_id, event_id), body=event)

    async def delete_event(self, calendar_id: str, event_id: str) -> None:
        """Delete event. Success is signalled only by the absence of an error."""
        await self.request("DELETE", self._event_path(calendar_id, event_id))

    async def quick_add_event(self, calendar_id: str, text: str) -> Event:
        """Create event from free-form text parsed by Google."""
        return await self.request(
            "POST",
            f"/calendars/{encode_segment(calendar_id)}/events/quickAdd",
            params={"text": text},
        )

    # ------------------------------------------------------------------------
    # Free/busy
    # ------------------------------------------------------------------------

    async def get_free_busy(self, query: FreeBusyRequest) -> FreeBusyResponse:
        """Query busy intervals for a set of calendars."""
        return await self.request("POST", "/freeBusy", body=query)

    @staticmethod
    def _event_path(calendar_id: str, event_id: str) -> str:
        return f"/calendars/{encode_segment(calendar_id)}/events/{encode_segment(event_id)}"


# ============================================================================
# Shared instance
# ============================================================================

_client: Optional[GoogleCalendarClient] = None


def get_client() -> GoogleCalendarClient:
    """
    Get the process-wide client, building it from settings on first use.

    Raises:
        ConfigurationError: If no access token is configured.
    """
    global _client

    if _client is None:
        _client = GoogleCalendarClient(
            settings.access_token,
            base_url=settings.api_base_url,
            min_interval=settings.rate_limit_interval,
            retry_fallback_delay=settings.retry_fallback_delay,
            timeout=settings.request_timeout,
        )
        logger.debug("Calendar API client created")

    return _client


def reset_client() -> None:
    """Drop the cached client so the next get_client() builds a new one."""
    global _client
    _client = None
