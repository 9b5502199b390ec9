"""
Tests for the Calendar API client: rate gate, retry, error mapping, requests.
"""

import asyncio
import json
import time

import httpx
import pytest

from gcal_mcp.api.client import (
    ConfigurationError,
    GoogleCalendarClient,
    RateLimitError,
    RequestError,
    encode_segment,
    parse_retry_after,
)


class TestConstruction:
    """Client construction and token handling."""

    @pytest.mark.parametrize("token", ["", None])
    def test_missing_token_fails_immediately(self, mock_api, token):
        api = mock_api()
        with pytest.raises(ConfigurationError, match="GOOGLE_ACCESS_TOKEN is required"):
            GoogleCalendarClient(token, transport=httpx.MockTransport(api))
        assert api.requests == []

    @pytest.mark.asyncio
    async def test_headers(self, mock_api, make_client):
        api = mock_api(httpx.Response(200, json={"id": "primary"}))
        client = make_client(api)

        await client.get_calendar("primary")

        assert api.last.headers["Authorization"] == "Bearer test-token"
        assert api.last.headers["Content-Type"] == "application/json"


class TestRequests:
    """Request building per operation."""

    @pytest.mark.asyncio
    async def test_get_calendar_returns_body_unchanged(self, mock_api, make_client):
        api = mock_api(httpx.Response(200, json={"id": "primary", "summary": "Work"}))
        client = make_client(api)

        result = await client.get_calendar("primary")

        assert result == {"id": "primary", "summary": "Work"}
        assert api.last.method == "GET"
        assert str(api.last.url) == "https://www.googleapis.com/calendar/v3/calendars/primary"

    @pytest.mark.asyncio
    async def test_list_events_sends_only_given_params(self, mock_api, make_client):
        api = mock_api(httpx.Response(200, json={"items": []}))
        client = make_client(api)

        await client.list_events("primary", time_min="2024-01-01T00:00:00Z")

        assert list(api.last.url.params.multi_items()) == [
            ("timeMin", "2024-01-01T00:00:00Z")
        ]

    @pytest.mark.asyncio
    async def test_list_events_param_order_and_rendering(self, mock_api, make_client):
        api = mock_api(httpx.Response(200, json={"items": []}))
        client = make_client(api)

        await client.list_events(
            "primary",
            time_min="2024-01-01T00:00:00Z",
            time_max="2024-02-01T00:00:00Z",
            q="standup",
            max_results=10,
            page_token="tok",
            single_events=False,
            order_by="updated",
        )

        assert list(api.last.url.params.multi_items()) == [
            ("timeMin", "2024-01-01T00:00:00Z"),
            ("timeMax", "2024-02-01T00:00:00Z"),
            ("q", "standup"),
            ("maxResults", "10"),
            ("pageToken", "tok"),
            ("singleEvents", "false"),
            ("orderBy", "updated"),
        ]

    @pytest.mark.asyncio
    async def test_list_calendars_page_token(self, mock_api, make_client):
        api = mock_api(httpx.Response(200, json={"items": []}))
        client = make_client(api)

        await client.list_calendars()
        assert api.last.url.path == "/calendar/v3/users/me/calendarList"
        assert not api.last.url.params

        await client.list_calendars(page_token="next")
        assert api.last.url.params["pageToken"] == "next"

    @pytest.mark.asyncio
    async def test_ids_are_encoded_as_path_segments(self, mock_api, make_client):
        api = mock_api(httpx.Response(200, json={}))
        client = make_client(api)

        await client.get_event("team@group.calendar.google.com", "abc/def")

        assert api.last.url.raw_path == (
            b"/calendar/v3/calendars/team%40group.calendar.google.com/events/abc%2Fdef"
        )

    def test_encode_segment(self):
        assert encode_segment("primary") == "primary"
        assert encode_segment("a b#c?d") == "a%20b%23c%3Fd"
        assert encode_segment("it's(1)!*") == "it's(1)!*"

    @pytest.mark.asyncio
    async def test_create_event_round_trip(self, make_client):
        event = {
            "summary": "Planning",
            "location": "Room 4",
            "start": {"dateTime": "2024-01-01T10:00:00+09:00", "timeZone": "Asia/Tokyo"},
            "end": {"dateTime": "2024-01-01T11:00:00+09:00", "timeZone": "Asia/Tokyo"},
            "attendees": [{"email": "a@example.com", "optional": True}],
            "reminders": {"useDefault": False, "overrides": [{"method": "popup", "minutes": 10}]},
        }

        def echo(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            return httpx.Response(200, json={**body, "id": "evt1", "etag": '"1"'})

        client = make_client(echo)
        created = await client.create_event("primary", event)

        for key, value in event.items():
            assert created[key] == value
        assert created["id"] == "evt1"

    @pytest.mark.asyncio
    async def test_update_event_uses_put(self, mock_api, make_client):
        api = mock_api(httpx.Response(200, json={"id": "abc", "summary": "New"}))
        client = make_client(api)

        await client.update_event("primary", "abc", {"summary": "New"})

        assert api.last.method == "PUT"
        assert api.last.url.path == "/calendar/v3/calendars/primary/events/abc"
        assert api.last_json() == {"summary": "New"}

    @pytest.mark.asyncio
    async def test_delete_event_no_content(self, mock_api, make_client):
        api = mock_api(httpx.Response(204))
        client = make_client(api)

        result = await client.delete_event("primary", "abc")

        assert result is None
        assert api.last.method == "DELETE"
        assert api.last.url.path == "/calendar/v3/calendars/primary/events/abc"

    @pytest.mark.asyncio
    async def test_no_content_is_never_parsed(self, mock_api, make_client):
        api = mock_api(httpx.Response(204, content=b"not json"))
        client = make_client(api)

        assert await client.request("DELETE", "/calendars/primary/events/x") == {}

    @pytest.mark.asyncio
    async def test_quick_add_sends_text_as_query(self, mock_api, make_client):
        api = mock_api(httpx.Response(200, json={"id": "q1", "summary": "Lunch"}))
        client = make_client(api)

        await client.quick_add_event("primary", "Lunch with John tomorrow at 12pm")

        assert api.last.method == "POST"
        assert api.last.url.path == "/calendar/v3/calendars/primary/events/quickAdd"
        assert api.last.url.params["text"] == "Lunch with John tomorrow at 12pm"
        assert api.last.content == b""

    @pytest.mark.asyncio
    async def test_free_busy_posts_query(self, mock_api, make_client):
        response = {
            "kind": "calendar#freeBusy",
            "calendars": {"primary": {"busy": [{"start": "a", "end": "b"}]}},
        }
        api = mock_api(httpx.Response(200, json=response))
        client = make_client(api)
        query = {
            "timeMin": "2024-01-01T00:00:00Z",
            "timeMax": "2024-01-02T00:00:00Z",
            "items": [{"id": "primary"}],
        }

        result = await client.get_free_busy(query)

        assert result == response
        assert api.last.url.path == "/calendar/v3/freeBusy"
        assert api.last_json() == query

    @pytest.mark.asyncio
    async def test_list_colors(self, mock_api, make_client):
        api = mock_api(httpx.Response(200, json={"event": {"1": {"background": "#a4bdfc"}}}))
        client = make_client(api)

        result = await client.list_colors()

        assert result["event"]["1"]["background"] == "#a4bdfc"
        assert api.last.url.path == "/calendar/v3/colors"


class TestErrors:
    """Non-success statuses and transport failures."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 403, 404, 500])
    async def test_status_and_body_verbatim(self, mock_api, make_client, status):
        api = mock_api(httpx.Response(status, text='{"error": {"message": "nope"}}'))
        client = make_client(api)

        with pytest.raises(RequestError) as exc_info:
            await client.get_event("primary", "missing")

        assert exc_info.value.status_code == status
        assert exc_info.value.body == '{"error": {"message": "nope"}}'
        assert str(exc_info.value) == (
            f'Google Calendar API error ({status}): {{"error": {{"message": "nope"}}}}'
        )
        assert len(api.requests) == 1

    @pytest.mark.asyncio
    async def test_transport_error_propagates_without_retry(self, make_client):
        calls = []

        def broken(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectError("connection reset", request=request)

        client = make_client(broken)

        with pytest.raises(httpx.ConnectError):
            await client.list_colors()
        assert len(calls) == 1


class TestThrottleRetry:
    """Single retry on 429."""

    @pytest.mark.asyncio
    async def test_retry_after_header(self, mock_api, make_client, clock):
        api = mock_api(
            httpx.Response(429, headers={"Retry-After": "2"}, text="slow down"),
            httpx.Response(200, json={"id": "primary"}),
        )
        client = make_client(api)

        result = await client.get_calendar("primary")

        assert result == {"id": "primary"}
        assert len(api.requests) == 2
        assert clock.sleeps == [2.0]

    @pytest.mark.asyncio
    async def test_fallback_delay(self, mock_api, make_client, clock):
        api = mock_api(
            httpx.Response(429, text="slow down"),
            httpx.Response(200, json={}),
        )
        client = make_client(api)

        await client.list_colors()

        assert clock.sleeps == [1.0]

    @pytest.mark.asyncio
    async def test_non_finite_retry_after_uses_fallback(self, mock_api, make_client, clock):
        api = mock_api(
            httpx.Response(429, headers={"Retry-After": "inf"}),
            httpx.Response(200, json={}),
        )
        client = make_client(api)

        await asyncio.wait_for(client.list_colors(), timeout=5)

        assert len(api.requests) == 2
        assert clock.sleeps == [1.0]

    @pytest.mark.asyncio
    async def test_retry_is_identical_request(self, mock_api, make_client):
        api = mock_api(
            httpx.Response(429),
            httpx.Response(200, json={"id": "x"}),
        )
        client = make_client(api)

        await client.create_event("primary", {"summary": "Sync"})

        first, second = api.requests
        assert first.method == second.method == "POST"
        assert first.url == second.url
        assert first.content == second.content
        assert json.loads(second.content) == {"summary": "Sync"}

    @pytest.mark.asyncio
    async def test_second_throttle_is_a_failure(self, mock_api, make_client, clock):
        api = mock_api(
            httpx.Response(429, text="quota"),
            httpx.Response(429, text="still quota"),
            httpx.Response(200, json={}),
        )
        client = make_client(api)

        with pytest.raises(RateLimitError) as exc_info:
            await client.list_colors()

        assert exc_info.value.status_code == 429
        assert exc_info.value.body == "still quota"
        assert len(api.requests) == 2
        assert clock.sleeps == [1.0]

    @pytest.mark.asyncio
    async def test_retry_failure_is_request_error(self, mock_api, make_client):
        api = mock_api(
            httpx.Response(429),
            httpx.Response(503, text="unavailable"),
        )
        client = make_client(api)

        with pytest.raises(RequestError) as exc_info:
            await client.list_colors()

        assert not isinstance(exc_info.value, RateLimitError)
        assert exc_info.value.status_code == 503

    def test_parse_retry_after(self):
        assert parse_retry_after("2", 1.0) == 2.0
        assert parse_retry_after("0.5", 1.0) == 0.5
        assert parse_retry_after(None, 1.0) == 1.0
        assert parse_retry_after("soon", 1.0) == 1.0
        assert parse_retry_after("inf", 1.0) == 1.0
        assert parse_retry_after("nan", 1.0) == 1.0
        assert parse_retry_after("-inf", 1.0) == 1.0
        assert parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT", 1.0) == 0.0


class TestRateLimit:
    """Minimum spacing between requests."""

    @pytest.mark.asyncio
    async def test_sequential_requests_are_spaced(self, mock_api, make_client, clock):
        api = mock_api(httpx.Response(200, json={}))
        client = make_client(api)

        await client.list_colors()
        await client.list_colors()

        assert clock.sleeps == [pytest.approx(0.1)]

    @pytest.mark.asyncio
    async def test_no_wait_after_interval_elapsed(self, mock_api, make_client, clock):
        api = mock_api(httpx.Response(200, json={}))
        client = make_client(api)

        await client.list_colors()
        clock.now += 5
        await client.list_colors()

        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_retry_passes_rate_gate(self, mock_api, make_client, clock):
        api = mock_api(
            httpx.Response(429, headers={"Retry-After": "0"}),
            httpx.Response(200, json={}),
        )
        client = make_client(api)

        await client.list_colors()

        assert clock.sleeps == [0.0, pytest.approx(0.1)]

    @pytest.mark.asyncio
    async def test_concurrent_requests_are_spaced(self):
        sent = []

        def handler(request: httpx.Request) -> httpx.Response:
            sent.append(time.monotonic())
            return httpx.Response(200, json={})

        client = GoogleCalendarClient("test-token", transport=httpx.MockTransport(handler))

        await asyncio.gather(*(client.list_colors() for _ in range(5)))
        await client.aclose()

        sent.sort()
        gaps = [b - a for a, b in zip(sent, sent[1:])]
        assert len(sent) == 5
        assert all(gap >= 0.09 for gap in gaps)

    @pytest.mark.asyncio
    async def test_clients_do_not_share_rate_budget(self, mock_api, clock):
        api = mock_api(httpx.Response(200, json={}))
        first = GoogleCalendarClient(
            "a", transport=httpx.MockTransport(api), clock=clock, sleep=clock.sleep
        )
        second = GoogleCalendarClient(
            "b", transport=httpx.MockTransport(api), clock=clock, sleep=clock.sleep
        )

        await first.list_colors()
        await second.list_colors()

        assert clock.sleeps == []
