from __future__ import annotations

import json
from datetime import date

import pytest
import requests

from dashboard.api_client import DashboardApiError, StudioApiClient


class _FakeResponse:
    def __init__(self, status_code: int, payload=None, reason: str = "OK") -> None:
        self.status_code = status_code
        self.reason = reason
        self._payload = payload
        self.content = b"" if payload is None else json.dumps(payload).encode()

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class _FakeSession:
    def __init__(self, responses: list[_FakeResponse]) -> None:
        self._responses = list(responses)
        self.calls: list[dict] = []

    def request(self, method, url, headers=None, timeout=None, **kwargs):
        self.calls.append({"method": method, "url": url, "headers": dict(headers or {}), **kwargs})
        return self._responses.pop(0)


def test_login_attaches_bearer_to_later_calls():
    session = _FakeSession(
        [
            _FakeResponse(200, {"accessToken": "session-1", "tokenType": "bearer"}),
            _FakeResponse(200, []),
        ]
    )
    client = StudioApiClient("http://studio.local/api/", session=session)

    client.login("admin-secret")
    client.list_booking_requests()

    assert client.is_authenticated
    assert session.calls[0]["json"] == {"adminToken": "admin-secret"}
    assert session.calls[1]["url"] == "http://studio.local/api/booking-requests"
    assert session.calls[1]["headers"]["Authorization"] == "Bearer session-1"


def test_replace_availability_sends_selected_slots():
    session = _FakeSession([_FakeResponse(200, [])])
    client = StudioApiClient("http://studio.local/api", session=session)

    client.replace_availability(date(2025, 6, 1), ("afternoon", "evening"))

    call = session.calls[0]
    assert call["method"] == "PUT"
    assert call["url"] == "http://studio.local/api/availability/2025-06-01"
    assert call["json"] == {"timeSlots": ["afternoon", "evening"]}


def test_error_message_is_taken_from_response_body():
    session = _FakeSession([_FakeResponse(409, {"message": "Booking 3 is already rejected"}, "Conflict")])
    client = StudioApiClient("http://studio.local/api", session=session)

    with pytest.raises(DashboardApiError) as exc_info:
        client.update_booking_status(3, "approved")

    assert exc_info.value.status_code == 409
    assert str(exc_info.value) == "Booking 3 is already rejected"


def test_logout_clears_session_and_tolerates_empty_body():
    session = _FakeSession(
        [
            _FakeResponse(200, {"accessToken": "session-1"}),
            _FakeResponse(204),
        ]
    )
    client = StudioApiClient("http://studio.local/api", session=session)
    client.login("admin-secret")

    client.logout()

    assert not client.is_authenticated
    assert session.calls[1]["method"] == "POST"


def test_connection_failure_is_wrapped():
    class _BrokenSession:
        def request(self, *args, **kwargs):
            raise requests.exceptions.ConnectionError("refused")

    client = StudioApiClient("http://studio.local/api", session=_BrokenSession())

    with pytest.raises(DashboardApiError, match="Backend connection failed"):
        client.list_availability()
