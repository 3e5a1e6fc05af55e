"""HTTP client used by the operator dashboard to talk to the studio API."""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Optional

import requests


class DashboardApiError(Exception):
    """Raised when the API is unreachable or answers with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StudioApiClient:
    """Thin wrapper over the REST endpoints the dashboard needs."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._access_token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self._access_token is not None

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = kwargs.pop("headers", {})
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        try:
            response = self._session.request(
                method,
                f"{self._base_url}{path}",
                headers=headers,
                timeout=self._timeout,
                **kwargs,
            )
        except requests.exceptions.RequestException as exc:
            raise DashboardApiError(f"Backend connection failed: {exc}") from exc

        if response.status_code >= 400:
            try:
                message = response.json().get("message", response.reason)
            except ValueError:
                message = response.reason
            raise DashboardApiError(str(message), status_code=response.status_code)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def login(self, admin_token: str) -> None:
        payload = self._request("POST", "/login", json={"adminToken": admin_token})
        self._access_token = payload["accessToken"]

    def logout(self) -> None:
        if self._access_token is None:
            return
        self._request("POST", "/logout")
        self._access_token = None

    def list_availability(self) -> list[dict[str, Any]]:
        return self._request("GET", "/availability")

    def replace_availability(
        self,
        target_date: date | str,
        time_slots: Iterable[str],
    ) -> list[dict[str, Any]]:
        day = target_date.isoformat() if isinstance(target_date, date) else target_date
        return self._request(
            "PUT",
            f"/availability/{day}",
            json={"timeSlots": list(time_slots)},
        )

    def list_booking_requests(self) -> list[dict[str, Any]]:
        return self._request("GET", "/booking-requests")

    def update_booking_status(self, booking_id: int, status: str) -> dict[str, Any]:
        return self._request(
            "PATCH",
            f"/booking-requests/{booking_id}/status",
            json={"status": status},
        )

    def list_inquiries(self) -> list[dict[str, Any]]:
        return self._request("GET", "/inquiries")
