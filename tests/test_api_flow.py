from __future__ import annotations

from dataclasses import replace

from fastapi.testclient import TestClient

from inkbook.main import create_app
from inkbook.repository.data_repository import DataRepository
from inkbook.utils.config import get_settings


ADMIN_TOKEN = "secret-admin-token"


def _build_test_settings(tmp_path, filename: str, admin_token: str = ADMIN_TOKEN):
    get_settings.cache_clear()
    base = get_settings()
    return replace(
        base,
        database_path=tmp_path / filename,
        storage_backend="sqlite",
        admin_token=admin_token,
        api_prefix="/api",
    )


def _build_test_client(tmp_path, admin_token: str = ADMIN_TOKEN) -> tuple[TestClient, DataRepository]:
    settings = _build_test_settings(tmp_path, "api_flow.db", admin_token)
    repository = DataRepository(settings)
    repository.initialize_database()
    app = create_app(settings=settings, repository=repository)
    return TestClient(app), repository


def _login(client: TestClient, admin_token: str = ADMIN_TOKEN) -> dict[str, str]:
    response = client.post("/api/login", json={"adminToken": admin_token})
    assert response.status_code == 200
    access_token = response.json()["accessToken"]
    return {"Authorization": f"Bearer {access_token}"}


def _booking_payload(**overrides):
    payload = {
        "name": "Alex",
        "email": "a@x.com",
        "bodyPart": "Arm",
        "size": "4x6",
        "description": "Rose",
        "requestedDate": "2025-06-01",
    }
    payload.update(overrides)
    return payload


def test_set_availability_then_read_it_back(tmp_path):
    client, _ = _build_test_client(tmp_path)
    headers = _login(client)

    created = client.post(
        "/api/availability",
        json={"date": "2025-06-01", "timeSlot": "morning", "isAvailable": True},
        headers=headers,
    )
    assert created.status_code == 201
    assert created.json()["timeSlot"] == "morning"

    listing = client.get("/api/availability")
    assert listing.status_code == 200
    assert listing.json() == [
        {
            "id": created.json()["id"],
            "date": "2025-06-01",
            "timeSlot": "morning",
            "isAvailable": True,
        }
    ]


def test_repeated_posts_update_in_place(tmp_path):
    client, repository = _build_test_client(tmp_path)
    headers = _login(client)

    for flag in (True, False, True):
        response = client.post(
            "/api/availability",
            json={"date": "2025-06-01", "timeSlot": "evening", "isAvailable": flag},
            headers=headers,
        )
        assert response.status_code == 201

    assert len(repository.list_availability()) == 1


def test_invalid_time_slot_and_date_messages(tmp_path):
    client, repository = _build_test_client(tmp_path)
    headers = _login(client)

    bad_slot = client.post(
        "/api/availability",
        json={"date": "2025-06-01", "timeSlot": "night", "isAvailable": True},
        headers=headers,
    )
    assert bad_slot.status_code == 400
    assert bad_slot.json()["message"] == "Invalid time slot"

    bad_date = client.post(
        "/api/availability",
        json={"date": "31/06/2025", "timeSlot": "morning", "isAvailable": True},
        headers=headers,
    )
    assert bad_date.status_code == 400
    assert bad_date.json()["message"] == "Invalid date format"

    assert repository.list_availability() == []


def test_public_slot_lookup_for_a_date(tmp_path):
    client, _ = _build_test_client(tmp_path)
    headers = _login(client)
    client.put(
        "/api/availability/2025-06-01",
        json={"timeSlots": ["evening", "morning"]},
        headers=headers,
    )

    response = client.get("/api/availability/2025-06-01/slots")

    assert response.status_code == 200
    assert response.json() == {"date": "2025-06-01", "timeSlots": ["morning", "evening"]}
    assert client.get("/api/availability/not-a-date/slots").status_code == 400


def test_bulk_replace_endpoint(tmp_path):
    client, _ = _build_test_client(tmp_path)
    headers = _login(client)
    for slot, flag in (("morning", True), ("afternoon", True), ("evening", False)):
        client.post(
            "/api/availability",
            json={"date": "2025-06-01", "timeSlot": slot, "isAvailable": flag},
            headers=headers,
        )

    response = client.put(
        "/api/availability/2025-06-01",
        json={"timeSlots": ["afternoon", "evening"]},
        headers=headers,
    )

    assert response.status_code == 200
    assert {row["timeSlot"]: row["isAvailable"] for row in response.json()} == {
        "morning": False,
        "afternoon": True,
        "evening": True,
    }

    invalid = client.put(
        "/api/availability/2025-06-01",
        json={"timeSlots": ["brunch"]},
        headers=headers,
    )
    assert invalid.status_code == 400
    assert invalid.json()["message"] == "Invalid time slot"


def test_booking_request_lifecycle(tmp_path):
    client, _ = _build_test_client(tmp_path)

    created = client.post(
        "/api/booking-requests",
        json=_booking_payload(status="approved", createdAt="1999-01-01T00:00:00Z"),
    )
    assert created.status_code == 201
    body = created.json()
    assert body["status"] == "pending"
    assert not body["createdAt"].startswith("1999")

    headers = _login(client)
    listing = client.get("/api/booking-requests", headers=headers)
    assert listing.status_code == 200
    assert [row["id"] for row in listing.json()] == [body["id"]]

    approved = client.patch(
        f"/api/booking-requests/{body['id']}/status",
        json={"status": "approved"},
        headers=headers,
    )
    assert approved.status_code == 200
    assert approved.json() == {**body, "status": "approved"}

    flip = client.patch(
        f"/api/booking-requests/{body['id']}/status",
        json={"status": "rejected"},
        headers=headers,
    )
    assert flip.status_code == 409


def test_booking_validation_errors_are_400(tmp_path):
    client, repository = _build_test_client(tmp_path)

    invalid = client.post(
        "/api/booking-requests",
        json=_booking_payload(email="nope", bodyPart=""),
    )
    assert invalid.status_code == 400
    assert set(invalid.json()["fields"]) == {"email", "bodyPart"}

    wrong_type = client.post("/api/booking-requests", json=_booking_payload(name=42))
    assert wrong_type.status_code == 400

    assert repository.list_booking_requests() == []


def test_status_update_errors(tmp_path):
    client, repository = _build_test_client(tmp_path)
    headers = _login(client)
    booking_id = client.post("/api/booking-requests", json=_booking_payload()).json()["id"]

    missing = client.patch(
        "/api/booking-requests/999/status",
        json={"status": "approved"},
        headers=headers,
    )
    assert missing.status_code == 400

    unknown_status = client.patch(
        f"/api/booking-requests/{booking_id}/status",
        json={"status": "archived"},
        headers=headers,
    )
    assert unknown_status.status_code == 400

    assert repository.get_booking_request(booking_id).status.value == "pending"


def test_privileged_calls_without_admin_are_refused_and_change_nothing(tmp_path):
    client, repository = _build_test_client(tmp_path)
    booking_id = client.post("/api/booking-requests", json=_booking_payload()).json()["id"]
    bad_headers = {"Authorization": "Bearer not-a-session"}

    for headers in ({}, bad_headers):
        calls = [
            client.get("/api/booking-requests", headers=headers),
            client.patch(
                f"/api/booking-requests/{booking_id}/status",
                json={"status": "approved"},
                headers=headers,
            ),
            client.post(
                "/api/availability",
                json={"date": "2025-06-01", "timeSlot": "morning", "isAvailable": True},
                headers=headers,
            ),
            client.put(
                "/api/availability/2025-06-01",
                json={"timeSlots": ["morning"]},
                headers=headers,
            ),
            client.get("/api/inquiries", headers=headers),
        ]
        assert [response.status_code for response in calls] == [403] * 5

    assert repository.list_availability() == []
    assert repository.get_booking_request(booking_id).status.value == "pending"


def test_admin_routes_refused_when_no_admin_token_configured(tmp_path):
    client, _ = _build_test_client(tmp_path, admin_token="")

    login = client.post("/api/login", json={"adminToken": "anything"})
    assert login.status_code == 401
    assert client.get("/api/booking-requests").status_code == 403


def test_login_rejects_invalid_admin_token(tmp_path):
    client, _ = _build_test_client(tmp_path)
    response = client.post("/api/login", json={"adminToken": "wrong-token"})
    assert response.status_code == 401
    assert response.json() == {"message": "Invalid admin token"}


def test_inquiry_intake_and_review(tmp_path):
    client, _ = _build_test_client(tmp_path)

    created = client.post(
        "/api/inquiries",
        json={"name": "Sam", "email": "sam@x.com", "message": "Walk-ins?"},
    )
    assert created.status_code == 201

    invalid = client.post("/api/inquiries", json={"name": "Sam", "email": "sam@x.com"})
    assert invalid.status_code == 400
    assert invalid.json()["fields"] == ["message"]

    headers = _login(client)
    listing = client.get("/api/inquiries", headers=headers)
    assert [row["message"] for row in listing.json()] == ["Walk-ins?"]


def test_health_and_startup_lifespan(tmp_path):
    settings = _build_test_settings(tmp_path, "lifespan.db")
    app = create_app(settings=settings)

    with TestClient(app) as client:
        assert client.get("/api/health").json() == {"status": "ok"}
        assert client.get("/api/availability").json() == []


def test_storage_failure_is_reported_as_500(tmp_path):
    # A directory cannot be opened as a SQLite database.
    settings = replace(_build_test_settings(tmp_path, "unused.db"), database_path=tmp_path)
    client = TestClient(create_app(settings=settings))

    availability = client.get("/api/availability")
    booking = client.post("/api/booking-requests", json=_booking_payload())

    assert availability.status_code == 500
    assert availability.json() == {"message": "Availability storage is unavailable"}
    assert booking.status_code == 500
    assert booking.json() == {"message": "Booking storage is unavailable"}


def test_malformed_body_on_admin_route_is_refused_before_parsing_errors(tmp_path):
    client, repository = _build_test_client(tmp_path)
    malformed = {"content": "{not json", "headers": {"Content-Type": "application/json"}}

    refused = client.put("/api/availability/2025-06-01", **malformed)
    assert refused.status_code == 403
    assert refused.json() == {"message": "Forbidden"}

    admin_headers = _login(client)
    rejected = client.put(
        "/api/availability/2025-06-01",
        content="{not json",
        headers={**admin_headers, "Content-Type": "application/json"},
    )
    assert rejected.status_code == 400
    assert rejected.json()["fields"] == ["body"]
    assert repository.list_availability() == []


def test_validation_fields_omit_list_positions(tmp_path):
    client, _ = _build_test_client(tmp_path)
    headers = _login(client)

    response = client.put(
        "/api/availability/2025-06-01",
        json={"timeSlots": ["morning", 7]},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["fields"] == ["timeSlots"]
