"""Appointment endpoints: envelopes, role gates and notifications end to end"""

import pytest

from tests.conftest import (
    ADMIN_EMAIL,
    auth_headers,
    booking_json,
    make_admin,
    make_customer,
    make_provider,
)


@pytest.fixture
def customer(db):
    return make_customer(db)


@pytest.fixture
def provider(db):
    return make_provider(db)


@pytest.fixture
def admin(db):
    return make_admin(db)


async def book(client, customer, provider, **overrides):
    response = await client.post(
        "/api/appointments", json=booking_json(provider, **overrides), headers=auth_headers(customer)
    )
    assert response.status_code == 201, response.text
    return response.json()["appointment"]


async def test_customer_books_and_admin_is_notified(client, customer, provider, sender):
    response = await client.post(
        "/api/appointments", json=booking_json(provider, estimatedHours=3), headers=auth_headers(customer)
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Appointment booked successfully. Waiting for admin approval."
    appointment = body["appointment"]
    assert appointment["status"] == "pending"
    assert appointment["price"] == 1500
    assert appointment["hourlyRate"] == 500
    assert appointment["customer"]["email"] == customer.email
    assert appointment["provider"]["id"] == provider.id

    assert sender.recipients() == [ADMIN_EMAIL]


async def test_date_outside_window_is_400_envelope(client, customer, provider, sender):
    response = await client.post(
        "/api/appointments",
        json=booking_json(provider, appointmentDate="2025-06-18"),
        headers=auth_headers(customer),
    )
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "Appointment date cannot be more than 7 days from today",
        "error": "validation_error",
    }
    assert sender.sent == []


async def test_unapproved_provider_is_precondition_failure(client, db, customer):
    pending = make_provider(db, email="pending@example.com", status="pending")
    response = await client.post(
        "/api/appointments", json=booking_json(pending), headers=auth_headers(customer)
    )
    assert response.status_code == 400
    assert response.json()["error"] == "precondition_failed"


async def test_malformed_body_is_422_with_details(client, customer, provider):
    payload = booking_json(provider)
    del payload["appointmentDate"]
    response = await client.post("/api/appointments", json=payload, headers=auth_headers(customer))
    assert response.status_code == 422
    assert response.json()["error"] == "validation_error"
    assert response.json()["details"]


async def test_missing_token_is_401(client, provider):
    response = await client.post("/api/appointments", json=booking_json(provider))
    assert response.status_code == 401
    assert response.json()["success"] is False


@pytest.mark.parametrize("who", ["provider", "admin"])
async def test_only_customers_can_book(client, provider, admin, who):
    actor = {"provider": provider, "admin": admin}[who]
    response = await client.post("/api/appointments", json=booking_json(provider), headers=auth_headers(actor))
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


async def test_full_lifecycle_over_http(client, customer, provider, admin, sender):
    aid = (await book(client, customer, provider))["appointmentId"]

    response = await client.put(
        f"/api/appointments/admin/{aid}",
        json={"status": "admin_approved", "adminNotes": "Confirmed by phone"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    assert response.json()["appointment"]["adminApprovedAt"] is not None
    assert response.json()["message"] == "Appointment approved and sent to provider"

    response = await client.put(
        f"/api/appointments/provider/{aid}",
        json={"status": "provider_accepted", "providerNotes": "See you then"},
        headers=auth_headers(provider),
    )
    assert response.status_code == 200
    assert response.json()["appointment"]["status"] == "provider_accepted"

    response = await client.put(
        f"/api/appointments/admin/{aid}", json={"status": "completed"}, headers=auth_headers(admin)
    )
    assert response.status_code == 200
    assert response.json()["appointment"]["completedAt"] is not None

    # created -> admin; approved -> provider + customer; accepted -> customer + admin; completed -> none
    assert sender.recipients() == [
        ADMIN_EMAIL,
        provider.email,
        customer.email,
        customer.email,
        ADMIN_EMAIL,
    ]


async def test_provider_accept_before_admin_is_invalid_transition(client, customer, provider):
    aid = (await book(client, customer, provider))["appointmentId"]
    response = await client.put(
        f"/api/appointments/provider/{aid}",
        json={"status": "provider_accepted"},
        headers=auth_headers(provider),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_transition"
    assert response.json()["message"] == "Appointment must be approved by admin first"


async def test_provider_update_on_foreign_appointment_is_404(client, db, customer, provider, admin):
    aid = (await book(client, customer, provider))["appointmentId"]
    await client.put(f"/api/appointments/admin/{aid}", json={"status": "admin_approved"}, headers=auth_headers(admin))
    other = make_provider(db, email="other@example.com")
    response = await client.put(
        f"/api/appointments/provider/{aid}", json={"status": "provider_accepted"}, headers=auth_headers(other)
    )
    assert response.status_code == 404


async def test_customer_cannot_use_admin_endpoint(client, customer, provider):
    aid = (await book(client, customer, provider))["appointmentId"]
    response = await client.put(
        f"/api/appointments/admin/{aid}", json={"status": "admin_approved"}, headers=auth_headers(customer)
    )
    assert response.status_code == 403


async def test_customer_cancel_notifies_provider_once_involved(client, customer, provider, admin, sender):
    aid = (await book(client, customer, provider))["appointmentId"]
    await client.put(f"/api/appointments/admin/{aid}", json={"status": "admin_approved"}, headers=auth_headers(admin))
    sender.sent.clear()

    response = await client.put(
        f"/api/appointments/{aid}/cancel", json={"reason": "Plans changed"}, headers=auth_headers(customer)
    )
    assert response.status_code == 200
    assert response.json()["appointment"]["status"] == "cancelled"
    assert sorted(sender.recipients()) == sorted([ADMIN_EMAIL, provider.email])


async def test_cancel_pending_only_notifies_admin(client, customer, provider, sender):
    aid = (await book(client, customer, provider))["appointmentId"]
    sender.sent.clear()
    response = await client.put(f"/api/appointments/{aid}/cancel", headers=auth_headers(customer))
    assert response.status_code == 200
    assert sender.recipients() == [ADMIN_EMAIL]


async def test_list_endpoints(client, customer, provider, admin):
    first = (await book(client, customer, provider))["appointmentId"]
    await book(client, customer, provider)
    await client.put(f"/api/appointments/admin/{first}", json={"status": "admin_approved"}, headers=auth_headers(admin))

    mine = (await client.get("/api/appointments/my-appointments", headers=auth_headers(customer))).json()
    assert mine["pagination"] == {"currentPage": 1, "totalPages": 1, "totalCount": 2}
    assert len(mine["recentAppointments"]) == 2

    theirs = (await client.get("/api/appointments/provider/my-appointments", headers=auth_headers(provider))).json()
    assert [a["appointmentId"] for a in theirs["appointments"]] == [first]

    everything = (await client.get("/api/appointments/admin/all", headers=auth_headers(admin))).json()
    assert everything["stats"]["total"] == 2
    assert everything["stats"]["pending"] == 1
    assert everything["stats"]["admin_approved"] == 1

    response = await client.get("/api/appointments/admin/all", headers=auth_headers(customer))
    assert response.status_code == 403


async def test_pagination_limits_are_enforced(client, customer):
    response = await client.get("/api/appointments/my-appointments?limit=101", headers=auth_headers(customer))
    assert response.status_code == 422


async def test_get_by_id_respects_ownership(client, db, customer, provider, admin):
    aid = (await book(client, customer, provider))["appointmentId"]
    stranger = make_customer(db, email="stranger@example.com")

    assert (await client.get(f"/api/appointments/{aid}", headers=auth_headers(customer))).status_code == 200
    assert (await client.get(f"/api/appointments/{aid}", headers=auth_headers(admin))).status_code == 200
    assert (await client.get(f"/api/appointments/{aid}", headers=auth_headers(stranger))).status_code == 403
    assert (await client.get("/api/appointments/APP-NOPE-00000", headers=auth_headers(admin))).status_code == 404


async def test_notification_failure_does_not_fail_request(client, customer, provider, sender):
    sender.fail_for.add(ADMIN_EMAIL)
    response = await client.post("/api/appointments", json=booking_json(provider), headers=auth_headers(customer))
    assert response.status_code == 201
    assert sender.sent == []
