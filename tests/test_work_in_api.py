import pytest

from conftest import MONDAY, booking_payload, test_customer

API = "/api/v1"


async def submit_request(client, staff_member, service, time="18:00", date=MONDAY):
    response = await client.post(
        f"{API}/work-in-requests/",
        json={
            "customerInfo": test_customer,
            "staffId": staff_member["id"],
            "serviceId": service["id"],
            "requestedDate": date,
            "requestedTime": time,
            "notes": "Only free after work",
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_request_is_pending(client, staff_member, service, admin_headers):
    request = await submit_request(client, staff_member, service)
    assert request["status"] == "pending"
    assert request["requestedDate"] == MONDAY

    listed = await client.get(
        f"{API}/work-in-requests/", params={"status": "pending"}, headers=admin_headers
    )
    assert [r["id"] for r in listed.json()] == [request["id"]]


@pytest.mark.asyncio
async def test_listing_requires_admin(client, staff_member, service, stylist_headers):
    await submit_request(client, staff_member, service)
    response = await client.get(f"{API}/work-in-requests/", headers=stylist_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_approve_books_appointment(client, staff_member, service, admin_headers):
    request = await submit_request(client, staff_member, service)

    response = await client.post(
        f"{API}/work-in-requests/{request['id']}/respond",
        json={"status": "approved", "time": "08:00", "notes": "Opening early"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    answered = response.json()
    assert answered["status"] == "approved"
    assert answered["responseTime"] is not None

    appointment = await client.get(
        f"{API}/appointments/{answered['appointmentId']}", headers=admin_headers
    )
    assert appointment.status_code == 200
    body = appointment.json()
    assert body["isWorkInApproval"] is True
    assert body["originalRequestId"] == request["id"]
    assert body["time"] == "08:00"
    assert body["endTime"] == "09:00"


@pytest.mark.asyncio
async def test_approve_needs_a_time(client, staff_member, service, admin_headers):
    request = await submit_request(client, staff_member, service)
    response = await client.post(
        f"{API}/work-in-requests/{request['id']}/respond",
        json={"status": "approved"},
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_approve_into_booked_time_conflicts(client, staff_member, service, admin_headers):
    await client.post(f"{API}/appointments/", json=booking_payload(staff_member, service, "09:00"))
    request = await submit_request(client, staff_member, service)

    response = await client.post(
        f"{API}/work-in-requests/{request['id']}/respond",
        json={"status": "approved", "time": "08:30"},
        headers=admin_headers,
    )
    assert response.status_code == 409

    still_pending = await client.get(
        f"{API}/work-in-requests/{request['id']}", headers=admin_headers
    )
    assert still_pending.json()["status"] == "pending"


@pytest.mark.asyncio
async def test_deny_then_respond_again(client, staff_member, service, admin_headers):
    request = await submit_request(client, staff_member, service)

    denied = await client.post(
        f"{API}/work-in-requests/{request['id']}/respond",
        json={"status": "denied", "notes": "Fully booked"},
        headers=admin_headers,
    )
    assert denied.status_code == 200
    assert denied.json()["status"] == "denied"
    assert denied.json()["appointmentId"] is None

    again = await client.post(
        f"{API}/work-in-requests/{request['id']}/respond",
        json={"status": "approved", "time": "08:00"},
        headers=admin_headers,
    )
    assert again.status_code == 400


@pytest.mark.asyncio
async def test_unknown_request(client, admin_headers):
    response = await client.post(
        f"{API}/work-in-requests/507f1f77bcf86cd799439011/respond",
        json={"status": "denied"},
        headers=admin_headers,
    )
    assert response.status_code == 404
