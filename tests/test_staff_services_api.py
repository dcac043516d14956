import pytest

from conftest import MONDAY

API = "/api/v1"


@pytest.mark.asyncio
async def test_create_staff_defaults_days_off(client, admin_headers):
    response = await client.post(
        f"{API}/staff/",
        json={"name": "Robin", "availability": {"friday": {"start": "10:00", "end": "18:00", "available": True}}},
        headers=admin_headers,
    )
    assert response.status_code == 201
    availability = response.json()["availability"]
    assert availability["friday"]["available"] is True
    assert availability["monday"]["available"] is False
    assert set(availability) == {
        "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"
    }


@pytest.mark.asyncio
async def test_reversed_window_is_rejected(client, admin_headers):
    response = await client.post(
        f"{API}/staff/",
        json={"name": "Robin", "availability": {"monday": {"start": "17:00", "end": "09:00", "available": True}}},
        headers=admin_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_staff_write_requires_admin(client, stylist_headers):
    response = await client.post(f"{API}/staff/", json={"name": "Robin"}, headers=stylist_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_stylist_updates_own_day(client, staff_member, service, stylist_headers):
    response = await client.put(
        f"{API}/staff/{staff_member['id']}/availability/Monday",
        json={"start": "12:00", "end": "15:00", "available": True},
        headers=stylist_headers,
    )
    assert response.status_code == 200
    assert response.json()["monday"] == {"start": "12:00", "end": "15:00", "available": True}

    slots = await client.get(
        f"{API}/availability/slots",
        params={"staffId": staff_member["id"], "serviceId": service["id"], "date": MONDAY},
    )
    assert slots.json()["slots"] == ["12:00", "12:30", "13:00", "13:30", "14:00"]


@pytest.mark.asyncio
async def test_stylist_cannot_edit_colleague(client, staff_member, stylist_headers, admin_headers):
    colleague = await client.post(f"{API}/staff/", json={"name": "Robin"}, headers=admin_headers)
    response = await client.put(
        f"{API}/staff/{colleague.json()['id']}/availability/monday",
        json={"start": "09:00", "end": "12:00", "available": True},
        headers=stylist_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_invalid_day_name(client, staff_member, admin_headers):
    response = await client.put(
        f"{API}/staff/{staff_member['id']}/availability/funday",
        json={"start": "09:00", "end": "12:00", "available": True},
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_deactivated_staff_hidden_and_unbookable(client, staff_member, service, admin_headers):
    response = await client.delete(f"{API}/staff/{staff_member['id']}", headers=admin_headers)
    assert response.json()["isActive"] is False

    listed = await client.get(f"{API}/staff/")
    assert listed.json() == []

    slots = await client.get(
        f"{API}/availability/slots",
        params={"staffId": staff_member["id"], "serviceId": service["id"], "date": MONDAY},
    )
    assert slots.status_code == 404


@pytest.mark.asyncio
async def test_service_crud(client, admin_headers):
    created = await client.post(
        f"{API}/services/",
        json={"name": "Gloss", "duration": 30, "price": 40, "category": "Color"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    service_id = created.json()["id"]

    updated = await client.put(
        f"{API}/services/{service_id}", json={"duration": 45}, headers=admin_headers
    )
    assert updated.json()["duration"] == 45

    by_category = await client.get(f"{API}/services/", params={"category": "Color"})
    assert [s["id"] for s in by_category.json()] == [service_id]

    retired = await client.delete(f"{API}/services/{service_id}", headers=admin_headers)
    assert retired.json()["isActive"] is False
    assert (await client.get(f"{API}/services/")).json() == []


@pytest.mark.asyncio
async def test_service_duration_must_be_positive(client, admin_headers):
    response = await client.post(
        f"{API}/services/", json={"name": "Nothing", "duration": 0}, headers=admin_headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_unknown_service(client):
    response = await client.get(f"{API}/services/not-an-id")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_null_fields_in_update_are_ignored(client, staff_member, service, admin_headers):
    response = await client.put(
        f"{API}/staff/{staff_member['id']}",
        json={"availability": None, "bio": "Balayage"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["bio"] == "Balayage"

    fetched = await client.get(f"{API}/staff/{staff_member['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["availability"]["monday"] == {"start": "09:00", "end": "17:00", "available": True}

    service_response = await client.put(
        f"{API}/services/{service['id']}", json={"duration": None}, headers=admin_headers
    )
    assert service_response.json()["duration"] == 60
