import pytest

from conftest import booking_payload

API = "/api/v1"


@pytest.mark.asyncio
async def test_search_by_name_or_phone(client, staff_member, service, admin_headers):
    await client.post(f"{API}/appointments/", json=booking_payload(staff_member, service, "09:00"))
    await client.post(
        f"{API}/appointments/",
        json=booking_payload(
            staff_member, service, "11:00", customer={"name": "Sam Lee", "phone": "+15550999"}
        ),
    )

    by_name = await client.get(f"{API}/customers/", params={"search": "alex"}, headers=admin_headers)
    assert [c["name"] for c in by_name.json()] == ["Alex Morgan"]

    by_phone = await client.get(f"{API}/customers/", params={"search": "0999"}, headers=admin_headers)
    assert [c["name"] for c in by_phone.json()] == ["Sam Lee"]

    # Regex characters are matched literally
    plus = await client.get(f"{API}/customers/", params={"search": "+1555"}, headers=admin_headers)
    assert len(plus.json()) == 2


@pytest.mark.asyncio
async def test_customer_history(client, staff_member, service, admin_headers):
    first = await client.post(f"{API}/appointments/", json=booking_payload(staff_member, service, "09:00"))
    await client.post(f"{API}/appointments/", json=booking_payload(staff_member, service, "13:00"))
    customer_id = first.json()["clientId"]

    response = await client.get(f"{API}/customers/{customer_id}/appointments", headers=admin_headers)
    assert response.status_code == 200
    assert [a["time"] for a in response.json()] == ["09:00", "13:00"]


@pytest.mark.asyncio
async def test_customers_are_admin_only(client, stylist_headers):
    response = await client.get(f"{API}/customers/", headers=stylist_headers)
    assert response.status_code == 403

    missing = await client.get(f"{API}/customers/")
    assert missing.status_code == 401
