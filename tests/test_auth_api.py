import pytest

API = "/api/v1"

test_admin = {
    "email": "Owner@Salon.test",
    "fullName": "Salon Owner",
    "password": "OwnerPass123",
    "role": "admin",
}


async def login(client, email, password):
    return await client.post(
        f"{API}/auth/login", data={"username": email, "password": password}
    )


@pytest.mark.asyncio
async def test_bootstrap_first_admin_and_login(client):
    response = await client.post(f"{API}/auth/users", json=test_admin)
    assert response.status_code == 201
    assert response.json()["email"] == "owner@salon.test"

    token_response = await login(client, "owner@salon.test", "OwnerPass123")
    assert token_response.status_code == 200
    token = token_response.json()["access_token"]

    me = await client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["role"] == "admin"
    assert me.json()["lastLogin"] is not None


@pytest.mark.asyncio
async def test_first_account_must_be_admin(client):
    response = await client.post(f"{API}/auth/users", json={**test_admin, "role": "staff"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_later_accounts_need_admin_token(client, admin_headers, stylist_headers):
    new_user = {**test_admin, "email": "second@salon.test", "role": "staff"}

    anonymous = await client.post(f"{API}/auth/users", json=new_user)
    assert anonymous.status_code == 401

    as_stylist = await client.post(f"{API}/auth/users", json=new_user, headers=stylist_headers)
    assert as_stylist.status_code == 403

    as_admin = await client.post(f"{API}/auth/users", json=new_user, headers=admin_headers)
    assert as_admin.status_code == 201

    duplicate = await client.post(f"{API}/auth/users", json=new_user, headers=admin_headers)
    assert duplicate.status_code == 400


@pytest.mark.asyncio
async def test_wrong_password(client, admin_user):
    response = await login(client, "owner@salon.test", "not-it")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_garbage_token(client):
    response = await client.get(f"{API}/auth/me", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401
