import pytest
from httpx import AsyncClient

from tests.utils.json_compare import user_fields


@pytest.mark.asyncio
async def test_profile_requires_authorization(client: AsyncClient):
    response = await client.get("/api/auth/profile")

    assert response.status_code == 401
    assert response.json()["error"] == "Authorization header required"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "authorization, message",
    [
        ("Basic YWxpY2U6cHc=", "Invalid authorization header format"),
        ("Bearer", "Invalid authorization header format"),
        ("Bearer garbage", "Invalid token"),
    ],
)
async def test_profile_rejects_bad_headers(client: AsyncClient, authorization, message):
    response = await client.get("/api/auth/profile", headers={"Authorization": authorization})

    assert response.status_code == 401
    assert response.json()["error"] == message


@pytest.mark.asyncio
async def test_profile_returns_caller(client: AsyncClient, registered_user, auth_headers, test_data):
    response = await client.get("/api/auth/profile", headers=auth_headers)

    assert response.status_code == 200
    user = response.json()["data"]
    assert user["id"] == registered_user["user"]["id"]
    assert user_fields(user) == test_data.get("expected_alice")


@pytest.mark.asyncio
async def test_update_profile(client: AsyncClient, registered_user, auth_headers):
    response = await client.put(
        "/api/auth/profile", json={"username": "alice2", "age": 30}, headers=auth_headers
    )

    assert response.status_code == 200
    user = response.json()["data"]
    assert user["username"] == "alice2"
    assert user["age"] == 30
    assert user["email"] == "a@x.io"

    # the old bearer still works: tokens carry the user id
    response = await client.get("/api/auth/profile", headers=auth_headers)
    assert response.json()["data"]["username"] == "alice2"


@pytest.mark.asyncio
async def test_renamed_user_logs_in_with_new_name_only(client: AsyncClient, registered_user, auth_headers):
    await client.put("/api/auth/profile", json={"username": "alice2"}, headers=auth_headers)

    renamed = await client.post("/api/auth/login", json={"username": "alice2", "password": "p@ssw0rd!"})
    original = await client.post("/api/auth/login", json={"username": "alice", "password": "p@ssw0rd!"})

    assert renamed.status_code == 200
    assert original.status_code == 401


@pytest.mark.asyncio
async def test_clear_email(client: AsyncClient, registered_user, auth_headers):
    response = await client.put("/api/auth/profile", json={"email": ""}, headers=auth_headers)

    assert response.status_code == 200
    assert "email" not in response.json()["data"]


@pytest.mark.asyncio
async def test_update_conflicts(client: AsyncClient, registered_user, auth_headers, test_data):
    await client.post("/api/auth/register", json=test_data.get_copy("register_bob"))

    taken_name = await client.put("/api/auth/profile", json={"username": "bob"}, headers=auth_headers)
    taken_email = await client.put("/api/auth/profile", json={"email": "bob@x.io"}, headers=auth_headers)

    assert taken_name.status_code == 409
    assert taken_name.json()["code"] == "USER_EXISTS"
    assert taken_email.status_code == 409
    assert taken_email.json()["code"] == "EMAIL_EXISTS"


@pytest.mark.asyncio
async def test_update_validation(client: AsyncClient, registered_user, auth_headers):
    response = await client.put("/api/auth/profile", json={"age": 200}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["details"] == [{"field": "age", "message": "age must be at most 150"}]


@pytest.mark.asyncio
async def test_delete_account(client: AsyncClient, registered_user, auth_headers, test_data):
    response = await client.delete("/api/auth/account", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["data"]["message"] == "Account deleted successfully"

    response = await client.get("/api/auth/profile", headers=auth_headers)
    assert response.status_code == 404

    response = await client.post("/api/auth/login", json=test_data.credentials("register_alice"))
    assert response.status_code == 401
