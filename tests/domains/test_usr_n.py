# tests/domains/test_usr_n.py

"""
Integration tests of the 'usr' domain: sign-in, bearer checks and admin-only
account management.
"""

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.security import create_access_token, verify_password
from app.domains.usr import crud as usr_crud
from app.domains.usr import models as usr_models


# =============================================================================
# 1. Authentication
# =============================================================================
@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, test_admin_user: usr_models.User):
    response = await client.post(
        "/api/v1/usr/auth/token",
        data={"username": "ADMIN@example.com ", "password": "adminpass123"},
    )
    assert response.status_code == 200
    token = response.json()
    assert token["token_type"] == "bearer"
    assert token["access_token"]


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_admin_user: usr_models.User):
    response = await client.post(
        "/api/v1/usr/auth/token",
        data={"username": "admin@example.com", "password": "wrongpass123"},
    )
    assert response.status_code == 401
    assert response.json() == {"error": "Incorrect email or password"}


@pytest.mark.asyncio
async def test_login_inactive_user(client: AsyncClient, user_factory):
    await user_factory("gone@example.com", "gonepass123", is_active=False)
    response = await client.post(
        "/api/v1/usr/auth/token",
        data={"username": "gone@example.com", "password": "gonepass123"},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_read_me(staff_client: AsyncClient, test_staff_user: usr_models.User):
    response = await staff_client.get("/api/v1/usr/auth/me")
    assert response.status_code == 200
    me = response.json()
    assert me["uid"] == test_staff_user.uid
    assert me["email"] == "staff@example.com"
    assert me["role"] == "staff"
    assert me["isActive"] is True
    assert "passwordHash" not in me


@pytest.mark.asyncio
async def test_missing_token_is_rejected(client: AsyncClient):
    response = await client.get("/api/v1/usr/auth/me")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized: Missing token"}



@pytest.mark.asyncio
async def test_malformed_token_is_rejected(client: AsyncClient):
    response = await client.get("/api/v1/usr/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid token"}


@pytest.mark.asyncio
async def test_token_for_deleted_account(client: AsyncClient):
    token = create_access_token({"sub": "0" * 32})
    headers = {"Authorization": f"Bearer {token}"}

    response = await client.get("/api/v1/usr/auth/me", headers=headers)
    assert response.status_code == 401

    response = await client.get("/api/v1/usr/users", headers=headers)
    assert response.status_code == 403
    assert response.json() == {"error": "Admin access required"}


# =============================================================================
# 2. Account creation
# =============================================================================
@pytest.mark.asyncio
async def test_create_user_success_admin(
    admin_client: AsyncClient,
    test_admin_user: usr_models.User,
    db_session: AsyncSession,
):
    user_data = {"email": "New.Staff@Example.com", "password": "newstaff123", "role": "staff"}
    response = await admin_client.post("/api/v1/usr/users", json=user_data)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User created successfully"
    assert body["uid"]

    db_user = await usr_crud.user.get(db_session, body["uid"])
    assert db_user is not None
    assert db_user.email == "new.staff@example.com"
    assert db_user.role == usr_models.UserRole.STAFF
    assert db_user.created_by == test_admin_user.uid
    assert db_user.password_hash != "newstaff123"
    assert verify_password("newstaff123", db_user.password_hash)


@pytest.mark.asyncio
async def test_created_user_can_sign_in(admin_client: AsyncClient, client: AsyncClient):
    user_data = {"email": "clerk@example.com", "password": "clerkpass1", "role": "admin"}
    response = await admin_client.post("/api/v1/usr/users", json=user_data)
    assert response.status_code == 201

    response = await client.post(
        "/api/v1/usr/auth/token",
        data={"username": "clerk@example.com", "password": "clerkpass1"},
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_create_user_duplicate_email(admin_client: AsyncClient, test_staff_user: usr_models.User):
    user_data = {"email": "STAFF@example.com", "password": "anotherpass1", "role": "staff"}
    response = await admin_client.post("/api/v1/usr/users", json=user_data)
    assert response.status_code == 409
    assert response.json() == {"error": "Email already exists"}


@pytest.mark.asyncio
async def test_create_user_by_staff_forbidden(staff_client: AsyncClient):
    user_data = {"email": "sneaky@example.com", "password": "sneakypass1", "role": "admin"}
    response = await staff_client.post("/api/v1/usr/users", json=user_data)
    assert response.status_code == 403
    assert response.json() == {"error": "Admin access required"}


@pytest.mark.asyncio
async def test_create_user_without_token(client: AsyncClient):
    user_data = {"email": "anon@example.com", "password": "anonpass123", "role": "staff"}
    response = await client.post("/api/v1/usr/users", json=user_data)
    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "user_data, field",
    [
        ({"email": "not-an-email", "password": "validpass1", "role": "staff"}, "email"),
        ({"email": "short@example.com", "password": "short", "role": "staff"}, "password"),
        ({"email": "symbols@example.com", "password": "~~~~~~~~~~", "role": "staff"}, "password"),
        ({"email": "role@example.com", "password": "validpass1", "role": "owner"}, "role"),
    ],
)
async def test_create_user_invalid_input(admin_client: AsyncClient, user_data: dict, field: str):
    response = await admin_client.post("/api/v1/usr/users", json=user_data)
    assert response.status_code == 400
    assert field in {error["field"] for error in response.json()["errors"]}


# =============================================================================
# 3. Account listing and removal
# =============================================================================
@pytest.mark.asyncio
async def test_read_users_ordered_by_email(
    admin_client: AsyncClient,
    test_staff_user: usr_models.User,
    user_factory,
):
    await user_factory("bravo@example.com", "bravopass1")
    response = await admin_client.get("/api/v1/usr/users")
    assert response.status_code == 200
    emails = [u["email"] for u in response.json()]
    assert emails == sorted(emails)
    assert {"admin@example.com", "bravo@example.com", "staff@example.com"} <= set(emails)


@pytest.mark.asyncio
async def test_read_users_forbidden_for_staff(staff_client: AsyncClient):
    response = await staff_client.get("/api/v1/usr/users")
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_staff_reads_only_own_account(
    staff_client: AsyncClient,
    test_staff_user: usr_models.User,
    test_admin_user: usr_models.User,
):
    response = await staff_client.get(f"/api/v1/usr/users/{test_staff_user.uid}")
    assert response.status_code == 200

    response = await staff_client.get(f"/api/v1/usr/users/{test_admin_user.uid}")
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_read_user_not_found(admin_client: AsyncClient):
    response = await admin_client.get("/api/v1/usr/users/unknown")
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


@pytest.mark.asyncio
async def test_delete_user(admin_client: AsyncClient, test_staff_user: usr_models.User, db_session: AsyncSession):
    response = await admin_client.delete(f"/api/v1/usr/users/{test_staff_user.uid}")
    assert response.status_code == 200
    assert response.json() == {"message": "User deleted successfully"}

    db_session.expunge_all()
    assert await usr_crud.user.get(db_session, test_staff_user.uid) is None


@pytest.mark.asyncio
async def test_admin_cannot_delete_self(admin_client: AsyncClient, test_admin_user: usr_models.User):
    response = await admin_client.delete(f"/api/v1/usr/users/{test_admin_user.uid}")
    assert response.status_code == 400
    assert response.json() == {"error": "Cannot delete your own account"}
