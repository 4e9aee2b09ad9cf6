import pytest

from accounts.models.user import User


pytestmark = pytest.mark.asyncio


async def test_admin_user_management_flow(client, create_admin, auth_header_factory):
    admin, admin_password = await create_admin()
    admin_headers = await auth_header_factory(admin.email, admin_password)

    # Create a normal user via public endpoint
    user_payload = {
        "firstName": "Member",
        "lastName": "One",
        "email": "member1@example.com",
        "password": "Member#123",
    }
    register_resp = await client.post("/api/v1/users/register", json=user_payload)
    user_id = register_resp.json()["id"]

    list_resp = await client.get("/api/v1/users", headers=admin_headers, params={"page": 1, "limit": 20})
    assert list_resp.status_code == 200
    body = list_resp.json()
    assert body["page"] == 1 and body["pages"] == 1
    assert any(item["email"] == "member1@example.com" for item in body["users"])

    update_resp = await client.put(
        f"/api/v1/users/{user_id}",
        headers=admin_headers,
        json={"email": "member1+updated@example.com", "isAdmin": True, "isSeller": False, "password": "Member#999"},
    )
    assert update_resp.status_code == 200
    updated = update_resp.json()
    assert updated["message"] == "User updated"
    assert updated["user"]["email"] == "member1+updated@example.com"
    assert updated["user"]["isAdmin"] is True
    assert updated["user"]["isSeller"] is False
    assert not any("password" in key.lower() for key in updated["user"])

    signin_with_new_pwd = await client.post(
        "/api/v1/users/signin",
        json={"email": "member1+updated@example.com", "password": "Member#999"},
    )
    assert signin_with_new_pwd.status_code == 200
    assert signin_with_new_pwd.json()["isAdmin"] is True

    delete_resp = await client.delete(f"/api/v1/users/{user_id}", headers=admin_headers)
    assert delete_resp.status_code == 200
    assert delete_resp.json()["message"] == "User deactivated"
    assert delete_resp.json()["user"]["isActive"] is False

    # Soft-deleted: record still exists and still listed, but cannot sign in
    assert await User.filter(id=user_id).exists()
    list_resp = await client.get("/api/v1/users", headers=admin_headers, params={"search": "member1"})
    assert [u["isActive"] for u in list_resp.json()["users"]] == [False]
    signin_after = await client.post(
        "/api/v1/users/signin",
        json={"email": "member1+updated@example.com", "password": "Member#999"},
    )
    assert signin_after.status_code == 401


async def test_list_pagination(client, create_admin, create_user, auth_header_factory):
    admin, admin_password = await create_admin(first_name="Boss", email="boss@corp.example.com")
    headers = await auth_header_factory(admin.email, admin_password)
    for i in range(25):
        await create_user(first_name=f"Match{i:02d}", email=f"match{i:02d}@example.com")

    resp = await client.get("/api/v1/users", headers=headers, params={"search": "match", "limit": 10, "page": 3})
    assert resp.status_code == 200
    body = resp.json()
    assert body["pages"] == 3
    assert body["page"] == 3
    assert len(body["users"]) == 5

    # Defaults: page 1, limit 10, no search (26 users in total)
    resp = await client.get("/api/v1/users", headers=headers)
    assert resp.json()["page"] == 1
    assert resp.json()["pages"] == 3
    assert len(resp.json()["users"]) == 10

    # Out-of-range values fall back to the defaults instead of failing
    resp = await client.get("/api/v1/users", headers=headers, params={"page": 0, "limit": 0})
    assert resp.status_code == 200
    assert resp.json()["page"] == 1
    assert len(resp.json()["users"]) == 10

    # No upper cap on the page size
    resp = await client.get("/api/v1/users", headers=headers, params={"limit": 200})
    assert resp.status_code == 200
    assert resp.json()["pages"] == 1
    assert len(resp.json()["users"]) == 26


async def test_admin_update_null_flags_mean_false(client, create_admin, create_user, auth_header_factory):
    admin, admin_password = await create_admin()
    headers = await auth_header_factory(admin.email, admin_password)
    target, _ = await create_user(is_admin=True, is_seller=True)

    resp = await client.put(f"/api/v1/users/{target.id}", headers=headers, json={"isAdmin": None, "isSeller": None})
    assert resp.status_code == 200
    assert resp.json()["user"]["isAdmin"] is False
    assert resp.json()["user"]["isSeller"] is False


async def test_list_sellers(client, create_admin, create_user, auth_header_factory):
    admin, admin_password = await create_admin()
    headers = await auth_header_factory(admin.email, admin_password)
    await create_user(first_name="Zulay", last_name="Rojas", national_id="V11111111", is_seller=True)
    await create_user(first_name="Alberto", last_name="Diaz", is_seller=True)
    await create_user(first_name="Bruno", is_seller=False)

    resp = await client.get("/api/v1/users/sellers", headers=headers)
    assert resp.status_code == 200
    sellers = resp.json()
    assert [s["firstName"] for s in sellers] == ["Alberto", "Zulay"]
    assert set(sellers[1]) == {"id", "firstName", "lastName", "nationalId"}
    assert sellers[1]["nationalId"] == "V11111111"


async def test_cannot_deactivate_protected_user(client, create_admin, create_user, auth_header_factory):
    admin, admin_password = await create_admin()
    headers = await auth_header_factory(admin.email, admin_password)
    protected, _ = await create_user(is_protected=True)

    resp = await client.delete(f"/api/v1/users/{protected.id}", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "USER_PROTECTED"
    assert (await User.get(id=protected.id)).is_active is True


async def test_admin_cannot_deactivate_self(client, create_admin, auth_header_factory):
    admin, admin_password = await create_admin()
    headers = await auth_header_factory(admin.email, admin_password)

    resp = await client.delete(f"/api/v1/users/{admin.id}", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "CANNOT_DEACTIVATE_SELF"
    assert (await User.get(id=admin.id)).is_active is True


async def test_unknown_user_is_404(client, create_admin, auth_header_factory):
    admin, admin_password = await create_admin()
    headers = await auth_header_factory(admin.email, admin_password)
    missing = "00000000-0000-4000-8000-000000000000"

    assert (await client.delete(f"/api/v1/users/{missing}", headers=headers)).status_code == 404
    assert (await client.put(f"/api/v1/users/{missing}", headers=headers, json={})).status_code == 404


async def test_non_admin_cannot_access_admin_routes(client, create_user, auth_header_factory):
    user, password = await create_user()
    headers = await auth_header_factory(user.email, password)

    for method, path in [
        ("GET", "/api/v1/users"),
        ("GET", "/api/v1/users/sellers"),
        ("PUT", f"/api/v1/users/{user.id}"),
        ("DELETE", f"/api/v1/users/{user.id}"),
    ]:
        resp = await client.request(method, path, headers=headers, json={} if method == "PUT" else None)
        assert resp.status_code == 401, (method, path)
        assert resp.json()["detail"]["code"] == "AUTH_ADMIN_REQUIRED"


async def test_admin_routes_require_token(client):
    resp = await client.get("/api/v1/users")
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "AUTH_REQUIRED"
