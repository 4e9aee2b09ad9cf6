import os
import uuid

TEST_DB_URL = "sqlite://:memory:"
TEST_JWT_SECRET = "test-secret-for-accounts-suite-0123456789abcdef"
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ.setdefault("JWT_SECRET", TEST_JWT_SECRET)

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from accounts.api.v1.deps import get_token_service
from accounts.core import db as db_module
from accounts.core.security import hash_password
from accounts.main import app
from accounts.models.user import User

db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables (and their unique indexes) are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await db_module.init_db(generate_schemas=True)


@pytest_asyncio.fixture
async def db():
    """Fresh database for service-level tests."""
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def tokens():
    """The same TokenService the application uses."""
    return get_token_service()


@pytest_asyncio.fixture
async def client(db):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def create_user(db):
    """
    Factory fixture to create users directly via ORM.
    """

    async def _create_user(password: str = "UserPass!23", **fields) -> tuple[User, str]:
        suffix = uuid.uuid4().hex[:6]
        defaults = {
            "first_name": f"User{suffix}",
            "last_name": "Tester",
            "email": f"user_{suffix}@example.com",
            "is_admin": False,
            "is_seller": False,
        }
        defaults.update(fields)
        user = await User.create(password_hash=hash_password(password), **defaults)
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def create_admin(create_user):
    """
    Factory fixture to create admin users for privileged endpoints.
    """

    async def _create_admin(password: str = "AdminPass!23", **fields) -> tuple[User, str]:
        fields.setdefault("is_admin", True)
        return await create_user(password=password, **fields)

    return _create_admin


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to obtain Authorization headers via the sign-in endpoint.
    """

    async def _get_headers(email: str, password: str) -> dict[str, str]:
        resp = await client.post(
            "/api/v1/users/signin",
            json={"email": email, "password": password},
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["token"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers
