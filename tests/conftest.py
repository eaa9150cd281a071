import os
import tempfile

_db_dir = tempfile.mkdtemp(prefix="fechou-tests-")

os.environ["APP_ENV"] = "development"
os.environ["DB_TYPE"] = "sqlite"
os.environ["SQLITE_PATH"] = os.path.join(_db_dir, "test.db")
os.environ["AUTH_PROVIDER"] = "local"
os.environ["JWT_ACCESS_SECRET_KEY"] = "test-secret-key"
os.environ["ENABLE_SCHEDULER"] = "false"
os.environ["DB_RETRY_DELAY_SECONDS"] = "0"

import pytest  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402
from sqlalchemy import select  # noqa: E402

from fechou.core.db import Base, engine, AsyncSessionLocal  # noqa: E402
from fechou.models.users.user_models import User  # noqa: E402
from main import app  # noqa: E402


@pytest.fixture(autouse=True)
async def database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db():
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# -------------------------
# HELPERS
# -------------------------
async def register(client, email: str, password: str = "secret123", referral_code: str | None = None) -> dict:
    payload = {"email": email, "password": password, "first_name": "Ana", "last_name": "Souza"}
    if referral_code:
        payload["referral_code"] = referral_code

    resp = await client.post("/auth/register", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def bearer(auth_data: dict) -> dict:
    return {"Authorization": f"Bearer {auth_data['auth']['access_token']}"}


async def update_user(email: str, **values) -> User:
    async with AsyncSessionLocal() as session:
        user = await session.scalar(select(User).where(User.email == email))
        for key, value in values.items():
            setattr(user, key, value)
        await session.commit()
        await session.refresh(user)
        return user


async def load_user(email: str) -> User:
    async with AsyncSessionLocal() as session:
        return await session.scalar(select(User).where(User.email == email))


async def create_client_record(client, headers: dict, name: str = "Carlos Lima") -> dict:
    resp = await client.post(
        "/clients",
        json={"name": name, "phone": "11999990000", "email": "carlos@example.com"},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


async def create_quote_record(client, headers: dict, client_id: int, **overrides) -> dict:
    payload = {
        "client_id": client_id,
        "title": "Pintura da sala",
        "items": [
            {"description": "Mão de obra", "quantity": 2, "unit_price": "150.00"},
            {"description": "Tinta", "quantity": 1, "unit_price": "80.50"},
        ],
        "discount": "30.50",
    }
    payload.update(overrides)

    resp = await client.post("/quotes", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


@pytest.fixture
async def provider(client) -> dict:
    data = await register(client, "provider@example.com")
    return {"data": data, "headers": bearer(data)}


@pytest.fixture
async def admin(client) -> dict:
    data = await register(client, "admin@example.com")
    await update_user("admin@example.com", is_admin=True)
    return {"data": data, "headers": bearer(data)}
