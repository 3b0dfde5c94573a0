"""Integration tests for /auth endpoints and bearer authentication."""

import datetime as dt

import jwt
import pytest
from httpx import AsyncClient
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from budget_tracker.config import settings
from budget_tracker.models import Category, Transaction, User
from budget_tracker.repositories import user as user_repo
from tests.factories import DEFAULT_PASSWORD
from tests.seeds import Seed


@pytest.mark.asyncio
async def test_register_creates_user_and_default_categories(client: AsyncClient) -> None:
    resp = await client.post(
        "/auth/register", json={"name": "Budi", "email": "Budi@Example.com", "password": "rahasia1"}
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "User created successfully"
    assert body["data"]["email"] == "budi@example.com"
    assert "passwordHash" not in body["data"]

    login = await client.post("/auth/login", json={"email": "budi@example.com", "password": "rahasia1"})
    headers = {"Authorization": f"Bearer {login.json()['data']['accessToken']}"}
    categories = (await client.get("/categories", headers=headers)).json()["data"]
    assert sorted(c["name"] for c in categories) == [
        "Gaji",
        "Hiburan",
        "Keluarga",
        "Kost/Sewa",
        "Makan",
        "Tabungan",
        "Transportasi",
    ]


@pytest.mark.asyncio
async def test_register_duplicate_email_returns_409(client: AsyncClient, seeded_db: Seed) -> None:
    resp = await client.post(
        "/auth/register", json={"name": "Again", "email": "DEMO@example.com", "password": "rahasia1"}
    )
    assert resp.status_code == 409
    assert resp.json()["error"]["message"] == "User with this email already exists"


@pytest.mark.asyncio
async def test_register_validation_lists_fields(client: AsyncClient) -> None:
    resp = await client.post("/auth/register", json={"name": "A", "email": "nope", "password": "123"})
    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["message"] == "Validation failed"
    assert sorted(e["field"] for e in error["errors"]) == ["email", "name", "password"]


@pytest.mark.asyncio
async def test_register_malformed_body_returns_400(client: AsyncClient) -> None:
    resp = await client.post(
        "/auth/register", content=b"{oops", headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "error": {
            "message": "Invalid request body",
            "statusCode": 400,
            "timestamp": resp.json()["error"]["timestamp"],
        },
    }


@pytest.mark.asyncio
async def test_login_returns_bearer_token(client: AsyncClient, seeded_db: Seed) -> None:
    resp = await client.post("/auth/login", json={"email": "demo@example.com", "password": DEFAULT_PASSWORD})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["tokenType"] == "bearer"
    assert data["expiresIn"] == settings.access_token_expire_minutes * 60

    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {data['accessToken']}"})
    assert me.status_code == 200
    assert me.json()["data"]["id"] == str(seeded_db.user.id)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "email, password",
    [("demo@example.com", "wrong-password"), ("nobody@example.com", DEFAULT_PASSWORD)],
    ids=["wrong_password", "unknown_email"],
)
async def test_login_bad_credentials_returns_401(
    client: AsyncClient, seeded_db: Seed, email: str, password: str
) -> None:
    resp = await client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 401
    assert resp.json()["error"]["message"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_missing_token_returns_401_envelope(client: AsyncClient) -> None:
    resp = await client.get("/auth/me")
    assert resp.status_code == 401
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["statusCode"] == 401
    assert body["error"]["message"] == "Missing bearer token"


@pytest.mark.asyncio
async def test_garbage_token_returns_401(client: AsyncClient) -> None:
    resp = await client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json()["error"]["message"] == "Invalid token"


@pytest.mark.asyncio
async def test_expired_token_returns_401(client: AsyncClient, seeded_db: Seed) -> None:
    past = dt.datetime.now(dt.UTC) - dt.timedelta(hours=2)
    token = jwt.encode(
        {"sub": str(seeded_db.user.id), "type": "access", "iat": past, "exp": past + dt.timedelta(hours=1)},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    resp = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["error"]["message"] == "Token has expired"


@pytest.mark.asyncio
async def test_token_for_deleted_user_returns_401(client: AsyncClient, seeded_db: Seed, db: AsyncSession) -> None:
    user_id = seeded_db.user.id
    for model in (Transaction, Category):
        await db.execute(delete(model).where(model.user_id == user_id))
    await db.execute(delete(User).where(User.id == user_id))
    await db.commit()
    db.expunge_all()

    resp = await client.get("/auth/me", headers=seeded_db.headers)
    assert resp.status_code == 401
    assert resp.json()["error"]["message"] == "User no longer exists"


@pytest.mark.asyncio
async def test_register_race_on_same_email_returns_409(
    client: AsyncClient, db: AsyncSession, seeded_db: Seed, monkeypatch: pytest.MonkeyPatch
) -> None:
    # The lookup misses, as it would when another request registers the email concurrently
    async def nobody(*args: object) -> None:
        return None

    monkeypatch.setattr(user_repo, "get_user_by_email", nobody)
    resp = await client.post(
        "/auth/register", json={"name": "Twin", "email": "demo@example.com", "password": "rahasia1"}
    )
    await db.rollback()

    assert resp.status_code == 409
    assert resp.json()["error"]["message"] == "User with this email already exists"
