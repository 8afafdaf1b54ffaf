import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from fintrack.client.api import FinanceClient
from fintrack.client.tokens import MemoryTokenStore
from fintrack.core.database import get_db, init_db
from fintrack.main import create_app
from fintrack.models.user import User

PASSWORD = "secret123"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(session_factory):
    app = create_app(use_lifespan=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def transport(app):
    return ASGITransport(app=app)


@pytest.fixture
async def client(transport):
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


async def register(client: AsyncClient, username: str = "alice") -> dict:
    response = await client.post("/api/auth/register", json={
        "username": username,
        "email": f"{username}@example.com",
        "password": PASSWORD,
        "firstName": username.capitalize(),
        "lastName": "Tester",
    })
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
async def auth(client):
    return await register(client, "alice")


@pytest.fixture
async def other_auth(client):
    return await register(client, "bobby")


@pytest.fixture
async def admin_auth(client, session_factory):
    headers = await register(client, "admin")
    async with session_factory() as session:
        await session.execute(update(User).where(User.username == "admin").values(is_admin=True))
        await session.commit()
    return headers


@pytest.fixture
async def finance_client(transport):
    async with FinanceClient("http://test/api", token_store=MemoryTokenStore(), transport=transport) as fc:
        await fc.register("carol", "carol@example.com", PASSWORD, "Carol", "Tester")
        yield fc


async def create_account(client, headers, name="Checking", **extra) -> dict:
    response = await client.post("/api/accounts", json={"name": name, "type": "bank", **extra}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["account"]


async def create_category(client, headers, name="Groceries", type="expense") -> dict:
    response = await client.post("/api/categories", json={"name": name, "type": type}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["category"]


async def create_transaction(client, headers, account, category, amount=50, **extra) -> dict:
    payload = {
        "amount": amount,
        "type": "expense",
        "description": "Weekly shop",
        "category": category["_id"],
        "account": account["_id"],
        **extra,
    }
    response = await client.post("/api/transactions", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["transaction"]
