import os

# Set dummy env vars for testing
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from familytree.database import Base, get_db
from familytree.main import app
# Import models to ensure they are registered with Base.metadata
from familytree.models.user import User
from familytree.models.tree import Tree, TreeAccess
from familytree.models.person import Person, Spouse
from familytree.models.event import Event
from familytree.models.note import Note

# Use in-memory SQLite for testing; one shared connection per test
SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite://"

OWNER = "owner@example.com"
FRIEND = "friend@example.com"
STRANGER = "stranger@example.com"

def as_user(email):
    return {"X-User-Email": email}

@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()

@pytest_asyncio.fixture
async def db_session(engine):
    TestingSessionLocal = sessionmaker(
        bind=engine, class_=AsyncSession, autoflush=False, expire_on_commit=False
    )
    async with TestingSessionLocal() as session:
        yield session

@pytest_asyncio.fixture
async def client(engine):
    TestingSessionLocal = sessionmaker(
        bind=engine, class_=AsyncSession, autoflush=False, expire_on_commit=False
    )

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

@pytest_asyncio.fixture
async def tree(client):
    """A private tree owned by OWNER."""
    response = await client.post(
        "/trees",
        json={"name": "Hale Family", "isPublic": False, "hideLiving": True},
        headers=as_user(OWNER),
    )
    assert response.status_code == 201
    return response.json()["data"]

async def add_person(client, tree_id, **fields):
    payload = {"firstName": "Someone", "gender": "UNKNOWN"}
    payload.update(fields)
    response = await client.post(f"/trees/{tree_id}/people", json=payload, headers=as_user(OWNER))
    assert response.status_code == 201, response.text
    return response.json()["data"]
