"""
Shared fixtures.

Every test gets a fresh in-memory Motor database (mongomock-motor), an app
built around it, and an httpx AsyncClient talking to that app through
ASGITransport, so no MongoDB server is needed.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from recipe_api.auth.jwt_handler import create_token
from recipe_api.config import Settings
from recipe_api.database.mongo import ensure_indexes
from recipe_api.main import create_app


@pytest.fixture
def settings():
    return Settings(jwt_secret="test-secret", mongo_db="recipe_api_test", log_level="WARNING")


@pytest_asyncio.fixture
async def db():
    database = AsyncMongoMockClient()["recipe_api_test"]
    await ensure_indexes(database)
    return database


@pytest_asyncio.fixture
async def client(settings, db):
    app = create_app(settings, database=db)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def make_user(db, settings):
    """Insert a user straight into the store and sign a token for it."""

    async def _make(email: str, username: str) -> dict:
        result = await db["users"].insert_one(
            {"email": email, "username": username, "password": "not-a-real-hash"}
        )
        token = create_token(str(result.inserted_id), settings)
        return {
            "_id": result.inserted_id,
            "id": str(result.inserted_id),
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _make


@pytest_asyncio.fixture
async def alice(make_user):
    return await make_user("alice@example.com", "alice")


@pytest_asyncio.fixture
async def bob(make_user):
    return await make_user("bob@example.com", "bob")


@pytest.fixture
def recipe_payload():
    def _payload(**overrides) -> dict:
        payload = {
            "title": "Pepper Steak",
            "description": "A quick weeknight steak.",
            "ingredients": [
                {"name": "Beef", "quantity": "500g"},
                {"name": "Black pepper", "quantity": "1 tbsp"},
                {"name": "Sea salt", "quantity": "1 tsp"},
            ],
            "instructions": [
                {"stepNumber": 1, "description": "Season the beef"},
                {"stepNumber": 2, "description": "Sear on high heat"},
            ],
            "prepTimeInMinutes": 10,
            "cookTimeInMinutes": 15,
            "numberOfServings": 2,
            "category": "dinner",
            "cuisine": "french",
            "difficulty": "easy",
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def create_recipe(client, recipe_payload):
    async def _create(owner: dict, **overrides) -> dict:
        response = await client.post(
            "/recipes", json=recipe_payload(**overrides), headers=owner["headers"]
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create
