import pytest

from recipe_api.routes.auth_route import get_password_hash, verify_password


def test_password_hash_round_trip():
    hashed = get_password_hash("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


async def _register(client, **overrides):
    payload = {"email": "carol@example.com", "username": " carol ", "password": "s3cret-pass"}
    payload.update(overrides)
    return await client.post("/users/register", json=payload)


@pytest.mark.asyncio
async def test_register_stores_hash_and_hides_it(client, db):
    response = await _register(client)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["email"] == "carol@example.com"
    assert data["username"] == "carol"
    assert "password" not in data

    stored = await db["users"].find_one({"email": "carol@example.com"})
    assert stored["password"] != "s3cret-pass"


@pytest.mark.asyncio
async def test_register_same_email_conflicts(client):
    await _register(client)

    response = await _register(client, email="CAROL@example.com", username="other")

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_register_validates_fields(client):
    response = await _register(client, email="not-an-email", password="short")

    assert response.status_code == 400
    assert {v["field"] for v in response.json()["data"]} == {"email", "password"}


@pytest.mark.asyncio
async def test_login_token_unlocks_protected_routes(client):
    await _register(client)

    login = await client.post(
        "/users/login", json={"email": "carol@example.com", "password": "s3cret-pass"}
    )
    assert login.status_code == 200
    token = login.json()["data"]["token"]

    me = await client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["username"] == "carol"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "email,password",
    [("carol@example.com", "wrong-pass"), ("nobody@example.com", "s3cret-pass")],
)
async def test_bad_credentials_share_one_message(client, email, password):
    await _register(client)

    response = await client.post("/users/login", json={"email": email, "password": password})

    assert response.status_code == 401
    assert response.json() == {"status": "error", "message": "Invalid credentials"}
