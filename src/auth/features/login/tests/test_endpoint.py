import pytest

from src.auth.dtos import Role
from src.auth.urls import LOGIN_URL, ME_URL
from src.tests.inmemory_models import InMemoryApp, auth_headers


@pytest.fixture
def fakes():
    fakes = InMemoryApp()
    fakes.identity.add_user("unused", Role.ADMIN, email="organizer@example.com", password="secret123")
    return fakes


async def test_login_then_me(client_factory, fakes):
    async with client_factory(fakes.overrides()) as client:
        response = await client.post(
            LOGIN_URL, json={"email": "organizer@example.com", "password": "secret123"}
        )
        token = response.json()["access_token"]
        me = await client.get(ME_URL, headers=auth_headers(token))

    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"
    assert me.json()["email"] == "organizer@example.com"


async def test_wrong_password(client_factory, fakes):
    async with client_factory(fakes.overrides()) as client:
        response = await client.post(
            LOGIN_URL, json={"email": "organizer@example.com", "password": "nope"}
        )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


async def test_unknown_user(client_factory, fakes):
    async with client_factory(fakes.overrides()) as client:
        response = await client.post(
            LOGIN_URL, json={"email": "nobody@example.com", "password": "secret123"}
        )

    assert response.status_code == 401
