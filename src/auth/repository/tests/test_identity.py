"""Tests for SqlIdentityProvider."""

import pytest
from sqlalchemy import select

from src.auth.dtos import InvalidCredentialsError, Role, UserAlreadyExistsError
from src.auth.repository.identity import SqlIdentityProvider
from src.auth.repository.orm_models import User


@pytest.fixture
def identity(db_session):
    return SqlIdentityProvider(session_overwrite=db_session)


async def test_sign_up_stores_a_hashed_password(db_session, identity):
    user = await identity.sign_up(" Organizer@Example.com ", "secret123", Role.ADMIN)

    assert user.email == "organizer@example.com"
    row = (await db_session.execute(select(User).where(User.uuid == user.id))).scalar_one()
    assert row.hashed_password != "secret123"


async def test_sign_up_twice(identity):
    await identity.sign_up("organizer@example.com", "secret123", Role.ADMIN)

    with pytest.raises(UserAlreadyExistsError):
        await identity.sign_up("ORGANIZER@example.com", "other-pass", Role.HOTEL)


async def test_sign_in_and_resolve_session(identity):
    user = await identity.sign_up("desk@hotel.example", "secret123", Role.HOTEL)

    token = await identity.sign_in("Desk@Hotel.example", "secret123")
    principal = await identity.get_session(token.access_token)

    assert principal.user_id == user.id
    assert principal.role == Role.HOTEL


async def test_sign_in_with_wrong_password(identity):
    await identity.sign_up("organizer@example.com", "secret123", Role.ADMIN)

    with pytest.raises(InvalidCredentialsError):
        await identity.sign_in("organizer@example.com", "wrong")


async def test_inactive_users_lose_their_session(db_session, identity):
    user = await identity.sign_up("organizer@example.com", "secret123", Role.ADMIN)
    token = await identity.sign_in("organizer@example.com", "secret123")

    row = await db_session.get(User, user.id)
    row.is_active = False
    await db_session.flush()

    assert await identity.get_session(token.access_token) is None
    with pytest.raises(InvalidCredentialsError):
        await identity.sign_in("organizer@example.com", "secret123")


async def test_verify_password(identity):
    user = await identity.sign_up("organizer@example.com", "secret123", Role.ADMIN)

    assert await identity.verify_password(user.id, "secret123")
    assert not await identity.verify_password(user.id, "wrong")
