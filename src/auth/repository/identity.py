"""Identity provider: the only place that knows how users and sessions are stored."""

import logging
from abc import ABC, abstractmethod
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.dtos import (
    AccessTokenDTO,
    InvalidCredentialsError,
    Principal,
    Role,
    UserAlreadyExistsError,
    UserDTO,
)
from src.auth.repository.orm_models import User
from src.auth.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from src.config.database import async_session_manager

logger = logging.getLogger(__name__)


class IdentityProvider(ABC):
    @abstractmethod
    async def sign_up(self, email: str, password: str, role: Role) -> UserDTO:
        raise NotImplementedError

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AccessTokenDTO:
        """Exchange credentials for a session token."""
        raise NotImplementedError

    @abstractmethod
    async def get_session(self, token: str) -> Principal | None:
        """Resolve a session token to an active principal."""
        raise NotImplementedError

    @abstractmethod
    async def verify_password(self, user_id: UUID, password: str) -> bool:
        """Re-authenticate an already signed-in user."""
        raise NotImplementedError


def _to_dto(user: User) -> UserDTO:
    return UserDTO(id=user.uuid, email=user.email, role=Role(user.role), is_active=user.is_active)


class SqlIdentityProvider(IdentityProvider):
    """SQL implementation backed by the users table and signed JWT sessions."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def _get_by_email(self, session, email: str) -> User | None:
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def sign_up(self, email: str, password: str, role: Role) -> UserDTO:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            if await self._get_by_email(session, email) is not None:
                raise UserAlreadyExistsError(email)

            user = User(
                email=email.strip().lower(),
                hashed_password=hash_password(password),
                role=role,
                is_active=True,
            )
            session.add(user)
            await session.flush()
            logger.info("Created %s account %s", role.value, user.email)
            return _to_dto(user)

    async def sign_in(self, email: str, password: str) -> AccessTokenDTO:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            user = await self._get_by_email(session, email)
            if user is None or not user.is_active or not verify_password(
                password, user.hashed_password
            ):
                logger.warning("Failed sign-in for %s", email)
                raise InvalidCredentialsError()

            principal = Principal(user_id=user.uuid, email=user.email, role=Role(user.role))
            return AccessTokenDTO(access_token=create_access_token(principal))

    async def get_session(self, token: str) -> Principal | None:
        claimed = decode_access_token(token)
        if claimed is None:
            return None

        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            user = await session.get(User, claimed.user_id)
            if user is None or not user.is_active:
                return None
            return Principal(user_id=user.uuid, email=user.email, role=Role(user.role))

    async def verify_password(self, user_id: UUID, password: str) -> bool:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            user = await session.get(User, user_id)
            if user is None:
                return False
            return verify_password(password, user.hashed_password)
