from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class UserAlreadyExistsError(Exception):
    """Raised when signing up with an email that already has an account."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"An account with email '{email}' already exists")


class InvalidCredentialsError(Exception):
    """Raised when an email/password pair does not match an active user."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class Role(str, Enum):
    ADMIN = "admin"
    HOTEL = "hotel"


class Capability(str, Enum):
    MANAGE_EVENTS = "manage_events"
    VIEW_ASSIGNED_EVENTS = "view_assigned_events"
    MANAGE_GUESTS = "manage_guests"
    VIEW_GUESTS = "view_guests"


@dataclass(frozen=True)
class UserDTO:
    """DTO for an identity-provider user."""

    id: UUID
    email: str
    role: Role
    is_active: bool = True


@dataclass(frozen=True)
class Principal:
    """The caller resolved from a session token."""

    user_id: UUID
    email: str
    role: Role


@dataclass(frozen=True)
class AuthorizationResult:
    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> "AuthorizationResult":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "AuthorizationResult":
        return cls(allowed=False, reason=reason)


@dataclass(frozen=True)
class AccessTokenDTO:
    access_token: str
    token_type: str = "bearer"
