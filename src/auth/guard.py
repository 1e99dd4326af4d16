"""Route guard.

Every protected route resolves its caller once per request through the
identity provider, then asks `authorize` whether the caller holds the
capability the route needs. `authorize` is a plain function returning an
`AuthorizationResult` so it can be reused outside of FastAPI (CLI, tests).
"""

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from src.auth.dtos import AuthorizationResult, Capability, Principal, Role
from src.auth.repository.identity import IdentityProvider, SqlIdentityProvider
from src.auth.urls import LOGIN_URL
from src.events.dtos import EventDTO

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=LOGIN_URL, auto_error=False)


def get_identity_provider() -> IdentityProvider:
    """Dependency to get identity provider instance."""
    return SqlIdentityProvider()


def _is_assigned_hotel(principal: Principal, event: EventDTO) -> bool:
    return (
        principal.role == Role.HOTEL
        and event.assigned_hotel_email is not None
        and event.assigned_hotel_email.strip().lower() == principal.email.strip().lower()
    )


def authorize(
    principal: Principal, capability: Capability, event: EventDTO | None = None
) -> AuthorizationResult:
    if capability == Capability.MANAGE_EVENTS:
        if principal.role != Role.ADMIN:
            return AuthorizationResult.deny("Only event organizers can manage events")
        return AuthorizationResult.allow()

    if capability == Capability.VIEW_ASSIGNED_EVENTS:
        if principal.role != Role.HOTEL:
            return AuthorizationResult.deny("Only hotel partners have assigned events")
        return AuthorizationResult.allow()

    if capability == Capability.MANAGE_GUESTS:
        if principal.role != Role.ADMIN:
            return AuthorizationResult.deny("Only event organizers can manage guests")
        if event is not None and event.admin_id != principal.user_id:
            return AuthorizationResult.deny("You do not organize this event")
        return AuthorizationResult.allow()

    if capability == Capability.VIEW_GUESTS:
        if event is None:
            return AuthorizationResult.deny("An event is required to view guests")
        if principal.role == Role.ADMIN and event.admin_id == principal.user_id:
            return AuthorizationResult.allow()
        if _is_assigned_hotel(principal, event):
            return AuthorizationResult.allow()
        return AuthorizationResult.deny("This event's guest list is not shared with you")

    return AuthorizationResult.deny(f"Unknown capability {capability}")


def raise_for_result(result: AuthorizationResult) -> None:
    if not result.allowed:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=result.reason)


class RouteGuard:
    """FastAPI dependency: resolves the session and checks a role-level capability.

    With `capability=None` only a valid session is required.
    """

    def __init__(self, capability: Capability | None = None) -> None:
        self.capability = capability

    async def __call__(
        self,
        token: str | None = Depends(oauth2_scheme),
        identity: IdentityProvider = Depends(get_identity_provider),
    ) -> Principal:
        if not token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not authenticated",
                headers={"WWW-Authenticate": "Bearer"},
            )

        principal = await identity.get_session(token)
        if principal is None:
            logger.info("Rejected request with invalid or expired session")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Session expired or invalid, please log in again",
                headers={"WWW-Authenticate": "Bearer"},
            )

        if self.capability is not None:
            raise_for_result(authorize(principal, self.capability))
        return principal


require_session = RouteGuard()
require_admin = RouteGuard(Capability.MANAGE_EVENTS)
require_hotel = RouteGuard(Capability.VIEW_ASSIGNED_EVENTS)
