from uuid import UUID

from fastapi import Depends, HTTPException, status

from src.auth.dtos import Capability, Principal
from src.auth.guard import authorize, raise_for_result, require_session
from src.events.dtos import EventDTO
from src.events.repository.read_models import EventReadModel, SqlEventReadModel


def get_event_read_model() -> EventReadModel:
    """Dependency to get event read model instance."""
    return SqlEventReadModel()


class EventAccess:
    """Dependency resolving `event_id` from the path and checking the caller may use it."""

    def __init__(self, capability: Capability) -> None:
        self.capability = capability

    async def __call__(
        self,
        event_id: UUID,
        principal: Principal = Depends(require_session),
        read_model: EventReadModel = Depends(get_event_read_model),
    ) -> EventDTO:
        event = await read_model.get_event(event_id)
        if event is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
        raise_for_result(authorize(principal, self.capability, event))
        return event


manage_event_guests = EventAccess(Capability.MANAGE_GUESTS)
view_event_guests = EventAccess(Capability.VIEW_GUESTS)


async def event_by_slug(
    slug: str,
    read_model: EventReadModel = Depends(get_event_read_model),
) -> EventDTO:
    """Resolve the public invite link; no session required."""
    event = await read_model.get_by_slug(slug)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return event
