from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.events.access import event_by_slug
from src.events.dtos import EventDTO
from src.events.urls import PUBLIC_EVENT_URL

router = APIRouter()


class PublicEventResponse(BaseModel):
    """What an invite link shows before the guest finds their name."""

    name: str
    date: datetime
    location: str
    description: str | None = None
    slug: str


@router.get(PUBLIC_EVENT_URL, response_model=PublicEventResponse)
async def get_public_event(event: EventDTO = Depends(event_by_slug)) -> PublicEventResponse:
    return PublicEventResponse(
        name=event.name,
        date=event.date,
        location=event.location,
        description=event.description,
        slug=event.slug,
    )
