from fastapi import APIRouter, Depends

from src.auth.dtos import Principal
from src.auth.guard import require_hotel
from src.events.access import get_event_read_model, view_event_guests
from src.events.dtos import EventDTO
from src.events.repository.read_models import EventReadModel
from src.events.schemas import EventDetailResponse, EventResponse
from src.events.urls import HOTEL_EVENT_URL, HOTEL_EVENTS_URL
from src.guests.dependencies import get_guest_read_model
from src.guests.repository.read_models import GuestReadModel

router = APIRouter()


@router.get(HOTEL_EVENTS_URL, response_model=list[EventResponse])
async def list_assigned_events(
    principal: Principal = Depends(require_hotel),
    read_model: EventReadModel = Depends(get_event_read_model),
) -> list[EventResponse]:
    """Events whose guest list has been shared with the caller's hotel email."""
    events = await read_model.list_for_hotel(principal.email)
    return [EventResponse.from_dto(event) for event in events]


@router.get(HOTEL_EVENT_URL, response_model=EventDetailResponse)
async def get_assigned_event(
    event: EventDTO = Depends(view_event_guests),
    guest_read_model: GuestReadModel = Depends(get_guest_read_model),
) -> EventDetailResponse:
    stats = await guest_read_model.get_stats(event.id)
    return EventDetailResponse.from_dtos(event, stats)
