import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr, Field, field_validator

from src.auth.dtos import Principal
from src.auth.guard import get_identity_provider, require_admin, require_session
from src.auth.repository.identity import IdentityProvider
from src.events.access import get_event_read_model, manage_event_guests
from src.events.dtos import EventDTO, EventNotFoundError, NewEventDTO, SlugTakenError
from src.events.repository.read_models import EventReadModel
from src.events.repository.write_models import EventWriteModel, SqlEventWriteModel
from src.events.schemas import EventDetailResponse, EventResponse
from src.events.slugs import slugify
from src.events.urls import DELETE_EVENT_URL, EVENT_HOTEL_URL, EVENT_URL, EVENTS_URL
from src.guests.dependencies import get_guest_read_model
from src.guests.repository.read_models import GuestReadModel

logger = logging.getLogger(__name__)

router = APIRouter()


class EventCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    date: datetime
    location: str = Field(min_length=1, max_length=500)
    description: str | None = None
    slug: str | None = Field(default=None, max_length=255)

    @field_validator("slug")
    @classmethod
    def normalise_slug(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return slugify(value) or None


class HotelAssignment(BaseModel):
    email: EmailStr
    name: str | None = None


class DeleteEventRequest(BaseModel):
    password: str = Field(min_length=1)


def get_event_write_model() -> EventWriteModel:
    """Dependency to get event write model instance."""
    return SqlEventWriteModel()


@router.post(EVENTS_URL, response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: EventCreate,
    principal: Principal = Depends(require_admin),
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> EventResponse:
    """
    Create an event. Without an explicit slug, the invite link is derived from the name.
    """
    slug = payload.slug or slugify(payload.name)
    if not slug:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Error creating event: the name does not produce a usable invite link, "
            "please provide a slug",
        )

    try:
        event = await write_model.create_event(
            admin_id=principal.user_id,
            event=NewEventDTO(
                name=payload.name.strip(),
                date=payload.date,
                location=payload.location.strip(),
                description=payload.description,
                slug=slug,
            ),
        )
    except SlugTakenError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=f"Error creating event: {e}"
        )
    return EventResponse.from_dto(event)


@router.get(EVENTS_URL, response_model=list[EventResponse])
async def list_events(
    principal: Principal = Depends(require_admin),
    read_model: EventReadModel = Depends(get_event_read_model),
) -> list[EventResponse]:
    """List the caller's events ordered by date."""
    events = await read_model.list_for_admin(principal.user_id)
    return [EventResponse.from_dto(event) for event in events]


@router.get(EVENT_URL, response_model=EventDetailResponse)
async def get_event(
    event: EventDTO = Depends(manage_event_guests),
    guest_read_model: GuestReadModel = Depends(get_guest_read_model),
) -> EventDetailResponse:
    """Event details with RSVP counts."""
    stats = await guest_read_model.get_stats(event.id)
    return EventDetailResponse.from_dtos(event, stats)


@router.put(EVENT_HOTEL_URL, response_model=EventResponse)
async def assign_hotel(
    payload: HotelAssignment,
    event: EventDTO = Depends(manage_event_guests),
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> EventResponse:
    """Give a hotel partner read-only access to the guest list."""
    try:
        updated = await write_model.assign_hotel(event.id, payload.email, payload.name)
    except EventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return EventResponse.from_dto(updated)


@router.delete(EVENT_HOTEL_URL, response_model=EventResponse)
async def revoke_hotel(
    event: EventDTO = Depends(manage_event_guests),
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> EventResponse:
    try:
        updated = await write_model.assign_hotel(event.id, None, None)
    except EventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return EventResponse.from_dto(updated)


@router.post(DELETE_EVENT_URL, status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    payload: DeleteEventRequest,
    event: EventDTO = Depends(manage_event_guests),
    principal: Principal = Depends(require_session),
    identity: IdentityProvider = Depends(get_identity_provider),
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> None:
    """
    Permanently delete an event and its guest list.
    The organizer must re-enter their password to confirm.
    """
    if not await identity.verify_password(principal.user_id, payload.password):
        logger.warning("Event deletion for %s refused: password mismatch", event.id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Incorrect password. Please try again.",
        )

    try:
        await write_model.delete_event(event.id)
    except EventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
