import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, EmailStr, Field

from src.events.access import manage_event_guests, view_event_guests
from src.events.dtos import EventDTO
from src.guests.dependencies import get_guest_read_model, get_guest_write_model
from src.guests.dtos import GuestNotFoundError, GuestStoreError, NewGuestDTO
from src.guests.repository.read_models import GuestReadModel
from src.guests.repository.write_models import GuestWriteModel
from src.guests.schemas import AttendeeInput, GuestResponse
from src.guests.urls import (
    GUEST_ATTENDEES_URL,
    GUEST_URL,
    GUESTS_URL,
    HOTEL_GUEST_URL,
    HOTEL_GUESTS_URL,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class GuestCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    allowed_guests: int = Field(default=1, ge=0)


class AttendeesUpdate(BaseModel):
    attendees: list[AttendeeInput]


async def _get_guest_or_404(read_model: GuestReadModel, guest_id: UUID, event_id: UUID):
    guest = await read_model.get_guest(guest_id, event_id=event_id)
    if guest is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Guest not found")
    return guest


@router.get(GUESTS_URL, response_model=list[GuestResponse])
async def list_guests(
    q: str | None = Query(None, description="Filter by name or email"),
    event: EventDTO = Depends(manage_event_guests),
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> list[GuestResponse]:
    guests = await read_model.list_for_event(event.id, query=q)
    return [GuestResponse.from_dto(guest) for guest in guests]


@router.get(HOTEL_GUESTS_URL, response_model=list[GuestResponse])
async def list_guests_for_hotel(
    q: str | None = Query(None, description="Filter by name or email"),
    event: EventDTO = Depends(view_event_guests),
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> list[GuestResponse]:
    """Read-only guest list for the hotel assigned to the event."""
    guests = await read_model.list_for_event(event.id, query=q)
    return [GuestResponse.from_dto(guest) for guest in guests]


@router.post(GUESTS_URL, response_model=GuestResponse, status_code=status.HTTP_201_CREATED)
async def add_guest(
    payload: GuestCreate,
    event: EventDTO = Depends(manage_event_guests),
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> GuestResponse:
    name = payload.name.strip()
    if not name:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Guest name is required"
        )
    try:
        guest = await write_model.add_guest(
            NewGuestDTO(
                event_id=event.id,
                name=name,
                email=payload.email,
                phone=(payload.phone or "").strip() or None,
                allowed_guests=payload.allowed_guests,
            )
        )
    except GuestStoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    logger.info("Added guest %s to event %s", guest.id, event.id)
    return GuestResponse.from_dto(guest)


@router.get(GUEST_URL, response_model=GuestResponse)
async def get_guest(
    guest_id: UUID,
    event: EventDTO = Depends(manage_event_guests),
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> GuestResponse:
    """A single guest with attendee and departure details."""
    guest = await _get_guest_or_404(read_model, guest_id, event.id)
    return GuestResponse.from_dto(guest)


@router.get(HOTEL_GUEST_URL, response_model=GuestResponse)
async def get_guest_for_hotel(
    guest_id: UUID,
    event: EventDTO = Depends(view_event_guests),
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> GuestResponse:
    guest = await _get_guest_or_404(read_model, guest_id, event.id)
    return GuestResponse.from_dto(guest)


@router.delete(GUEST_URL, status_code=status.HTTP_204_NO_CONTENT)
async def delete_guest(
    guest_id: UUID,
    event: EventDTO = Depends(manage_event_guests),
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> None:
    try:
        await write_model.delete_guest(event.id, guest_id)
    except GuestNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.put(GUEST_ATTENDEES_URL, response_model=GuestResponse)
async def update_attendees(
    guest_id: UUID,
    payload: AttendeesUpdate,
    event: EventDTO = Depends(manage_event_guests),
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> GuestResponse:
    """
    Replace a guest's attendee records.
    For accepted guests the attending count follows the number of attendees.
    """
    try:
        guest = await write_model.update_attendees(
            event.id, guest_id, [attendee.to_dto() for attendee in payload.attendees]
        )
    except GuestNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return GuestResponse.from_dto(guest)
