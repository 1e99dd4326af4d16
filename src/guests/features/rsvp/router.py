import logging
import secrets
import time
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from pydantic import BaseModel, Field, model_validator

from src.config.settings import settings
from src.events.access import event_by_slug
from src.events.dtos import EventDTO
from src.guests.dependencies import get_guest_read_model, get_guest_write_model
from src.guests.dtos import (
    GuestDTO,
    GuestNotFoundError,
    GuestStatus,
    NotTravellingDTO,
    RsvpSubmissionDTO,
    TravelSummaryDTO,
)
from src.guests.features.rsvp.flow import (
    DepartureSkipped,
    DepartureSubmitted,
    InvalidTransitionError,
    RsvpFlow,
    RsvpStep,
    RsvpSubmitted,
)
from src.guests.repository.read_models import GuestReadModel
from src.guests.repository.write_models import GuestWriteModel
from src.guests.schemas import AttendeeInput, DepartureSchema, TravelSchema
from src.guests.urls import (
    RSVP_DEPARTURE_URL,
    RSVP_DOCUMENTS_URL,
    RSVP_SEARCH_URL,
    RSVP_SUBMIT_URL,
)
from src.storage.object_store import ObjectStore, ObjectStoreError, get_object_store

logger = logging.getLogger(__name__)

router = APIRouter()


class RsvpGuestResponse(BaseModel):
    """Search result on the invite page. Contact details and documents stay private."""

    id: UUID
    name: str
    status: GuestStatus
    allowed_guests: int
    attending_count: int
    next_step: RsvpStep

    @classmethod
    def from_dto(cls, guest: GuestDTO) -> "RsvpGuestResponse":
        return cls(
            id=guest.id,
            name=guest.name,
            status=guest.status,
            allowed_guests=guest.allowed_guests,
            attending_count=guest.attending_count,
            next_step=RsvpFlow.for_guest(guest).step,
        )


class DocumentUploadResponse(BaseModel):
    url: str


class RsvpSubmit(BaseModel):
    status: GuestStatus
    attendees: list[AttendeeInput] = []
    message: str | None = Field(default=None, max_length=2000)
    travel: TravelSchema = TravelSchema()

    @model_validator(mode="after")
    def check_attendees(self) -> "RsvpSubmit":
        if self.status == GuestStatus.PENDING:
            raise ValueError("Please choose whether you will attend")
        if self.status != GuestStatus.ACCEPTED:
            return self
        if not self.attendees:
            raise ValueError("Please add at least one attending guest")
        for position, attendee in enumerate(self.attendees, start=1):
            name = attendee.name.strip()
            if not name or not attendee.id_front or not attendee.id_back:
                label = f"Guest {position} ({name})" if name else f"Guest {position}"
                raise ValueError(f"Please fill all details for {label} (Name and ID images)")
        return self


class RsvpResponse(BaseModel):
    status: GuestStatus
    attending_count: int
    next_step: RsvpStep


def document_path(
    event_id: UUID,
    guest_id: UUID,
    filename: str,
    now_ms: int | None = None,
    token: str | None = None,
) -> str:
    """Storage path for an uploaded ID image: `{event}/{guest}/{ms}-{random}.{ext}`."""
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    token = token or secrets.token_hex(4)
    return f"{event_id}/{guest_id}/{now_ms}-{token}.{extension}"


async def _get_guest_or_404(read_model: GuestReadModel, guest_id: UUID, event_id: UUID) -> GuestDTO:
    guest = await read_model.get_guest(guest_id, event_id=event_id)
    if guest is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Guest not found")
    return guest


@router.get(RSVP_SEARCH_URL, response_model=list[RsvpGuestResponse])
async def search_guests(
    name: str = Query("", description="Part of the guest's name"),
    event: EventDTO = Depends(event_by_slug),
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> list[RsvpGuestResponse]:
    """Find your invitation by name. A blank name returns nothing."""
    guests = await read_model.search_by_name(event.id, name)
    return [RsvpGuestResponse.from_dto(guest) for guest in guests]


@router.post(RSVP_DOCUMENTS_URL, response_model=DocumentUploadResponse, status_code=201)
async def upload_document(
    guest_id: UUID,
    file: UploadFile = File(...),
    event: EventDTO = Depends(event_by_slug),
    read_model: GuestReadModel = Depends(get_guest_read_model),
    object_store: ObjectStore = Depends(get_object_store),
) -> DocumentUploadResponse:
    """Upload one ID image (front or back) and get back the URL to submit with the RSVP."""
    guest = await _get_guest_or_404(read_model, guest_id, event.id)

    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Upload failed: only image files are accepted",
        )

    content = await file.read()
    if len(content) > settings.max_upload_size_mb * 1024 * 1024:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Upload failed: file is larger than {settings.max_upload_size_mb} MB",
        )

    path = document_path(event.id, guest.id, file.filename or "")
    try:
        url = await object_store.upload(path, content, content_type)
    except ObjectStoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    return DocumentUploadResponse(url=url)


@router.post(RSVP_SUBMIT_URL, response_model=RsvpResponse)
async def submit_rsvp(
    guest_id: UUID,
    payload: RsvpSubmit,
    event: EventDTO = Depends(event_by_slug),
    read_model: GuestReadModel = Depends(get_guest_read_model),
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> RsvpResponse:
    """
    Accept or decline the invitation.
    Accepting requires every attendee's name and both sides of their ID.
    """
    guest = await _get_guest_or_404(read_model, guest_id, event.id)

    flow = RsvpFlow.for_guest(guest)
    if flow.step == RsvpStep.DEPARTURE:
        # An accepted guest coming back to change their answer.
        flow = RsvpFlow(step=RsvpStep.FORM, guest_id=guest.id)
    next_flow = flow.apply(RsvpSubmitted(payload.status))

    try:
        updated = await write_model.submit_rsvp(
            event.id,
            guest.id,
            RsvpSubmissionDTO(
                status=payload.status,
                attendees=tuple(attendee.to_dto() for attendee in payload.attendees),
                message=payload.message,
                travel=TravelSummaryDTO(
                    arrival_location=payload.travel.arrival_location,
                    arrival_datetime=payload.travel.arrival_datetime,
                    departure_location=payload.travel.departure_location,
                    departure_datetime=payload.travel.departure_datetime,
                ),
            ),
        )
    except GuestNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return RsvpResponse(
        status=updated.status,
        attending_count=updated.attending_count,
        next_step=next_flow.step,
    )


@router.post(RSVP_DEPARTURE_URL, response_model=RsvpResponse)
async def submit_departure(
    guest_id: UUID,
    payload: DepartureSchema,
    event: EventDTO = Depends(event_by_slug),
    read_model: GuestReadModel = Depends(get_guest_read_model),
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> RsvpResponse:
    """Departure travel details, only once the guest has accepted."""
    guest = await _get_guest_or_404(read_model, guest_id, event.id)
    details = payload.to_dto()
    flow_event = DepartureSkipped() if isinstance(details, NotTravellingDTO) else DepartureSubmitted()

    try:
        next_flow = RsvpFlow.for_guest(guest).apply(flow_event)
    except InvalidTransitionError as e:
        logger.info("Departure details for guest %s refused: %s", guest.id, e)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Departure details can only be added after accepting the invitation",
        )

    try:
        updated = await write_model.submit_departure(event.id, guest.id, details)
    except GuestNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return RsvpResponse(
        status=updated.status,
        attending_count=updated.attending_count,
        next_step=next_flow.step,
    )
