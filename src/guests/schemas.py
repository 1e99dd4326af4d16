import datetime as dt
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.guests.dtos import (
    AttendeeDTO,
    DepartureDetailsDTO,
    GuestDTO,
    GuestStatus,
    GuestType,
    IdDocumentType,
    NotTravellingDTO,
    PlannedDepartureDTO,
    TravelMode,
    TravellerDepartureDTO,
    departure_to_dict,
)
from src.storage.object_store import is_public_object_url


class AttendeeSchema(BaseModel):
    name: str = Field(max_length=255)
    age: int | None = Field(default=None, ge=0, le=150)
    guest_type: GuestType = GuestType.ADULT
    id_type: IdDocumentType = IdDocumentType.AADHAR_CARD
    id_front: str | None = None
    id_back: str | None = None

    def to_dto(self) -> AttendeeDTO:
        return AttendeeDTO(
            name=self.name.strip(),
            age=self.age,
            guest_type=self.guest_type,
            id_type=self.id_type,
            id_front=self.id_front or None,
            id_back=self.id_back or None,
        )

    @classmethod
    def from_dto(cls, attendee: AttendeeDTO) -> "AttendeeSchema":
        return cls(
            name=attendee.name,
            age=attendee.age,
            guest_type=attendee.guest_type,
            id_type=attendee.id_type,
            id_front=attendee.id_front,
            id_back=attendee.id_back,
        )


class AttendeeInput(AttendeeSchema):
    """An attendee as submitted. ID images must be objects uploaded to our store."""

    @field_validator("id_front", "id_back")
    @classmethod
    def check_document_url(cls, value: str | None) -> str | None:
        if not value or not value.strip():
            return None
        value = value.strip()
        if not is_public_object_url(value):
            raise ValueError("ID images must be uploaded through the document upload")
        return value


class TravellerSchema(BaseModel):
    name: str = Field(min_length=1)
    mode: TravelMode
    station: str | None = None
    ticket_reference: str | None = None


class NotTravellingSchema(BaseModel):
    applicable: Literal[False]
    message: str | None = None

    def to_dto(self) -> NotTravellingDTO:
        return NotTravellingDTO(message=self.message)


class PlannedDepartureSchema(BaseModel):
    applicable: Literal[True]
    date: dt.date
    time: dt.time | None = None
    travellers: list[TravellerSchema] = Field(min_length=1)
    message: str | None = None

    def to_dto(self) -> PlannedDepartureDTO:
        return PlannedDepartureDTO(
            date=self.date,
            time=self.time,
            travellers=tuple(
                TravellerDepartureDTO(
                    name=t.name.strip(),
                    mode=t.mode,
                    station=t.station,
                    ticket_reference=t.ticket_reference,
                )
                for t in self.travellers
            ),
            message=self.message,
        )


DepartureSchema = NotTravellingSchema | PlannedDepartureSchema


class TravelSchema(BaseModel):
    arrival_location: str | None = None
    arrival_datetime: dt.datetime | None = None
    departure_location: str | None = None
    departure_datetime: dt.datetime | None = None


class GuestResponse(BaseModel):
    id: UUID
    event_id: UUID
    name: str
    email: str | None = None
    phone: str | None = None
    allowed_guests: int
    status: GuestStatus
    attending_count: int
    message: str | None = None
    travel: TravelSchema
    departure_details: dict[str, Any] | None = None
    attendees: list[AttendeeSchema] = []
    docs_uploaded: int = 0

    @classmethod
    def from_dto(cls, guest: GuestDTO) -> "GuestResponse":
        details: DepartureDetailsDTO | None = guest.departure_details
        return cls(
            id=guest.id,
            event_id=guest.event_id,
            name=guest.name,
            email=guest.email,
            phone=guest.phone,
            allowed_guests=guest.allowed_guests,
            status=guest.status,
            attending_count=guest.attending_count,
            message=guest.message,
            travel=TravelSchema(
                arrival_location=guest.travel.arrival_location,
                arrival_datetime=guest.travel.arrival_datetime,
                departure_location=guest.travel.departure_location,
                departure_datetime=guest.travel.departure_datetime,
            ),
            departure_details=departure_to_dict(details) if details else None,
            attendees=[AttendeeSchema.from_dto(a) for a in guest.attendees],
            docs_uploaded=guest.docs_uploaded,
        )
