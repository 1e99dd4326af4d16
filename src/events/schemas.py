from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from src.events.dtos import EventDTO, GuestStatsDTO


class EventResponse(BaseModel):
    id: UUID
    name: str
    date: datetime
    location: str
    description: str | None = None
    slug: str
    invite_link: str
    upcoming: bool
    assigned_hotel_email: str | None = None
    assigned_hotel_name: str | None = None

    @classmethod
    def from_dto(cls, event: EventDTO) -> "EventResponse":
        return cls(
            id=event.id,
            name=event.name,
            date=event.date,
            location=event.location,
            description=event.description,
            slug=event.slug,
            invite_link=event.invite_link,
            upcoming=event.is_upcoming,
            assigned_hotel_email=event.assigned_hotel_email,
            assigned_hotel_name=event.assigned_hotel_name,
        )


class GuestStatsResponse(BaseModel):
    total: int
    accepted: int
    declined: int
    pending: int


class EventDetailResponse(BaseModel):
    event: EventResponse
    stats: GuestStatsResponse

    @classmethod
    def from_dtos(cls, event: EventDTO, stats: GuestStatsDTO) -> "EventDetailResponse":
        return cls(
            event=EventResponse.from_dto(event),
            stats=GuestStatsResponse(
                total=stats.total,
                accepted=stats.accepted,
                declined=stats.declined,
                pending=stats.pending,
            ),
        )
