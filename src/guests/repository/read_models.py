import abc
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.events.dtos import GuestStatsDTO
from src.guests.dtos import (
    AttendeeDTO,
    GuestDTO,
    GuestStatus,
    TravelSummaryDTO,
    departure_from_dict,
)
from src.guests.repository.orm_models import Guest


def guest_to_dto(guest: Guest) -> GuestDTO:
    """Map a Guest row to its DTO. Stored blobs are re-validated on the way out."""
    return GuestDTO(
        id=guest.uuid,
        event_id=guest.event_id,
        name=guest.name,
        email=guest.email,
        phone=guest.phone,
        allowed_guests=guest.allowed_guests,
        status=GuestStatus(guest.status),
        attending_count=guest.attending_count,
        message=guest.message,
        travel=TravelSummaryDTO(
            arrival_location=guest.arrival_location,
            arrival_datetime=guest.arrival_datetime,
            departure_location=guest.departure_location,
            departure_datetime=guest.departure_datetime,
        ),
        departure_details=departure_from_dict(guest.departure_details),
        attendees=tuple(AttendeeDTO.from_dict(a) for a in guest.attendees or []),
    )


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class GuestReadModel(abc.ABC):
    @abc.abstractmethod
    async def list_for_event(self, event_id: UUID, query: str | None = None) -> list[GuestDTO]:
        """
        List an event's guests ordered by name.
        `query` matches name or email case-insensitively.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def get_guest(self, guest_id: UUID, event_id: UUID | None = None) -> GuestDTO | None:
        raise NotImplementedError

    @abc.abstractmethod
    async def search_by_name(self, event_id: UUID, name: str) -> list[GuestDTO]:
        """Public invite-link search: name contains `name`, case-insensitive."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_stats(self, event_id: UUID) -> GuestStatsDTO:
        raise NotImplementedError


class SqlGuestReadModel(GuestReadModel):
    """SQL implementation of guest read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def list_for_event(self, event_id: UUID, query: str | None = None) -> list[GuestDTO]:
        stmt = select(Guest).where(Guest.event_id == event_id)
        if query and query.strip():
            pattern = f"%{_escape_like(query.strip())}%"
            stmt = stmt.where(
                or_(
                    Guest.name.ilike(pattern, escape="\\"),
                    Guest.email.ilike(pattern, escape="\\"),
                )
            )
        stmt = stmt.order_by(Guest.name.asc())

        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(stmt)
            return [guest_to_dto(guest) for guest in result.scalars().all()]

    async def get_guest(self, guest_id: UUID, event_id: UUID | None = None) -> GuestDTO | None:
        stmt = select(Guest).where(Guest.uuid == guest_id)
        if event_id is not None:
            stmt = stmt.where(Guest.event_id == event_id)

        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(stmt)
            guest = result.scalar_one_or_none()
            return guest_to_dto(guest) if guest else None

    async def search_by_name(self, event_id: UUID, name: str) -> list[GuestDTO]:
        if not name.strip():
            return []
        pattern = f"%{_escape_like(name.strip())}%"
        stmt = (
            select(Guest)
            .where(Guest.event_id == event_id)
            .where(Guest.name.ilike(pattern, escape="\\"))
            .order_by(Guest.name.asc())
        )

        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(stmt)
            return [guest_to_dto(guest) for guest in result.scalars().all()]

    async def get_stats(self, event_id: UUID) -> GuestStatsDTO:
        stmt = (
            select(Guest.status, func.count(Guest.uuid))
            .where(Guest.event_id == event_id)
            .group_by(Guest.status)
        )

        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(stmt)
            counts = {GuestStatus(status): count for status, count in result.all()}

        return GuestStatsDTO(
            total=sum(counts.values()),
            accepted=counts.get(GuestStatus.ACCEPTED, 0),
            declined=counts.get(GuestStatus.DECLINED, 0),
            pending=counts.get(GuestStatus.PENDING, 0),
        )
