import abc
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.events.dtos import EventDTO
from src.events.repository.orm_models import Event


def event_to_dto(event: Event) -> EventDTO:
    return EventDTO(
        id=event.uuid,
        name=event.name,
        date=event.date,
        location=event.location,
        slug=event.slug,
        admin_id=event.admin_id,
        description=event.description,
        assigned_hotel_email=event.assigned_hotel_email,
        assigned_hotel_name=event.assigned_hotel_name,
    )


class EventReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_event(self, event_id: UUID) -> EventDTO | None:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_by_slug(self, slug: str) -> EventDTO | None:
        raise NotImplementedError

    @abc.abstractmethod
    async def list_for_admin(self, admin_id: UUID) -> list[EventDTO]:
        """Events owned by the admin, ordered by date."""
        raise NotImplementedError

    @abc.abstractmethod
    async def list_for_hotel(self, hotel_email: str) -> list[EventDTO]:
        """Events assigned to the hotel email, ordered by date."""
        raise NotImplementedError


class SqlEventReadModel(EventReadModel):
    """SQL implementation of event read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def _fetch_one(self, stmt) -> EventDTO | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(stmt)
            event = result.scalar_one_or_none()
            return event_to_dto(event) if event else None

    async def _fetch_all(self, stmt) -> list[EventDTO]:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(stmt)
            return [event_to_dto(event) for event in result.scalars().all()]

    async def get_event(self, event_id: UUID) -> EventDTO | None:
        return await self._fetch_one(select(Event).where(Event.uuid == event_id))

    async def get_by_slug(self, slug: str) -> EventDTO | None:
        return await self._fetch_one(select(Event).where(Event.slug == slug))

    async def list_for_admin(self, admin_id: UUID) -> list[EventDTO]:
        return await self._fetch_all(
            select(Event).where(Event.admin_id == admin_id).order_by(Event.date.asc())
        )

    async def list_for_hotel(self, hotel_email: str) -> list[EventDTO]:
        return await self._fetch_all(
            select(Event)
            .where(func.lower(Event.assigned_hotel_email) == hotel_email.strip().lower())
            .order_by(Event.date.asc())
        )
