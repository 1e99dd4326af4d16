"""Event write models. They return DTOs, never ORM models."""

import logging
from abc import ABC, abstractmethod
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.events.dtos import EventDTO, EventNotFoundError, NewEventDTO, SlugTakenError
from src.events.repository.orm_models import Event
from src.events.repository.read_models import event_to_dto
from src.guests.repository.orm_models import Guest

logger = logging.getLogger(__name__)


class EventWriteModel(ABC):
    @abstractmethod
    async def create_event(self, admin_id: UUID, event: NewEventDTO) -> EventDTO:
        raise NotImplementedError

    @abstractmethod
    async def assign_hotel(
        self, event_id: UUID, hotel_email: str | None, hotel_name: str | None
    ) -> EventDTO:
        """Assign (or with None, revoke) the hotel partner of an event."""
        raise NotImplementedError

    @abstractmethod
    async def delete_event(self, event_id: UUID) -> None:
        """Delete an event together with its guest list."""
        raise NotImplementedError


class SqlEventWriteModel(EventWriteModel):
    """SQL implementation of event write operations."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def _get_event(self, session, event_id: UUID) -> Event:
        event = await session.get(Event, event_id)
        if event is None:
            raise EventNotFoundError(str(event_id))
        return event

    async def create_event(self, admin_id: UUID, event: NewEventDTO) -> EventDTO:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            existing = await session.execute(select(Event.uuid).where(Event.slug == event.slug))
            if existing.scalar_one_or_none() is not None:
                raise SlugTakenError(event.slug)

            row = Event(
                name=event.name,
                date=event.date,
                location=event.location,
                description=event.description,
                slug=event.slug,
                admin_id=admin_id,
            )
            session.add(row)
            await session.flush()
            logger.info("Created event %s (%s)", row.slug, row.uuid)
            return event_to_dto(row)

    async def assign_hotel(
        self, event_id: UUID, hotel_email: str | None, hotel_name: str | None
    ) -> EventDTO:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            event = await self._get_event(session, event_id)
            event.assigned_hotel_email = hotel_email.strip().lower() if hotel_email else None
            event.assigned_hotel_name = hotel_name if hotel_email else None
            await session.flush()
            logger.info(
                "Hotel access for event %s set to %s", event_id, event.assigned_hotel_email
            )
            return event_to_dto(event)

    async def delete_event(self, event_id: UUID) -> None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            event = await self._get_event(session, event_id)
            # SQLite does not enforce ON DELETE CASCADE unless asked to
            await session.execute(delete(Guest).where(Guest.event_id == event_id))
            await session.delete(event)
            await session.flush()
        logger.info("Deleted event %s", event_id)
