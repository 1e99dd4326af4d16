"""Guest write models. They return DTOs, never ORM models."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.guests.dtos import (
    AttendeeDTO,
    DepartureDetailsDTO,
    GuestDTO,
    GuestNotFoundError,
    GuestStatus,
    GuestStoreError,
    NewGuestDTO,
    RsvpSubmissionDTO,
    departure_to_dict,
)
from src.guests.repository.orm_models import Guest
from src.guests.repository.read_models import guest_to_dto

logger = logging.getLogger(__name__)


def attending_fields(
    status: GuestStatus, attendees: Sequence[AttendeeDTO]
) -> tuple[list[dict], int]:
    """Attendee records and attending count to persist for a given status.

    Declined guests keep no attendee records and an attending count of 0.
    Accepted guests count exactly their attendee records.
    """
    if status == GuestStatus.DECLINED:
        return [], 0
    records = [attendee.to_dict() for attendee in attendees]
    if status == GuestStatus.ACCEPTED:
        return records, len(records)
    return records, 0


class GuestWriteModel(ABC):
    @abstractmethod
    async def bulk_insert(self, guests: Sequence[NewGuestDTO]) -> int:
        """Insert all guests in one transaction. Either all persist or none do."""
        raise NotImplementedError

    @abstractmethod
    async def add_guest(self, guest: NewGuestDTO) -> GuestDTO:
        raise NotImplementedError

    @abstractmethod
    async def delete_guest(self, event_id: UUID, guest_id: UUID) -> None:
        raise NotImplementedError

    @abstractmethod
    async def update_attendees(
        self, event_id: UUID, guest_id: UUID, attendees: Sequence[AttendeeDTO]
    ) -> GuestDTO:
        raise NotImplementedError

    @abstractmethod
    async def submit_rsvp(
        self, event_id: UUID, guest_id: UUID, submission: RsvpSubmissionDTO
    ) -> GuestDTO:
        raise NotImplementedError

    @abstractmethod
    async def submit_departure(
        self, event_id: UUID, guest_id: UUID, details: DepartureDetailsDTO
    ) -> GuestDTO:
        raise NotImplementedError


class SqlGuestWriteModel(GuestWriteModel):
    """SQL implementation of guest write operations."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def _get_guest(self, session, event_id: UUID, guest_id: UUID) -> Guest:
        stmt = select(Guest).where(Guest.uuid == guest_id).where(Guest.event_id == event_id)
        result = await session.execute(stmt)
        guest = result.scalar_one_or_none()
        if guest is None:
            raise GuestNotFoundError(guest_id)
        return guest

    async def bulk_insert(self, guests: Sequence[NewGuestDTO]) -> int:
        try:
            async with async_session_manager(
                session_overwrite=self._session_overwrite
            ) as session:
                session.add_all(
                    [
                        Guest(
                            event_id=guest.event_id,
                            name=guest.name,
                            email=guest.email,
                            phone=guest.phone,
                            allowed_guests=guest.allowed_guests,
                            status=guest.status,
                            attending_count=0,
                            attendees=[],
                        )
                        for guest in guests
                    ]
                )
                await session.flush()
        except SQLAlchemyError as e:
            logger.error("Bulk guest insert failed: %s", e)
            raise GuestStoreError("importing guests", str(e.__cause__ or e)) from e

        return len(guests)

    async def add_guest(self, guest: NewGuestDTO) -> GuestDTO:
        try:
            async with async_session_manager(
                session_overwrite=self._session_overwrite
            ) as session:
                row = Guest(
                    event_id=guest.event_id,
                    name=guest.name,
                    email=guest.email,
                    phone=guest.phone,
                    allowed_guests=guest.allowed_guests,
                    status=guest.status,
                    attending_count=0,
                    attendees=[],
                )
                session.add(row)
                await session.flush()
                return guest_to_dto(row)
        except SQLAlchemyError as e:
            raise GuestStoreError("adding guest", str(e.__cause__ or e)) from e

    async def delete_guest(self, event_id: UUID, guest_id: UUID) -> None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            guest = await self._get_guest(session, event_id, guest_id)
            await session.delete(guest)
            await session.flush()
        logger.info("Deleted guest %s from event %s", guest_id, event_id)

    async def update_attendees(
        self, event_id: UUID, guest_id: UUID, attendees: Sequence[AttendeeDTO]
    ) -> GuestDTO:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            guest = await self._get_guest(session, event_id, guest_id)
            records, attending_count = attending_fields(GuestStatus(guest.status), attendees)
            guest.attendees = records
            guest.attending_count = attending_count
            await session.flush()
            return guest_to_dto(guest)

    async def submit_rsvp(
        self, event_id: UUID, guest_id: UUID, submission: RsvpSubmissionDTO
    ) -> GuestDTO:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            guest = await self._get_guest(session, event_id, guest_id)

            records, attending_count = attending_fields(submission.status, submission.attendees)
            guest.status = submission.status
            guest.attendees = records
            guest.attending_count = attending_count
            guest.message = submission.message
            guest.arrival_location = submission.travel.arrival_location
            guest.arrival_datetime = submission.travel.arrival_datetime
            guest.departure_location = submission.travel.departure_location
            guest.departure_datetime = submission.travel.departure_datetime
            if submission.status == GuestStatus.DECLINED:
                guest.departure_details = None

            await session.flush()
            logger.info(
                "RSVP %s for guest %s (%d attending)",
                submission.status.value,
                guest_id,
                attending_count,
            )
            return guest_to_dto(guest)

    async def submit_departure(
        self, event_id: UUID, guest_id: UUID, details: DepartureDetailsDTO
    ) -> GuestDTO:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            guest = await self._get_guest(session, event_id, guest_id)
            guest.departure_details = departure_to_dict(details)
            await session.flush()
            return guest_to_dto(guest)
