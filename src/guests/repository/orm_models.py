from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.guests.dtos import GuestStatus
from src.models.base import GUID, Base, TimeStamp


class Guest(Base, TimeStamp):
    __tablename__ = TableNames.GUESTS.value

    event_id: Mapped[UUID] = mapped_column(
        GUID,
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    allowed_guests: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    # RSVP
    status: Mapped[GuestStatus] = mapped_column(
        Enum(GuestStatus, name="guest_status_enum", values_callable=lambda x: [e.value for e in x]),
        default=GuestStatus.PENDING,
        nullable=False,
    )
    attending_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Travel summary collected with the RSVP
    arrival_location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    arrival_datetime: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    departure_location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    departure_datetime: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Structured blobs, validated at the API boundary before they get here
    departure_details: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    attendees: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)

    def __repr__(self) -> str:
        return f"<Guest {self.name} - {self.status.value}>"
