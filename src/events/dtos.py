from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from src.config.settings import settings


class EventNotFoundError(Exception):
    def __init__(self, ref: str) -> None:
        self.ref = ref
        super().__init__(f"Event '{ref}' not found")


class SlugTakenError(Exception):
    """Raised when creating an event with a slug another event already uses."""

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"The invite link '/r/{slug}' is already taken")


@dataclass(frozen=True)
class EventDTO:
    """DTO for event data."""

    id: UUID
    name: str
    date: datetime
    location: str
    slug: str
    admin_id: UUID
    description: str | None = None
    assigned_hotel_email: str | None = None
    assigned_hotel_name: str | None = None

    @property
    def invite_link(self) -> str:
        return f"{settings.frontend_url.rstrip('/')}/r/{self.slug}"

    @property
    def is_upcoming(self) -> bool:
        date = self.date if self.date.tzinfo else self.date.replace(tzinfo=UTC)
        return date >= datetime.now(UTC)


@dataclass(frozen=True)
class GuestStatsDTO:
    total: int = 0
    accepted: int = 0
    declined: int = 0
    pending: int = 0


@dataclass(frozen=True)
class NewEventDTO:
    name: str
    date: datetime
    location: str
    slug: str
    description: str | None = None
