"""In-memory models for testing - no database required."""

import dataclasses
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from src.auth.dtos import (
    AccessTokenDTO,
    InvalidCredentialsError,
    Principal,
    Role,
    UserAlreadyExistsError,
    UserDTO,
)
from src.auth.guard import get_identity_provider
from src.auth.repository.identity import IdentityProvider
from src.events.access import get_event_read_model
from src.events.dtos import EventDTO, EventNotFoundError, GuestStatsDTO, NewEventDTO, SlugTakenError
from src.events.repository.read_models import EventReadModel
from src.events.repository.write_models import EventWriteModel
from src.guests.dependencies import get_guest_read_model, get_guest_write_model
from src.guests.dtos import (
    AttendeeDTO,
    DepartureDetailsDTO,
    GuestDTO,
    GuestNotFoundError,
    GuestStatus,
    NewGuestDTO,
    RsvpSubmissionDTO,
)
from src.guests.features.guest_report.images import ImageLoadError, LoadedImage
from src.guests.repository.read_models import GuestReadModel
from src.guests.repository.write_models import GuestWriteModel, attending_fields
from src.storage.object_store import ObjectStore, ObjectStoreError, public_url_prefix

# =============================================================================
# Builders
# =============================================================================


def make_event(admin_id: UUID, **kwargs) -> EventDTO:
    values = {
        "id": uuid4(),
        "name": "Asha & Rohan",
        "date": datetime.now(UTC) + timedelta(days=30),
        "location": "Udaipur",
        "slug": "asha-rohan",
        "admin_id": admin_id,
    }
    values.update(kwargs)
    return EventDTO(**values)


def make_guest(event_id: UUID, name: str = "Priya Sharma", **kwargs) -> GuestDTO:
    return GuestDTO(id=kwargs.pop("id", uuid4()), event_id=event_id, name=name, **kwargs)


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def document_url(name: str) -> str:
    """Public URL of an uploaded ID image."""
    return f"{public_url_prefix()}event/guest/{name}.jpg"


# =============================================================================
# Identity
# =============================================================================


class InMemoryIdentityProvider(IdentityProvider):
    """Tokens are plain strings mapped to principals."""

    def __init__(self) -> None:
        self.sessions: dict[str, Principal] = {}
        self.passwords: dict[UUID, str] = {}
        self.users: dict[str, UserDTO] = {}

    def add_user(self, token: str, role: Role, email: str | None = None, password: str = "secret") -> Principal:
        user_id = uuid4()
        email = email or f"{role.value}-{user_id.hex[:6]}@example.com"
        principal = Principal(user_id=user_id, email=email, role=role)
        self.sessions[token] = principal
        self.passwords[user_id] = password
        self.users[email.lower()] = UserDTO(id=user_id, email=email, role=role)
        return principal

    async def sign_up(self, email: str, password: str, role: Role) -> UserDTO:
        if email.lower() in self.users:
            raise UserAlreadyExistsError(email)
        user = UserDTO(id=uuid4(), email=email.lower(), role=role)
        self.users[user.email] = user
        self.passwords[user.id] = password
        return user

    async def sign_in(self, email: str, password: str) -> AccessTokenDTO:
        user = self.users.get(email.lower())
        if user is None or self.passwords.get(user.id) != password:
            raise InvalidCredentialsError()
        token = f"token-{user.id.hex}"
        self.sessions[token] = Principal(user_id=user.id, email=user.email, role=user.role)
        return AccessTokenDTO(access_token=token)

    async def get_session(self, token: str) -> Principal | None:
        return self.sessions.get(token)

    async def verify_password(self, user_id: UUID, password: str) -> bool:
        return self.passwords.get(user_id) == password


# =============================================================================
# Events
# =============================================================================


class InMemoryEventReadModel(EventReadModel):
    def __init__(self, events: Sequence[EventDTO] = ()) -> None:
        self.events: dict[UUID, EventDTO] = {event.id: event for event in events}

    async def get_event(self, event_id: UUID) -> EventDTO | None:
        return self.events.get(event_id)

    async def get_by_slug(self, slug: str) -> EventDTO | None:
        return next((e for e in self.events.values() if e.slug == slug), None)

    async def list_for_admin(self, admin_id: UUID) -> list[EventDTO]:
        events = [e for e in self.events.values() if e.admin_id == admin_id]
        return sorted(events, key=lambda e: e.date)

    async def list_for_hotel(self, hotel_email: str) -> list[EventDTO]:
        events = [
            e
            for e in self.events.values()
            if e.assigned_hotel_email and e.assigned_hotel_email.lower() == hotel_email.lower()
        ]
        return sorted(events, key=lambda e: e.date)


class InMemoryEventWriteModel(EventWriteModel):
    def __init__(self, read_model: InMemoryEventReadModel) -> None:
        self._read_model = read_model
        self.deleted: list[UUID] = []

    async def create_event(self, admin_id: UUID, event: NewEventDTO) -> EventDTO:
        if await self._read_model.get_by_slug(event.slug) is not None:
            raise SlugTakenError(event.slug)
        created = EventDTO(
            id=uuid4(),
            name=event.name,
            date=event.date,
            location=event.location,
            description=event.description,
            slug=event.slug,
            admin_id=admin_id,
        )
        self._read_model.events[created.id] = created
        return created

    async def assign_hotel(
        self, event_id: UUID, hotel_email: str | None, hotel_name: str | None
    ) -> EventDTO:
        event = self._read_model.events.get(event_id)
        if event is None:
            raise EventNotFoundError(str(event_id))
        updated = dataclasses.replace(
            event,
            assigned_hotel_email=hotel_email.lower() if hotel_email else None,
            assigned_hotel_name=hotel_name,
        )
        self._read_model.events[event_id] = updated
        return updated

    async def delete_event(self, event_id: UUID) -> None:
        if self._read_model.events.pop(event_id, None) is None:
            raise EventNotFoundError(str(event_id))
        self.deleted.append(event_id)


# =============================================================================
# Guests
# =============================================================================


class InMemoryGuestReadModel(GuestReadModel):
    def __init__(self, guests: Sequence[GuestDTO] = ()) -> None:
        self.guests: dict[UUID, GuestDTO] = {guest.id: guest for guest in guests}

    async def list_for_event(self, event_id: UUID, query: str | None = None) -> list[GuestDTO]:
        guests = [g for g in self.guests.values() if g.event_id == event_id]
        if query and query.strip():
            needle = query.strip().lower()
            guests = [
                g for g in guests if needle in g.name.lower() or needle in (g.email or "").lower()
            ]
        return sorted(guests, key=lambda g: g.name)

    async def get_guest(self, guest_id: UUID, event_id: UUID | None = None) -> GuestDTO | None:
        guest = self.guests.get(guest_id)
        if guest is None or (event_id is not None and guest.event_id != event_id):
            return None
        return guest

    async def search_by_name(self, event_id: UUID, name: str) -> list[GuestDTO]:
        if not name.strip():
            return []
        needle = name.strip().lower()
        guests = [
            g for g in self.guests.values() if g.event_id == event_id and needle in g.name.lower()
        ]
        return sorted(guests, key=lambda g: g.name)

    async def get_stats(self, event_id: UUID) -> GuestStatsDTO:
        guests = [g for g in self.guests.values() if g.event_id == event_id]
        return GuestStatsDTO(
            total=len(guests),
            accepted=sum(1 for g in guests if g.status == GuestStatus.ACCEPTED),
            declined=sum(1 for g in guests if g.status == GuestStatus.DECLINED),
            pending=sum(1 for g in guests if g.status == GuestStatus.PENDING),
        )


class InMemoryGuestWriteModel(GuestWriteModel):
    def __init__(self, read_model: InMemoryGuestReadModel) -> None:
        self._read_model = read_model
        self.inserted: list[NewGuestDTO] = []

    def _get(self, event_id: UUID, guest_id: UUID) -> GuestDTO:
        guest = self._read_model.guests.get(guest_id)
        if guest is None or guest.event_id != event_id:
            raise GuestNotFoundError(guest_id)
        return guest

    def _save(self, guest: GuestDTO) -> GuestDTO:
        self._read_model.guests[guest.id] = guest
        return guest

    async def bulk_insert(self, guests: Sequence[NewGuestDTO]) -> int:
        for guest in guests:
            await self.add_guest(guest)
        return len(guests)

    async def add_guest(self, guest: NewGuestDTO) -> GuestDTO:
        self.inserted.append(guest)
        return self._save(
            GuestDTO(
                id=uuid4(),
                event_id=guest.event_id,
                name=guest.name,
                email=guest.email,
                phone=guest.phone,
                allowed_guests=guest.allowed_guests,
                status=guest.status,
            )
        )

    async def delete_guest(self, event_id: UUID, guest_id: UUID) -> None:
        self._get(event_id, guest_id)
        del self._read_model.guests[guest_id]

    async def update_attendees(
        self, event_id: UUID, guest_id: UUID, attendees: Sequence[AttendeeDTO]
    ) -> GuestDTO:
        guest = self._get(event_id, guest_id)
        records, count = attending_fields(guest.status, attendees)
        return self._save(
            dataclasses.replace(
                guest,
                attendees=tuple(AttendeeDTO.from_dict(r) for r in records),
                attending_count=count,
            )
        )

    async def submit_rsvp(
        self, event_id: UUID, guest_id: UUID, submission: RsvpSubmissionDTO
    ) -> GuestDTO:
        guest = self._get(event_id, guest_id)
        records, count = attending_fields(submission.status, submission.attendees)
        return self._save(
            dataclasses.replace(
                guest,
                status=submission.status,
                attendees=tuple(AttendeeDTO.from_dict(r) for r in records),
                attending_count=count,
                message=submission.message,
                travel=submission.travel,
                departure_details=(
                    None if submission.status == GuestStatus.DECLINED else guest.departure_details
                ),
            )
        )

    async def submit_departure(
        self, event_id: UUID, guest_id: UUID, details: DepartureDetailsDTO
    ) -> GuestDTO:
        guest = self._get(event_id, guest_id)
        return self._save(dataclasses.replace(guest, departure_details=details))


# =============================================================================
# Object store and images
# =============================================================================


class InMemoryObjectStore(ObjectStore):
    def __init__(self, fail: bool = False) -> None:
        self.objects: dict[str, tuple[bytes, str]] = {}
        self._fail = fail

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        if self._fail:
            raise ObjectStoreError(path, "storage unavailable")
        self.objects[path] = (content, content_type)
        return f"{public_url_prefix()}{path}"


class InMemoryImageSource:
    """Serves pre-decoded images by URL; unknown URLs fail like a broken link."""

    def __init__(self, images: dict[str, LoadedImage] | None = None) -> None:
        self.images = images or {}
        self.requested: list[str] = []

    async def load(self, url: str) -> LoadedImage:
        self.requested.append(url)
        if url not in self.images:
            raise ImageLoadError(url, "404 Not Found")
        return self.images[url]


# =============================================================================
# Wiring
# =============================================================================


class InMemoryApp:
    """Shared fakes for one test, plus the dependency overrides that install them."""

    def __init__(self) -> None:
        self.identity = InMemoryIdentityProvider()
        self.events = InMemoryEventReadModel()
        self.event_writes = InMemoryEventWriteModel(self.events)
        self.guests = InMemoryGuestReadModel()
        self.guest_writes = InMemoryGuestWriteModel(self.guests)

    def add_event(self, event: EventDTO) -> EventDTO:
        self.events.events[event.id] = event
        return event

    def add_guest(self, guest: GuestDTO) -> GuestDTO:
        self.guests.guests[guest.id] = guest
        return guest

    def overrides(self) -> dict:
        return {
            get_identity_provider: lambda: self.identity,
            get_event_read_model: lambda: self.events,
            get_guest_read_model: lambda: self.guests,
            get_guest_write_model: lambda: self.guest_writes,
        }
