from dataclasses import dataclass, field
import datetime as dt
from enum import Enum
from typing import Any
from uuid import UUID


class GuestNotFoundError(Exception):
    def __init__(self, guest_id: UUID | str) -> None:
        self.guest_id = guest_id
        super().__init__(f"Guest '{guest_id}' not found")


class GuestStoreError(Exception):
    """Raised when the backing store rejects a guest write."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        super().__init__(f"Error {operation}: {reason}")


class CsvParseError(Exception):
    """Raised when an uploaded guest list cannot be read as CSV."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"CSV Parse Error: {reason}")


class NoValidGuestsError(Exception):
    def __init__(self) -> None:
        super().__init__(
            "No valid guests found in CSV. Please ensure there is a 'Name' column."
        )


class GuestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class GuestType(str, Enum):
    ADULT = "Adult"
    CHILD = "Child"


class IdDocumentType(str, Enum):
    AADHAR_CARD = "Aadhar Card"
    PASSPORT = "Passport"
    DRIVING_LICENSE = "Driving License"
    VOTER_ID = "Voter ID"
    PAN_CARD = "PAN Card"
    OTHER = "Other"


class TravelMode(str, Enum):
    FLIGHT = "Flight"
    TRAIN = "Train"
    BUS = "Bus"
    CAR = "Car"
    OTHER = "Other"


@dataclass(frozen=True)
class AttendeeDTO:
    """One named individual covered by a guest's invitation."""

    name: str
    guest_type: GuestType = GuestType.ADULT
    id_type: IdDocumentType = IdDocumentType.AADHAR_CARD
    age: int | None = None
    id_front: str | None = None
    id_back: str | None = None

    @property
    def is_documented(self) -> bool:
        return bool(self.id_front) or bool(self.id_back)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AttendeeDTO":
        """Load a stored attendee record, tolerating the older ID-only shape."""
        age = data.get("age")
        try:
            age = int(age) if age not in (None, "") else None
        except (TypeError, ValueError):
            age = None
        try:
            id_type = IdDocumentType(data.get("id_type") or IdDocumentType.AADHAR_CARD)
        except ValueError:
            id_type = IdDocumentType.OTHER
        try:
            guest_type = GuestType(data.get("guest_type") or GuestType.ADULT)
        except ValueError:
            guest_type = GuestType.ADULT
        return cls(
            name=data.get("name") or "",
            guest_type=guest_type,
            id_type=id_type,
            age=age,
            id_front=data.get("id_front") or None,
            id_back=data.get("id_back") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "age": self.age,
            "guest_type": self.guest_type.value,
            "id_type": self.id_type.value,
            "id_front": self.id_front,
            "id_back": self.id_back,
        }


@dataclass(frozen=True)
class TravellerDepartureDTO:
    name: str
    mode: TravelMode
    station: str | None = None
    ticket_reference: str | None = None


@dataclass(frozen=True)
class NotTravellingDTO:
    """Departure details for a guest who needs no return travel arrangements."""

    message: str | None = None
    applicable: bool = field(default=False, init=False)


@dataclass(frozen=True)
class PlannedDepartureDTO:
    date: dt.date
    travellers: tuple[TravellerDepartureDTO, ...]
    time: dt.time | None = None
    message: str | None = None
    applicable: bool = field(default=True, init=False)


DepartureDetailsDTO = NotTravellingDTO | PlannedDepartureDTO


def _travel_mode(value: Any) -> TravelMode:
    try:
        return TravelMode(value or TravelMode.OTHER)
    except ValueError:
        return TravelMode.OTHER


def departure_from_dict(data: dict[str, Any] | None) -> DepartureDetailsDTO | None:
    """Load stored departure details. Records without a readable date degrade to not travelling."""
    if not data:
        return None
    if not data.get("applicable"):
        return NotTravellingDTO(message=data.get("message"))
    try:
        date = dt.date.fromisoformat(data.get("date") or "")
    except (TypeError, ValueError):
        return NotTravellingDTO(message=data.get("message"))
    try:
        time = dt.time.fromisoformat(data["time"]) if data.get("time") else None
    except (TypeError, ValueError):
        time = None
    return PlannedDepartureDTO(
        date=date,
        time=time,
        travellers=tuple(
            TravellerDepartureDTO(
                name=t.get("name") or "",
                mode=_travel_mode(t.get("mode")),
                station=t.get("station"),
                ticket_reference=t.get("ticket_reference"),
            )
            for t in data.get("travellers") or []
            if isinstance(t, dict)
        ),
        message=data.get("message"),
    )


def departure_to_dict(details: DepartureDetailsDTO) -> dict[str, Any]:
    if isinstance(details, NotTravellingDTO):
        return {"applicable": False, "message": details.message}
    return {
        "applicable": True,
        "date": details.date.isoformat(),
        "time": details.time.isoformat(timespec="minutes") if details.time else None,
        "travellers": [
            {
                "name": t.name,
                "mode": t.mode.value,
                "station": t.station,
                "ticket_reference": t.ticket_reference,
            }
            for t in details.travellers
        ],
        "message": details.message,
    }


@dataclass(frozen=True)
class TravelSummaryDTO:
    """Arrival/departure summary collected with the RSVP form."""

    arrival_location: str | None = None
    arrival_datetime: dt.datetime | None = None
    departure_location: str | None = None
    departure_datetime: dt.datetime | None = None


@dataclass(frozen=True)
class NewGuestDTO:
    """A guest about to be inserted, from an import row or a manual add."""

    event_id: UUID
    name: str
    email: str | None = None
    phone: str | None = None
    allowed_guests: int = 1
    status: GuestStatus = GuestStatus.PENDING


@dataclass(frozen=True)
class GuestDTO:
    """DTO for guest data."""

    id: UUID
    event_id: UUID
    name: str
    email: str | None = None
    phone: str | None = None
    allowed_guests: int = 1
    status: GuestStatus = GuestStatus.PENDING
    attending_count: int = 0
    message: str | None = None
    travel: TravelSummaryDTO = field(default_factory=TravelSummaryDTO)
    departure_details: DepartureDetailsDTO | None = None
    attendees: tuple[AttendeeDTO, ...] = ()

    @property
    def docs_uploaded(self) -> int:
        return sum(1 for attendee in self.attendees if attendee.is_documented)


@dataclass(frozen=True)
class RsvpSubmissionDTO:
    status: GuestStatus
    attendees: tuple[AttendeeDTO, ...] = ()
    message: str | None = None
    travel: TravelSummaryDTO = field(default_factory=TravelSummaryDTO)
