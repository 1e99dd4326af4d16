"""
The public RSVP flow as a small state machine.

    landing    --Begin-->                       search
    search     --GuestSelected-->               form
    form       --RsvpSubmitted(accepted)-->     departure
    form       --RsvpSubmitted(declined)-->     success
    departure  --DepartureSubmitted/Skipped-->  success

`Back` steps one screen back from search, form and departure.
"""

from dataclasses import dataclass, replace
from enum import Enum
from uuid import UUID

from src.guests.dtos import GuestDTO, GuestStatus


class RsvpStep(str, Enum):
    LANDING = "landing"
    SEARCH = "search"
    FORM = "form"
    DEPARTURE = "departure"
    SUCCESS = "success"


@dataclass(frozen=True)
class Begin:
    pass


@dataclass(frozen=True)
class GuestSelected:
    guest_id: UUID


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class RsvpSubmitted:
    status: GuestStatus


@dataclass(frozen=True)
class DepartureSubmitted:
    pass


@dataclass(frozen=True)
class DepartureSkipped:
    pass


RsvpEvent = Begin | GuestSelected | Back | RsvpSubmitted | DepartureSubmitted | DepartureSkipped


class InvalidTransitionError(Exception):
    def __init__(self, step: RsvpStep, event: RsvpEvent) -> None:
        self.step = step
        self.event = event
        super().__init__(f"Cannot handle {type(event).__name__} while on the {step.value} step")


@dataclass(frozen=True)
class RsvpFlow:
    step: RsvpStep = RsvpStep.LANDING
    guest_id: UUID | None = None

    @classmethod
    def for_guest(cls, guest: GuestDTO) -> "RsvpFlow":
        """Resume the flow for a stored guest: accepted guests continue with departure details."""
        if guest.status == GuestStatus.ACCEPTED:
            return cls(step=RsvpStep.DEPARTURE, guest_id=guest.id)
        return cls(step=RsvpStep.FORM, guest_id=guest.id)

    def apply(self, event: RsvpEvent) -> "RsvpFlow":
        step = self.step

        if step == RsvpStep.LANDING and isinstance(event, Begin):
            return replace(self, step=RsvpStep.SEARCH)

        if step == RsvpStep.SEARCH:
            if isinstance(event, GuestSelected):
                return RsvpFlow(step=RsvpStep.FORM, guest_id=event.guest_id)
            if isinstance(event, Back):
                return RsvpFlow(step=RsvpStep.LANDING)

        if step == RsvpStep.FORM:
            if isinstance(event, Back):
                return RsvpFlow(step=RsvpStep.SEARCH)
            if isinstance(event, RsvpSubmitted):
                if event.status == GuestStatus.ACCEPTED:
                    return replace(self, step=RsvpStep.DEPARTURE)
                if event.status == GuestStatus.DECLINED:
                    return replace(self, step=RsvpStep.SUCCESS)

        if step == RsvpStep.DEPARTURE:
            if isinstance(event, (DepartureSubmitted, DepartureSkipped)):
                return replace(self, step=RsvpStep.SUCCESS)
            if isinstance(event, Back):
                return replace(self, step=RsvpStep.FORM)

        raise InvalidTransitionError(step, event)
