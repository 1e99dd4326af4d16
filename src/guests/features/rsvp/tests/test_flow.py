from uuid import uuid4

import pytest

from src.guests.dtos import GuestStatus
from src.guests.features.rsvp.flow import (
    Back,
    Begin,
    DepartureSkipped,
    DepartureSubmitted,
    GuestSelected,
    InvalidTransitionError,
    RsvpFlow,
    RsvpStep,
    RsvpSubmitted,
)
from src.tests.inmemory_models import make_guest


def test_happy_path_through_departure():
    guest_id = uuid4()

    flow = RsvpFlow()
    flow = flow.apply(Begin())
    assert flow.step == RsvpStep.SEARCH

    flow = flow.apply(GuestSelected(guest_id))
    assert (flow.step, flow.guest_id) == (RsvpStep.FORM, guest_id)

    flow = flow.apply(RsvpSubmitted(GuestStatus.ACCEPTED))
    assert flow.step == RsvpStep.DEPARTURE

    flow = flow.apply(DepartureSubmitted())
    assert (flow.step, flow.guest_id) == (RsvpStep.SUCCESS, guest_id)


def test_declining_skips_departure():
    flow = RsvpFlow(step=RsvpStep.FORM, guest_id=uuid4())

    assert flow.apply(RsvpSubmitted(GuestStatus.DECLINED)).step == RsvpStep.SUCCESS


def test_departure_can_be_skipped():
    flow = RsvpFlow(step=RsvpStep.DEPARTURE, guest_id=uuid4())

    assert flow.apply(DepartureSkipped()).step == RsvpStep.SUCCESS


def test_back_steps_one_screen():
    guest_id = uuid4()

    assert RsvpFlow(RsvpStep.SEARCH).apply(Back()).step == RsvpStep.LANDING
    back_to_search = RsvpFlow(RsvpStep.FORM, guest_id).apply(Back())
    assert (back_to_search.step, back_to_search.guest_id) == (RsvpStep.SEARCH, None)
    assert RsvpFlow(RsvpStep.DEPARTURE, guest_id).apply(Back()) == RsvpFlow(RsvpStep.FORM, guest_id)


@pytest.mark.parametrize(
    ("step", "event"),
    [
        (RsvpStep.LANDING, GuestSelected(uuid4())),
        (RsvpStep.SEARCH, DepartureSubmitted()),
        (RsvpStep.FORM, DepartureSubmitted()),
        (RsvpStep.FORM, RsvpSubmitted(GuestStatus.PENDING)),
        (RsvpStep.DEPARTURE, RsvpSubmitted(GuestStatus.ACCEPTED)),
        (RsvpStep.SUCCESS, Back()),
        (RsvpStep.SUCCESS, Begin()),
    ],
)
def test_invalid_transitions_raise(step, event):
    with pytest.raises(InvalidTransitionError) as exc_info:
        RsvpFlow(step=step).apply(event)

    assert exc_info.value.step == step


def test_for_guest_resumes_at_departure_once_accepted():
    accepted = make_guest(uuid4(), status=GuestStatus.ACCEPTED)
    pending = make_guest(uuid4())
    declined = make_guest(uuid4(), status=GuestStatus.DECLINED)

    assert RsvpFlow.for_guest(accepted) == RsvpFlow(RsvpStep.DEPARTURE, accepted.id)
    assert RsvpFlow.for_guest(pending).step == RsvpStep.FORM
    assert RsvpFlow.for_guest(declined).step == RsvpStep.FORM
