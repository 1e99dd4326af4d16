import pytest

from src.auth.dtos import Role
from src.guests.dtos import AttendeeDTO, GuestStatus
from src.guests.features.guest_report.router import get_image_source
from src.guests.urls import GUEST_REPORT_URL, HOTEL_GUEST_REPORT_URL
from src.tests.inmemory_models import (
    InMemoryApp,
    InMemoryImageSource,
    auth_headers,
    make_event,
    make_guest,
)


@pytest.fixture
def fakes():
    fakes = InMemoryApp()
    admin = fakes.identity.add_user("admin-token", Role.ADMIN)
    fakes.identity.add_user("hotel-token", Role.HOTEL, email="desk@hotel.example")
    fakes.event = fakes.add_event(
        make_event(admin.user_id, assigned_hotel_email="desk@hotel.example")
    )
    fakes.guest = fakes.add_guest(
        make_guest(
            fakes.event.id,
            name="Priya Sharma",
            status=GuestStatus.ACCEPTED,
            attending_count=1,
            attendees=(AttendeeDTO(name="Priya", id_front="gone", id_back="gone-too"),),
        )
    )
    return fakes


def _overrides(fakes):
    overrides = fakes.overrides()
    overrides[get_image_source] = lambda: InMemoryImageSource()
    return overrides


async def test_admin_downloads_report(client_factory, fakes):
    async with client_factory(_overrides(fakes)) as client:
        response = await client.get(
            GUEST_REPORT_URL.format(event_id=fakes.event.id, guest_id=fakes.guest.id),
            headers=auth_headers("admin-token"),
        )

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "Priya_Sharma_details.pdf" in response.headers["content-disposition"]
    assert response.headers["x-page-count"] == "1"
    assert response.content.startswith(b"%PDF")


async def test_assigned_hotel_downloads_report(client_factory, fakes):
    async with client_factory(_overrides(fakes)) as client:
        response = await client.get(
            HOTEL_GUEST_REPORT_URL.format(event_id=fakes.event.id, guest_id=fakes.guest.id),
            headers=auth_headers("hotel-token"),
        )

    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")


async def test_report_for_guest_of_another_event_is_not_found(client_factory, fakes):
    other_event = fakes.add_event(make_event(fakes.event.admin_id, slug="other"))

    async with client_factory(_overrides(fakes)) as client:
        response = await client.get(
            GUEST_REPORT_URL.format(event_id=other_event.id, guest_id=fakes.guest.id),
            headers=auth_headers("admin-token"),
        )

    assert response.status_code == 404
