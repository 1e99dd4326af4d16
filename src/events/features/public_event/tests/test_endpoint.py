from uuid import uuid4

from src.events.urls import PUBLIC_EVENT_URL
from src.tests.inmemory_models import InMemoryApp, make_event


async def test_public_event_by_slug(client_factory):
    fakes = InMemoryApp()
    fakes.add_event(make_event(uuid4(), slug="asha-rohan", description="Sangeet and wedding"))

    async with client_factory(fakes.overrides()) as client:
        response = await client.get(PUBLIC_EVENT_URL.format(slug="asha-rohan"))

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Asha & Rohan"
    assert data["description"] == "Sangeet and wedding"
    assert "admin_id" not in data
    assert "assigned_hotel_email" not in data


async def test_unknown_slug(client_factory):
    async with client_factory(InMemoryApp().overrides()) as client:
        response = await client.get(PUBLIC_EVENT_URL.format(slug="missing"))

    assert response.status_code == 404
    assert response.json()["detail"] == "Event not found"
