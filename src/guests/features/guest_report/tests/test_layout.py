"""Tests for the guest PDF report layout."""

import io
from datetime import UTC, date, datetime
from uuid import uuid4

import pytest
from PIL import Image

from src.guests.dtos import (
    AttendeeDTO,
    GuestStatus,
    IdDocumentType,
    NotTravellingDTO,
    PlannedDepartureDTO,
    TravelMode,
    TravellerDepartureDTO,
    TravelSummaryDTO,
)
from src.guests.features.guest_report.images import decode_image
from src.guests.features.guest_report.layout import (
    BOTTOM_LIMIT,
    IMAGE_ERROR_TEXT,
    TOP_MARGIN,
    GuestReportBuilder,
    Placement,
    build_guest_report,
    fit_image,
    report_filename,
)
from src.tests.inmemory_models import InMemoryImageSource, make_guest


def _png(width: int, height: int, mode: str = "RGB") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, (width, height), "navy").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture(scope="module")
def id_card():
    return decode_image(_png(400, 300))


def _documented(name: str, front: str | None, back: str | None) -> AttendeeDTO:
    return AttendeeDTO(name=name, age=30, id_type=IdDocumentType.PASSPORT, id_front=front, id_back=back)


def test_fit_image_scales_by_width_first():
    assert fit_image(400, 200, 200, 200) == (200.0, 100.0)


def test_fit_image_rescales_by_height_when_too_tall():
    assert fit_image(100, 400, 200, 200) == (50.0, 200.0)


def test_fit_image_upscales_small_images_to_max_width():
    assert fit_image(50, 25, 200, 200) == (200.0, 100.0)


def test_report_filename_collapses_whitespace():
    assert report_filename("Priya  Sharma") == "Priya_Sharma_details.pdf"
    assert report_filename(" Ana\tde la Cruz ") == "Ana_de_la_Cruz_details.pdf"


async def test_report_sections_in_order(id_card):
    guest = make_guest(
        uuid4(),
        name="Priya Sharma",
        email="priya@example.com",
        phone="+91 98200 00000",
        status=GuestStatus.ACCEPTED,
        attending_count=1,
        message="Looking forward to it! " * 20,
        travel=TravelSummaryDTO(
            arrival_location="Udaipur Airport",
            arrival_datetime=datetime(2026, 12, 1, 14, 30, tzinfo=UTC),
        ),
        departure_details=PlannedDepartureDTO(
            date=date(2026, 12, 4),
            travellers=(TravellerDepartureDTO(name="Priya", mode=TravelMode.TRAIN, station="UDZ"),),
        ),
        attendees=(_documented("Priya", "front-1", "back-1"),),
    )
    images = InMemoryImageSource({"front-1": id_card, "back-1": id_card})

    report = await build_guest_report(
        guest, images, event_name="Asha & Rohan", event_date=datetime(2026, 12, 2, 18, 0)
    )
    texts = [p.text for p in report.placements]

    assert report.content.startswith(b"%PDF")
    assert report.filename == "Priya_Sharma_details.pdf"
    assert report.page_count == 1
    assert report.placements[0].kind == "title"
    assert texts[0] == "Priya Sharma"
    assert "Asha & Rohan" in texts
    assert "December 02, 2026 06:00 PM" in texts
    assert "Arrival: Udaipur Airport" in texts
    assert "Departure: None" not in texts
    assert texts.index("Email: priya@example.com") < texts.index("Status: ACCEPTED")
    assert "Total Guests: 1" in texts
    # the message is wrapped over several lines
    assert sum(1 for t in texts if "Looking forward" in t) > 1
    assert texts.index("Departure Details") < texts.index("1. Priya (Passport)")
    assert "- Priya: Train, UDZ" in texts
    assert "Age: 30 | Type: Adult" in texts
    assert images.requested == ["front-1", "back-1"]


async def test_report_without_attendees():
    guest = make_guest(uuid4(), name="Amy", status=GuestStatus.DECLINED)

    report = await build_guest_report(guest, InMemoryImageSource())
    texts = [p.text for p in report.placements]

    assert "No detailed attendee data available." in texts
    assert "Email: -" in texts
    assert "Total Guests: 0" in texts


async def test_report_not_travelling():
    guest = make_guest(uuid4(), departure_details=NotTravellingDTO(message="Staying on"))

    report = await build_guest_report(guest, InMemoryImageSource())
    texts = [p.text for p in report.placements]

    assert "No departure arrangements required" in texts
    assert "Note: Staying on" in texts


async def test_long_attendee_list_paginates(id_card):
    attendees = tuple(_documented(f"Guest {n}", f"f{n}", f"b{n}") for n in range(1, 7))
    images = InMemoryImageSource({url: id_card for a in attendees for url in (a.id_front, a.id_back)})
    guest = make_guest(uuid4(), status=GuestStatus.ACCEPTED, attending_count=6, attendees=attendees)

    report = await build_guest_report(guest, images, event_name="Asha & Rohan", event_date=datetime(2026, 12, 2))
    placements = report.placements

    assert report.page_count > 1
    assert max(p.page for p in placements) == report.page_count

    # every image sits directly under its own label on the same page
    for index, placement in enumerate(placements):
        if placement.kind != "image":
            continue
        label = placements[index - 1]
        assert label.kind == "label"
        assert label.page == placement.page
        assert label.text in (placement.text, f"{placement.text} (continued)")

    continued = [p for p in placements if p.text.endswith("(continued)")]
    assert continued
    for label in continued:
        previous = placements[placements.index(label) - 1]
        assert previous.page == label.page - 1
        # the label moved together with its image
        assert previous.kind != "label"

    for n in range(1, 7):
        assert any(p.text == f"{n}. Guest {n} (Passport)" for p in placements)


def test_label_and_image_move_to_a_new_page_together(id_card):
    builder = GuestReportBuilder(InMemoryImageSource())
    # room for the label line, not for the image below it
    builder.cursor = BOTTOM_LIMIT - 60

    builder.image(id_card, "ID Back")

    assert builder.placements == [
        Placement(page=2, kind="label", text="ID Back (continued)"),
        Placement(page=2, kind="image", text="ID Back"),
    ]
    assert builder.cursor == TOP_MARGIN + 14 + 160 + 10


def test_image_that_fits_keeps_its_plain_label(id_card):
    builder = GuestReportBuilder(InMemoryImageSource())

    builder.image(id_card, "ID Front")

    assert builder.placements == [
        Placement(page=1, kind="label", text="ID Front"),
        Placement(page=1, kind="image", text="ID Front"),
    ]


async def test_unreachable_image_degrades_to_placeholder(id_card):
    attendees = (
        _documented("Broken Front", "missing", "back-1"),
        _documented("Second", "front-2", "back-2"),
    )
    images = InMemoryImageSource({"back-1": id_card, "front-2": id_card, "back-2": id_card})
    guest = make_guest(uuid4(), status=GuestStatus.ACCEPTED, attending_count=2, attendees=attendees)

    report = await build_guest_report(guest, images)
    sequence = [(p.kind, p.text) for p in report.placements]

    start = sequence.index(("heading", "1. Broken Front (Passport)"))
    assert sequence[start + 2 : start + 6] == [
        ("label", "ID Front"),
        ("error", IMAGE_ERROR_TEXT),
        ("label", "ID Back"),
        ("image", "ID Back"),
    ]
    assert ("heading", "2. Second (Passport)") in sequence
    assert sequence.count(("image", "ID Front")) == 1
    assert report.content.startswith(b"%PDF")


async def test_nothing_is_placed_below_the_bottom_limit(id_card):
    attendees = tuple(_documented(f"Guest {n}", f"f{n}", None) for n in range(1, 12))
    images = InMemoryImageSource({a.id_front: id_card for a in attendees})
    guest = make_guest(uuid4(), status=GuestStatus.ACCEPTED, attendees=attendees)

    builder = GuestReportBuilder(images)
    builder.header(guest)
    builder.contact(guest)
    cursors = []
    for position, attendee in enumerate(guest.attendees, start=1):
        await builder.attendee(position, attendee)
        cursors.append(builder.cursor)
    builder.finish()

    assert builder.page > 1
    # gaps may overshoot by their own height, drawn content never does
    assert all(cursor <= BOTTOM_LIMIT + 12 for cursor in cursors)


def test_decode_image_converts_to_rgb_jpeg():
    loaded = decode_image(_png(30, 20, mode="RGBA"))

    assert (loaded.width, loaded.height) == (30, 20)
    assert loaded.data.startswith(b"\xff\xd8")
