import io
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from src.guests.dtos import AttendeeDTO, GuestDTO, NotTravellingDTO, PlannedDepartureDTO
from src.guests.features.guest_report.images import ImageLoadError, LoadedImage

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 40
TOP_MARGIN = 50
BOTTOM_LIMIT = PAGE_HEIGHT - 50
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN
MAX_IMAGE_WIDTH = 240
MAX_IMAGE_HEIGHT = 160
IMAGE_GAP = 10
SECTION_GAP = 12
LINE_SPACING = 4
LABEL_SIZE = 10

FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"

IMAGE_ERROR_TEXT = "[Error loading image]"
CONTINUED_SUFFIX = " (continued)"


class ImageSource(Protocol):
    async def load(self, url: str) -> LoadedImage: ...


@dataclass(frozen=True)
class Placement:
    """One element drawn on the report, kept for inspection."""

    page: int
    kind: str
    text: str


@dataclass(frozen=True)
class GuestReport:
    filename: str
    content: bytes
    page_count: int
    placements: tuple[Placement, ...] = ()


def fit_image(width: float, height: float, max_width: float, max_height: float) -> tuple[float, float]:
    """Scale to max_width keeping aspect ratio, falling back to max_height when too tall.

    >>> fit_image(400, 200, 200, 200)
    (200.0, 100.0)
    >>> fit_image(100, 400, 200, 200)
    (50.0, 200.0)
    """
    scaled_width = float(max_width)
    scaled_height = height * (max_width / width)
    if scaled_height > max_height:
        scaled_height = float(max_height)
        scaled_width = width * (max_height / height)
    return scaled_width, scaled_height


def report_filename(guest_name: str) -> str:
    return re.sub(r"\s+", "_", guest_name.strip()) + "_details.pdf"


def _format_datetime(value: datetime | date | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.strftime("%B %d, %Y %I:%M %p")
    return value.strftime("%B %d, %Y")


class GuestReportBuilder:
    """Lays out a single guest's details on A4 pages.

    The cursor is measured in points from the top of the page. Every line and
    image goes through `_ensure_space`, so nothing is drawn past BOTTOM_LIMIT.
    """

    def __init__(self, image_source: ImageSource, title: str | None = None) -> None:
        self._images = image_source
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=A4)
        if title:
            self._canvas.setTitle(title)
        self.page = 1
        self.cursor: float = TOP_MARGIN
        self.placements: list[Placement] = []

    def _new_page(self) -> None:
        self._canvas.showPage()
        self.page += 1
        self.cursor = TOP_MARGIN

    def _ensure_space(self, height: float) -> bool:
        """Start a new page when `height` does not fit; returns True on a break."""
        if self.cursor + height > BOTTOM_LIMIT:
            self._new_page()
            return True
        return False

    def _record(self, kind: str, text: str) -> None:
        self.placements.append(Placement(page=self.page, kind=kind, text=text))

    def line(
        self,
        text: str,
        *,
        size: int = 10,
        bold: bool = False,
        kind: str = "text",
        align: str = "left",
    ) -> None:
        height = size + LINE_SPACING
        self._ensure_space(height)
        font = BOLD_FONT if bold else FONT
        self._canvas.setFont(font, size)
        baseline = PAGE_HEIGHT - (self.cursor + size)
        if align == "right":
            self._canvas.drawRightString(PAGE_WIDTH - MARGIN, baseline, text)
        else:
            self._canvas.drawString(MARGIN, baseline, text)
        self.cursor += height
        self._record(kind, text)

    def paragraph(
        self,
        text: str,
        *,
        size: int = 10,
        bold: bool = False,
        kind: str = "text",
        align: str = "left",
        width: float = CONTENT_WIDTH,
    ) -> None:
        font = BOLD_FONT if bold else FONT
        for wrapped in simpleSplit(text, font, size, width) or [""]:
            self.line(wrapped, size=size, bold=bold, kind=kind, align=align)

    def gap(self, height: float = SECTION_GAP) -> None:
        self.cursor += height

    def image(self, loaded: LoadedImage, label: str) -> None:
        """Draw a labelled image. Label and image always share a page; when the
        pair has to move to a new page the label is marked as continued."""
        width, height = fit_image(loaded.width, loaded.height, MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT)
        moved = self._ensure_space(LABEL_SIZE + LINE_SPACING + height + IMAGE_GAP)
        text = label + CONTINUED_SUFFIX if moved else label
        self.line(text, size=LABEL_SIZE, bold=True, kind="label")
        self._canvas.drawImage(
            ImageReader(io.BytesIO(loaded.data)),
            MARGIN,
            PAGE_HEIGHT - self.cursor - height,
            width=width,
            height=height,
        )
        self.cursor += height + IMAGE_GAP
        self._record("image", label)

    async def attendee_image(self, url: str, label: str) -> None:
        try:
            loaded = await self._images.load(url)
        except ImageLoadError as e:
            logger.warning("Report image for %s skipped: %s", label, e)
            self.line(label, size=LABEL_SIZE, bold=True, kind="label")
            self.line(IMAGE_ERROR_TEXT, kind="error")
            return
        self.image(loaded, label)

    def header(
        self,
        guest: GuestDTO,
        event_name: str | None = None,
        event_date: datetime | None = None,
    ) -> None:
        top = self.cursor
        self.paragraph(guest.name, size=20, bold=True, kind="title", width=CONTENT_WIDTH * 0.55)
        title_bottom = self.cursor

        self.cursor = top
        right_width = CONTENT_WIDTH * 0.4
        if event_name:
            self.paragraph(event_name, size=11, bold=True, align="right", width=right_width)
        if event_date:
            self.line(_format_datetime(event_date), size=9, align="right")

        travel = guest.travel
        summary = [
            ("Arrival", travel.arrival_location),
            ("Arrival time", _format_datetime(travel.arrival_datetime)),
            ("Departure", travel.departure_location),
            ("Departure time", _format_datetime(travel.departure_datetime)),
        ]
        for label, value in summary:
            if value:
                self.paragraph(f"{label}: {value}", size=9, align="right", width=right_width)

        self.cursor = max(self.cursor, title_bottom)
        self.gap()

    def contact(self, guest: GuestDTO) -> None:
        self.line(f"Email: {guest.email or '-'}")
        self.line(f"Phone: {guest.phone or '-'}")
        self.line(f"Status: {guest.status.value.upper()}")
        self.line(f"Total Guests: {guest.attending_count}")
        if guest.message:
            self.gap(6)
            self.line("Message:", bold=True)
            self.paragraph(guest.message)
        self.gap()

    def departure(self, guest: GuestDTO) -> None:
        details = guest.departure_details
        if details is None:
            return
        self.line("Departure Details", size=12, bold=True, kind="heading")
        if isinstance(details, NotTravellingDTO):
            self.line("No departure arrangements required")
        elif isinstance(details, PlannedDepartureDTO):
            when = _format_datetime(details.date)
            if details.time:
                when = f"{when} at {details.time.strftime('%I:%M %p')}"
            self.line(f"Date: {when}")
            for traveller in details.travellers:
                parts = [traveller.mode.value]
                if traveller.station:
                    parts.append(traveller.station)
                if traveller.ticket_reference:
                    parts.append(f"Ref {traveller.ticket_reference}")
                self.paragraph(f"- {traveller.name}: {', '.join(parts)}")
        if details.message:
            self.paragraph(f"Note: {details.message}")
        self.gap()

    async def attendee(self, position: int, attendee: AttendeeDTO) -> None:
        self.paragraph(
            f"{position}. {attendee.name} ({attendee.id_type.value})",
            size=12,
            bold=True,
            kind="heading",
        )
        details = f"Type: {attendee.guest_type.value}"
        if attendee.age is not None:
            details = f"Age: {attendee.age} | {details}"
        self.line(details, size=9)

        if not attendee.is_documented:
            self.line("No ID documents uploaded", size=9)
        if attendee.id_front:
            await self.attendee_image(attendee.id_front, "ID Front")
        if attendee.id_back:
            await self.attendee_image(attendee.id_back, "ID Back")
        self.gap()

    async def attendees(self, guest: GuestDTO) -> None:
        self.line("Attendees & ID Documents", size=14, bold=True, kind="heading")
        self.gap(4)
        if not guest.attendees:
            self.line("No detailed attendee data available.")
            return
        for position, attendee in enumerate(guest.attendees, start=1):
            await self.attendee(position, attendee)

    def finish(self) -> bytes:
        self._canvas.save()
        return self._buffer.getvalue()


async def build_guest_report(
    guest: GuestDTO,
    image_source: ImageSource,
    event_name: str | None = None,
    event_date: datetime | None = None,
) -> GuestReport:
    builder = GuestReportBuilder(image_source, title=f"{guest.name} details")
    builder.header(guest, event_name=event_name, event_date=event_date)
    builder.contact(guest)
    builder.departure(guest)
    await builder.attendees(guest)
    content = builder.finish()

    logger.info("Built report for guest %s: %d page(s)", guest.id, builder.page)
    return GuestReport(
        filename=report_filename(guest.name),
        content=content,
        page_count=builder.page,
        placements=tuple(builder.placements),
    )
