from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from src.events.access import manage_event_guests, view_event_guests
from src.events.dtos import EventDTO
from src.guests.dependencies import get_guest_read_model
from src.guests.features.guest_report.images import ImageLoader
from src.guests.features.guest_report.layout import GuestReport, ImageSource, build_guest_report
from src.guests.repository.read_models import GuestReadModel
from src.guests.urls import GUEST_REPORT_URL, HOTEL_GUEST_REPORT_URL

router = APIRouter()


def get_image_source() -> ImageSource:
    """Dependency to get the loader used for attendee ID images."""
    return ImageLoader()


async def _build(
    event: EventDTO, guest_id: UUID, read_model: GuestReadModel, image_source: ImageSource
) -> GuestReport:
    guest = await read_model.get_guest(guest_id, event_id=event.id)
    if guest is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Guest not found")
    return await build_guest_report(
        guest, image_source, event_name=event.name, event_date=event.date
    )


def _pdf_response(report: GuestReport) -> Response:
    return Response(
        content=report.content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(report.filename)}",
            "X-Page-Count": str(report.page_count),
        },
    )


@router.get(GUEST_REPORT_URL, response_class=Response)
async def guest_report(
    guest_id: UUID,
    event: EventDTO = Depends(manage_event_guests),
    read_model: GuestReadModel = Depends(get_guest_read_model),
    image_source: ImageSource = Depends(get_image_source),
) -> Response:
    """Printable PDF with the guest's RSVP details and attendee ID documents."""
    report = await _build(event, guest_id, read_model, image_source)
    return _pdf_response(report)


@router.get(HOTEL_GUEST_REPORT_URL, response_class=Response)
async def guest_report_for_hotel(
    guest_id: UUID,
    event: EventDTO = Depends(view_event_guests),
    read_model: GuestReadModel = Depends(get_guest_read_model),
    image_source: ImageSource = Depends(get_image_source),
) -> Response:
    report = await _build(event, guest_id, read_model, image_source)
    return _pdf_response(report)
