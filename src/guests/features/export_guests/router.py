from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from src.events.access import manage_event_guests, view_event_guests
from src.events.dtos import EventDTO
from src.guests.dependencies import get_guest_read_model
from src.guests.features.export_guests.exporter import export_filename, export_guests_csv
from src.guests.repository.read_models import GuestReadModel
from src.guests.urls import EXPORT_GUESTS_URL, HOTEL_EXPORT_GUESTS_URL

router = APIRouter()


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}",
        },
    )


@router.get(EXPORT_GUESTS_URL, response_class=Response)
async def export_guests(
    q: str | None = Query(None, description="Only export guests matching name or email"),
    event: EventDTO = Depends(manage_event_guests),
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> Response:
    """Download the (optionally filtered) guest list as CSV."""
    guests = await read_model.list_for_event(event.id, query=q)
    return _csv_response(export_guests_csv(guests), export_filename(event.name))


@router.get(HOTEL_EXPORT_GUESTS_URL, response_class=Response)
async def export_guests_for_hotel(
    q: str | None = Query(None, description="Only export guests matching name or email"),
    event: EventDTO = Depends(view_event_guests),
    read_model: GuestReadModel = Depends(get_guest_read_model),
) -> Response:
    """Hotel variant of the export, with the number of attendees who uploaded ID documents."""
    guests = await read_model.list_for_event(event.id, query=q)
    return _csv_response(
        export_guests_csv(guests, include_docs=True), export_filename(event.name)
    )
