import csv
import io
from collections.abc import Iterable

from src.guests.dtos import GuestDTO

EXPORT_COLUMNS = ["Name", "Email", "Phone", "Allowed Guests", "Status", "Attending Count"]
DOCS_UPLOADED_COLUMN = "Docs Uploaded"


def _cell(value) -> str:
    if value is None:
        return ""
    return str(value)


def export_row(guest: GuestDTO, include_docs: bool = False) -> list[str]:
    row = [
        _cell(guest.name),
        _cell(guest.email),
        _cell(guest.phone),
        _cell(guest.allowed_guests),
        guest.status.value,
        _cell(guest.attending_count),
    ]
    if include_docs:
        row.append(_cell(guest.docs_uploaded))
    return row


def export_guests_csv(guests: Iterable[GuestDTO], include_docs: bool = False) -> str:
    """Serialize guests, in the order given, to CSV text with a header row.

    `include_docs` adds the hotel-facing "Docs Uploaded" column.
    """
    output = io.StringIO(newline="")
    writer = csv.writer(output, lineterminator="\r\n")
    header = EXPORT_COLUMNS + [DOCS_UPLOADED_COLUMN] if include_docs else EXPORT_COLUMNS
    writer.writerow(header)
    for guest in guests:
        writer.writerow(export_row(guest, include_docs=include_docs))
    return output.getvalue()


def export_filename(event_name: str | None) -> str:
    return f"{event_name or 'guests'}_export.csv"
