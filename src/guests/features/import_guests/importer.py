"""Guest list import: CSV bytes -> validated guest rows -> one bulk insert."""

import csv
import io
import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from uuid import UUID

from src.guests.columns import (
    ALLOWED_GUESTS_ALIASES,
    EMAIL_ALIASES,
    NAME_ALIASES,
    PHONE_ALIASES,
    find_value,
)
from src.guests.dtos import CsvParseError, GuestStatus, NewGuestDTO, NoValidGuestsError
from src.guests.repository.write_models import GuestWriteModel

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_GUESTS = 1

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class ImportResultDTO:
    imported: int
    skipped: int


def parse_csv(content: bytes) -> list[dict[str, str]]:
    """Read a CSV file with a header row into a list of header -> cell mappings.

    Blank lines are skipped. Raises CsvParseError for undecodable or malformed content.
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise CsvParseError(f"file is not UTF-8 text ({e.reason} at byte {e.start})") from e

    reader = csv.DictReader(io.StringIO(text, newline=""), strict=True)
    try:
        if not reader.fieldnames:
            raise CsvParseError("the file has no header row")
        rows = []
        for row in reader:
            if all(not (value or "").strip() for key, value in row.items() if key is not None):
                continue
            rows.append(row)
    except csv.Error as e:
        raise CsvParseError(f"line {reader.line_num}: {e}") from e

    return rows


def parse_allowed_guests(value: str | None) -> int:
    """Leading integer of the cell, or 1 when there is none."""
    if value is None:
        return DEFAULT_ALLOWED_GUESTS
    match = _LEADING_INT.match(str(value))
    if match is None:
        return DEFAULT_ALLOWED_GUESTS
    parsed = int(match.group(1))
    return parsed if parsed >= 0 else DEFAULT_ALLOWED_GUESTS


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def map_row(row: Mapping[str, str | None], event_id: UUID) -> NewGuestDTO | None:
    """Map one spreadsheet row to a guest, or None when the row has no name."""
    name = _clean(find_value(row, NAME_ALIASES))
    if not name:
        return None

    return NewGuestDTO(
        event_id=event_id,
        name=name,
        email=_clean(find_value(row, EMAIL_ALIASES)),
        phone=_clean(find_value(row, PHONE_ALIASES)),
        allowed_guests=parse_allowed_guests(find_value(row, ALLOWED_GUESTS_ALIASES)),
        status=GuestStatus.PENDING,
    )


def map_rows(rows: Iterable[Mapping[str, str | None]], event_id: UUID) -> list[NewGuestDTO]:
    guests = []
    for row in rows:
        guest = map_row(row, event_id)
        if guest is not None:
            guests.append(guest)
    return guests


class GuestImporter:
    def __init__(self, write_model: GuestWriteModel) -> None:
        self._write_model = write_model

    async def import_rows(
        self, event_id: UUID, rows: list[Mapping[str, str | None]]
    ) -> ImportResultDTO:
        guests = map_rows(rows, event_id)
        if not guests:
            raise NoValidGuestsError()

        imported = await self._write_model.bulk_insert(guests)
        logger.info(
            "Imported %d guests into event %s (%d rows without a name)",
            imported,
            event_id,
            len(rows) - len(guests),
        )
        return ImportResultDTO(imported=imported, skipped=len(rows) - len(guests))

    async def import_csv(self, event_id: UUID, content: bytes) -> ImportResultDTO:
        rows = parse_csv(content)
        return await self.import_rows(event_id, rows)
