from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from pydantic import BaseModel

from src.events.access import manage_event_guests
from src.events.dtos import EventDTO
from src.guests.dependencies import get_guest_write_model
from src.guests.dtos import CsvParseError, GuestStoreError, NoValidGuestsError
from src.guests.features.import_guests.importer import GuestImporter
from src.guests.repository.write_models import GuestWriteModel
from src.guests.urls import IMPORT_GUESTS_URL

router = APIRouter()


class ImportGuestsResponse(BaseModel):
    imported: int
    skipped: int
    message: str


def get_guest_importer(
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> GuestImporter:
    """Dependency to get guest importer instance."""
    return GuestImporter(write_model)


@router.post(IMPORT_GUESTS_URL, response_model=ImportGuestsResponse)
async def import_guests(
    file: UploadFile = File(...),
    event: EventDTO = Depends(manage_event_guests),
    importer: GuestImporter = Depends(get_guest_importer),
) -> ImportGuestsResponse:
    """
    Import a guest list from a CSV file.

    Columns are matched by common header names (Name / Full Name / Guest Name,
    Email, Phone / Mobile, Guests / Count ...). Rows without a name are skipped.
    The whole file is imported in one go or not at all.
    """
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Error importing guests: please upload a .csv file",
        )

    content = await file.read()
    try:
        result = await importer.import_csv(event.id, content)
    except CsvParseError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NoValidGuestsError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except GuestStoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return ImportGuestsResponse(
        imported=result.imported,
        skipped=result.skipped,
        message=f"Successfully imported {result.imported} guests.",
    )
