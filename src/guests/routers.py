from fastapi import APIRouter

from .features.export_guests.router import router as export_guests_router
from .features.guest_report.router import router as guest_report_router
from .features.import_guests.router import router as import_guests_router
from .features.manage_guests.router import router as manage_guests_router
from .features.rsvp.router import router as rsvp_router

router = APIRouter()

# export/import paths must be matched before /guests/{guest_id}
router.include_router(export_guests_router)
router.include_router(import_guests_router)
router.include_router(guest_report_router)
router.include_router(manage_guests_router)
router.include_router(rsvp_router)
