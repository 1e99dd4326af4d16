from fastapi import APIRouter

from .features.login.router import router as login_router
from .features.signup.router import router as signup_router

router = APIRouter()

router.include_router(signup_router)
router.include_router(login_router)
