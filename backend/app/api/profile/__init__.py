"""Profile and account settings API."""
from fastapi import APIRouter

from app.api.profile import routes_profile, routes_settings

router = APIRouter()

router.include_router(routes_profile.router, prefix="/profile", tags=["profile"])
router.include_router(routes_settings.router, prefix="/settings", tags=["settings"])
