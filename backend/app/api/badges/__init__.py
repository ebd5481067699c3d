"""Badges API."""
from fastapi import APIRouter

from app.api.badges import routes_badges

router = APIRouter()

router.include_router(routes_badges.router, prefix="/badges", tags=["badges"])
