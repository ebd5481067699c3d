"""Habits and analytics API."""
from fastapi import APIRouter

from app.api.habits import routes_habits, routes_analytics

router = APIRouter()

router.include_router(routes_habits.router, prefix="/habits", tags=["habits"])
router.include_router(routes_analytics.router, prefix="/analytics", tags=["analytics"])
