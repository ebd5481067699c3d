"""Utility API: pomodoro timer and reminders."""
from fastapi import APIRouter

from app.api.utility import routes_pomodoro, routes_reminders

router = APIRouter()

router.include_router(routes_pomodoro.router, prefix="/pomodoro", tags=["pomodoro"])
router.include_router(routes_reminders.router, prefix="/reminders", tags=["reminders"])
