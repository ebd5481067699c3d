"""Challenges API."""
from fastapi import APIRouter

from app.api.challenges import routes_challenges

router = APIRouter()

router.include_router(routes_challenges.router, prefix="/challenges", tags=["challenges"])
