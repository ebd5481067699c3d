"""Chat API."""
from fastapi import APIRouter

from app.api.chat import routes_chat

router = APIRouter()

router.include_router(routes_chat.router, prefix="/chat", tags=["chat"])
