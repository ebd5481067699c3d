"""Posts (feed) API."""
from fastapi import APIRouter

from app.api.posts import routes_posts

router = APIRouter()

router.include_router(routes_posts.router, prefix="/posts", tags=["posts"])
