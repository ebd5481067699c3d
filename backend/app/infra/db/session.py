"""Request-scoped database sessions."""
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from app.infra.db.base import AsyncSessionLocal


async def get_db() -> AsyncIterator[AsyncSession]:
    """Yield one session per request; anything left uncommitted is rolled back on error."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
