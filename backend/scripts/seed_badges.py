"""Seed script for the badge catalogue."""
import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.domain.badges.services import BadgeService
from app.infra.db.base import AsyncSessionLocal, engine


async def seed_badges():
    """Insert the default badges that are not in the catalogue yet."""
    async with AsyncSessionLocal() as session:
        created = await BadgeService(session).seed_defaults()
        await session.commit()
        if created:
            print(f"Successfully seeded {created} badges.")
        else:
            print("All badges already present. Skipping seed.")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_badges())
