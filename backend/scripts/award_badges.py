"""Re-evaluate badge thresholds for every user (backfill after adding badges)."""
import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from app.domain.badges.models import BadgeType
from app.domain.badges.services import BadgeService
from app.infra.db.base import AsyncSessionLocal, engine
from app.infra.db.models.user import UserModel


async def award_badges():
    async with AsyncSessionLocal() as session:
        user_ids = (await session.execute(select(UserModel.id))).scalars().all()
        service = BadgeService(session)
        total = 0
        for user_id in user_ids:
            for badge_type in BadgeType:
                awarded = await service.evaluate(user_id, badge_type)
                for badge in awarded:
                    print(f"{user_id}: unlocked {badge.name}")
                total += len(awarded)
        await session.commit()
        print(f"Checked {len(user_ids)} users, awarded {total} badges.")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(award_badges())
