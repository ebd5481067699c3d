"""Seed script for challenges, each with its group forum room."""
import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.domain.challenges.services import ChallengeService
from app.infra.db.base import AsyncSessionLocal, engine
from app.infra.db.repositories.challenge_repo import ChallengeRepository


# (name, description, duration in days)
CHALLENGES = [
    (
        "6 AM Early Bird",
        "Wake up at 6 AM every day to win your morning. Share your morning routine and victory photos here!",
        30,
    ),
    (
        "75 Hard (Modified)",
        "A transformative mental toughness program. Two 45-min workouts, a gallon of water, "
        "clean diet, and 10 pages of reading.",
        75,
    ),
    (
        "Code Daily",
        "Consistency is key. Commit to writing code for at least 1 hour every single day. No zero days!",
        100,
    ),
    (
        "Hydro Hero",
        "Stay hydrated! Drink 3 liters of water daily. Track your intake and feel the energy boost.",
        21,
    ),
    (
        "Mindful Minutes",
        "15 minutes of meditation or deep breathing. Find your center in the chaos of daily life.",
        30,
    ),
    (
        "Step Master 10K",
        "Hit 10,000 steps every day. Perfect for health, weight loss, and mental clarity. Let's walk together!",
        60,
    ),
]


async def seed_challenges():
    """Create missing challenges. Existing names are left untouched."""
    async with AsyncSessionLocal() as session:
        repo = ChallengeRepository(session)
        service = ChallengeService(session)
        created = 0
        for name, description, duration in CHALLENGES:
            if await repo.get_by_name(name):
                print(f"Challenge already exists: {name}")
                continue
            await service.create_challenge(name, description, duration)
            created += 1
            print(f"Created challenge: {name}")
        print(f"Seed completed ({created} new challenges).")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_challenges())
