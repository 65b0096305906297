#!/usr/bin/env python3
"""
Seed the database with demo profiles.

Usage:
  scripts/seed.py            - insert demo profiles (skips existing user ids)
  scripts/seed.py --reset    - delete the demo rows first, then insert them again
"""

import asyncio
import os
import sys

from sqlalchemy import delete, select

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import settings
from core.db import AsyncSessionLocal
from models.profile import Profile

DEMO_PROFILES = [
    {
        "user_id": "demo-alice",
        "username": "Alice",
        "age": 24,
        "gender": "Female",
        "city": "New York",
        "bio": "Love hiking and coffee.",
        "photos": [
            "https://images.unsplash.com/photo-1494790108377-be9c29b29330?w=500",
            "https://images.unsplash.com/photo-1524504388940-b1c1722653e1?w=500",
        ],
    },
    {
        "user_id": "demo-bob",
        "username": "Bob",
        "age": 28,
        "gender": "Male",
        "city": "Brooklyn",
        "bio": "Building things is my passion.",
        "photos": ["https://images.unsplash.com/photo-1500648767791-00dcc994a43e?w=500"],
    },
    {
        "user_id": "demo-charlie",
        "username": "Charlie",
        "age": 26,
        "gender": "Non-binary",
        "city": "Queens",
        "bio": "Artist and dreamer.",
        "photos": ["https://images.unsplash.com/photo-1534528741775-53994a69daeb?w=500"],
    },
]


async def seed(reset: bool) -> None:
    """Insert demo profiles."""
    demo_ids = [p["user_id"] for p in DEMO_PROFILES]

    async with AsyncSessionLocal() as db:
        if reset:
            await db.execute(delete(Profile).where(Profile.user_id.in_(demo_ids)))
            print(f"Removed existing demo profiles: {', '.join(demo_ids)}")

        result = await db.execute(select(Profile.user_id).where(Profile.user_id.in_(demo_ids)))
        existing = set(result.scalars().all())

        for data in DEMO_PROFILES:
            if data["user_id"] in existing:
                print(f"  = {data['username']} ({data['user_id']}) already present")
                continue
            db.add(Profile(**data, is_underage=data["age"] < settings.min_adult_age))
            print(f"  + {data['username']} ({data['user_id']})")

        await db.commit()

    print("Seeding complete!")


if __name__ == "__main__":
    # Load environment variables
    from dotenv import load_dotenv

    load_dotenv()

    asyncio.run(seed(reset="--reset" in sys.argv[1:]))
