#!/usr/bin/env python3
"""
Script to inspect a user's profile, swipes and matches in the database.
"""

import asyncio
import os
import sys

from sqlalchemy import or_, select

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.db import AsyncSessionLocal
from models.match import Match
from models.message import Message
from models.profile import Profile
from models.swipe import Swipe


async def check_user(user_id: str) -> None:
    """Print profile, outgoing swipes and matches for one user."""

    async with AsyncSessionLocal() as db:
        result = await db.execute(select(Profile).where(Profile.user_id == user_id))
        profile = result.scalar_one_or_none()

        if not profile:
            print(f"No profile for user '{user_id}'")
            return

        print(f"Profile: {profile.username} (user_id: {profile.user_id}, age: {profile.age}, city: {profile.city})")
        print(f"   exposure: {profile.exposure_score}  dislikes: {profile.dislike_count}  ", end="")
        print(f"blocks: {profile.block_count}  chat fails: {profile.chat_fail_count}  deleted: {profile.is_deleted}")
        print()

        swipes_result = await db.execute(
            select(Swipe).where(Swipe.swiper_id == user_id).order_by(Swipe.created_at)
        )
        swipes = swipes_result.scalars().all()
        print(f"Swipes ({len(swipes)}):")
        for swipe in swipes:
            print(f"   • {swipe.direction:<4} -> {swipe.target_id} at {swipe.created_at}")
        print()

        matches_result = await db.execute(
            select(Match).where(or_(Match.user1_id == user_id, Match.user2_id == user_id)).order_by(Match.id)
        )
        matches = matches_result.scalars().all()
        print(f"Matches ({len(matches)}):")
        for match in matches:
            count_result = await db.execute(select(Message.id).where(Message.match_id == match.id))
            message_count = len(count_result.scalars().all())
            print(f"   • #{match.id} with {match.partner_of(user_id)} ({message_count} messages)")


async def list_all_profiles() -> None:
    """List all profiles in the database."""

    async with AsyncSessionLocal() as db:
        result = await db.execute(select(Profile).order_by(Profile.id))
        profiles = result.scalars().all()

        if not profiles:
            print("No profiles in the database")
            return

        print(f"All profiles ({len(profiles)}):")
        for profile in profiles:
            flag = " [deleted]" if profile.is_deleted else ""
            print(f"   • {profile.username} (user_id: {profile.user_id}){flag}")


async def main() -> None:
    if len(sys.argv) < 2:
        print("Usage:")
        print(f"  {sys.argv[0]} <user_id>     - show a user's swipes and matches")
        print(f"  {sys.argv[0]} --profiles    - list all profiles")
        return

    if sys.argv[1] == "--profiles":
        await list_all_profiles()
    else:
        await check_user(sys.argv[1])


if __name__ == "__main__":
    # Load environment variables
    from dotenv import load_dotenv

    load_dotenv()

    asyncio.run(main())
