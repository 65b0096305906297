"""Recommendation feed: exclusion-filtered candidate listing."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import CallerContext
from core.config import settings
from core.metrics import recommendations_served
from models.profile import Profile
from models.safety import UserBlock
from models.swipe import Swipe


async def get_recommendations(db: AsyncSession, ctx: CallerContext, limit: int | None = None) -> list[Profile]:
    """
    List candidate profiles for the caller.

    Excluded: the caller, every target the caller already swiped on (either
    direction, no undo), soft-deleted profiles, users the caller blocked and
    users who blocked the caller. Ordered by profile id so the listing is
    stable while nothing changes. Read-only.
    """
    user_id = ctx.user_id
    swiped = select(Swipe.target_id).where(Swipe.swiper_id == user_id)
    blocked_by_caller = select(UserBlock.blocked_id).where(UserBlock.blocker_id == user_id)
    blocked_caller = select(UserBlock.blocker_id).where(UserBlock.blocked_id == user_id)

    query = (
        select(Profile)
        .where(
            Profile.user_id != user_id,
            Profile.is_deleted.is_(False),
            Profile.user_id.not_in(swiped),
            Profile.user_id.not_in(blocked_by_caller),
            Profile.user_id.not_in(blocked_caller),
        )
        .order_by(Profile.id)
        .limit(limit or settings.feed_limit)
    )

    result = await db.execute(query)
    profiles = list(result.scalars().all())
    recommendations_served.observe(len(profiles))
    return profiles
