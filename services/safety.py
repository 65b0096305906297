"""Blocks and reports."""

import logging

import redis.asyncio as redis
from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import CallerContext
from core.config import settings
from core.db import insert_for
from core.errors import RateLimitedError, ValidationError
from core.metrics import blocks_total, reports_total
from models.safety import REPORT_REASONS, Report, UserBlock
from services.profiles import apply_penalty, require_profile

logger = logging.getLogger(__name__)


async def blocked_user_ids(db: AsyncSession, user_id: str) -> list[str]:
    """Users that user_id has blocked, oldest first."""
    result = await db.execute(
        select(UserBlock.blocked_id).where(UserBlock.blocker_id == user_id).order_by(UserBlock.created_at)
    )
    return list(result.scalars().all())


async def blocked_pairs(db: AsyncSession, user_id: str) -> set[str]:
    """Users separated from user_id by a block in either direction."""
    result = await db.execute(
        select(UserBlock.blocker_id, UserBlock.blocked_id).where(
            or_(UserBlock.blocker_id == user_id, UserBlock.blocked_id == user_id)
        )
    )
    return {blocked if blocker == user_id else blocker for blocker, blocked in result.all()}


async def is_blocked_between(db: AsyncSession, user_x: str, user_y: str) -> bool:
    """True if either user has blocked the other."""
    result = await db.execute(
        select(UserBlock.blocker_id)
        .where(
            or_(
                and_(UserBlock.blocker_id == user_x, UserBlock.blocked_id == user_y),
                and_(UserBlock.blocker_id == user_y, UserBlock.blocked_id == user_x),
            )
        )
        .limit(1)
    )
    return result.scalar_one_or_none() is not None


async def _insert_block(db: AsyncSession, blocker_id: str, blocked_id: str) -> bool:
    """Insert a block row; returns False when it already existed."""
    stmt = (
        insert_for(db, UserBlock.__table__)
        .values(blocker_id=blocker_id, blocked_id=blocked_id)
        .on_conflict_do_nothing(index_elements=["blocker_id", "blocked_id"])
    )
    result = await db.execute(stmt)
    if result.rowcount != 1:
        return False
    await apply_penalty(db, blocked_id, "block")
    blocks_total.inc()
    return True


async def block_user(db: AsyncSession, ctx: CallerContext, target_id: str) -> bool:
    """
    Block target_id for the caller.

    The block hides each user from the other's feed and match list. Blocking
    twice is a no-op and does not penalise the target again.

    Returns:
        True if a new block was created

    Raises:
        ValidationError: Self-block
        NotFoundError: Target has no profile
    """
    if target_id == ctx.user_id:
        raise ValidationError("cannot block self", field="targetId")
    await require_profile(db, target_id)

    created = await _insert_block(db, ctx.user_id, target_id)
    await db.commit()

    if created:
        logger.info(f"Block executed: blocker={ctx.user_id}, blocked={target_id}")
    return created


async def report_user(
    db: AsyncSession,
    redis_client: redis.Redis,
    ctx: CallerContext,
    target_id: str,
    reason: str,
    comment: str | None = None,
) -> Report:
    """
    File a report against target_id and block them for the reporter.

    Validates:
    - Reason is in the allowed list
    - Reporter is not the target and the target has a profile
    - Rate limit: 1 report per REPORT_RATE_LIMIT_SECONDS per reporter

    An "unresponsive" report also counts as a chat failure for the target.

    Raises:
        ValidationError: Unknown reason or self-report
        NotFoundError: Target has no profile
        RateLimitedError: Reporter is inside the throttle window
    """
    if reason not in REPORT_REASONS:
        raise ValidationError(f"Invalid reason. Must be one of: {', '.join(REPORT_REASONS)}", field="reason")
    if target_id == ctx.user_id:
        raise ValidationError("cannot report self", field="targetId")
    await require_profile(db, target_id)

    window = settings.report_rate_limit_seconds
    rl_key = f"rl:report:{ctx.user_id}"
    if not await redis_client.set(rl_key, "1", nx=True, ex=window):
        raise RateLimitedError("Too many reports. Please wait before reporting again.", retry_after=window)

    try:
        report = Report(from_user=ctx.user_id, to_user=target_id, reason=reason, comment=comment or None)
        db.add(report)
        await _insert_block(db, ctx.user_id, target_id)
        if reason == "unresponsive":
            await apply_penalty(db, target_id, "chat_fail")
        await db.commit()
    except SQLAlchemyError:
        # The report was not stored, so it must not count against the window
        await db.rollback()
        await redis_client.delete(rl_key)
        raise
    await db.refresh(report)

    reports_total.labels(reason=reason).inc()
    logger.info(f"Report created: from={ctx.user_id}, to={target_id}, reason={reason}")
    return report
