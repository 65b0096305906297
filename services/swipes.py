"""Swipe ledger: one effective decision per ordered (swiper, target) pair."""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import CallerContext
from core.db import advisory_xact_lock, insert_for
from core.errors import NotFoundError, ValidationError
from core.metrics import swipes_total
from models.match import pair_lock_key
from models.swipe import DIRECTIONS, LIKE, PASS, Swipe
from services.profiles import apply_penalty, require_profile
from services.reconciler import SwipeResult, reconcile
from services.safety import is_blocked_between

logger = logging.getLogger(__name__)


async def current_direction(db: AsyncSession, swiper_id: str, target_id: str) -> str | None:
    """Return the effective direction swiper_id chose for target_id, if any."""
    result = await db.execute(
        select(Swipe.direction).where(Swipe.swiper_id == swiper_id, Swipe.target_id == target_id)
    )
    return result.scalar_one_or_none()


async def _upsert_swipe(db: AsyncSession, swiper_id: str, target_id: str, direction: str) -> None:
    stmt = insert_for(db, Swipe.__table__).values(
        swiper_id=swiper_id, target_id=target_id, direction=direction, created_at=datetime.utcnow()
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["swiper_id", "target_id"],
        set_={"direction": stmt.excluded.direction, "created_at": stmt.excluded.created_at},
    )
    await db.execute(stmt)


async def record_swipe(db: AsyncSession, ctx: CallerContext, target_id: str, direction: str) -> SwipeResult:
    """
    Record the caller's decision about target_id and reconcile LIKEs.

    Re-swiping the same target overwrites the previous decision instead of
    adding a row. A PASS never reaches the reconciler, so it cannot create a
    match even when the target already liked the caller.

    The swipe upsert and reconciliation share one transaction, taken under a
    per-pair advisory lock: two reciprocal LIKEs arriving together run one
    after the other, and the second one sees the first and creates the match.

    Args:
        db: Database session
        ctx: Caller identity (the swiper)
        target_id: User being swiped on
        direction: LIKE or PASS

    Returns:
        SwipeResult with matched flag and match id

    Raises:
        ValidationError: Self-swipe or unknown direction
        NotFoundError: Target has no live profile, or a block separates the pair
    """
    swiper_id = ctx.user_id
    if target_id == swiper_id:
        raise ValidationError("cannot swipe on self", field="targetId")
    if direction not in DIRECTIONS:
        raise ValidationError(f"direction must be one of {', '.join(DIRECTIONS)}", field="direction")

    await require_profile(db, target_id)
    if await is_blocked_between(db, swiper_id, target_id):
        raise NotFoundError("Profile not found")

    # Serialise both directions of the pair so the mirror check below sees a
    # concurrent reciprocal LIKE once it has committed
    await advisory_xact_lock(db, pair_lock_key(swiper_id, target_id))
    previous = await current_direction(db, swiper_id, target_id)
    await _upsert_swipe(db, swiper_id, target_id, direction)

    if direction == PASS:
        if previous != PASS:
            await apply_penalty(db, target_id, "dislike")
        await db.commit()
        swipes_total.labels(direction=PASS).inc()
        logger.info(f"Swipe recorded: {swiper_id} -> {target_id} PASS")
        return SwipeResult(matched=False)

    result = await reconcile(db, swiper_id, target_id)
    await db.commit()

    swipes_total.labels(direction=LIKE).inc()
    logger.info(f"Swipe recorded: {swiper_id} -> {target_id} LIKE (matched={result.matched})")
    return result
