"""Match reconciler: turns a reciprocal LIKE into exactly one Match row."""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.db import insert_for
from core.metrics import matches_created_total
from models.match import Match, pair_key
from models.swipe import LIKE, Swipe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwipeResult:
    """Outcome of a swipe as seen by the client."""

    matched: bool
    match_id: int | None = None


async def has_mirror_like(db: AsyncSession, swiper_id: str, target_id: str) -> bool:
    """True if target_id has LIKEd swiper_id."""
    result = await db.execute(
        select(Swipe.id).where(
            Swipe.swiper_id == target_id,
            Swipe.target_id == swiper_id,
            Swipe.direction == LIKE,
        )
    )
    return result.scalar_one_or_none() is not None


async def find_match(db: AsyncSession, user_x: str, user_y: str) -> Match | None:
    """Return the match for the unordered pair {user_x, user_y}, if any."""
    u_lo, u_hi = pair_key(user_x, user_y)
    result = await db.execute(select(Match).where(Match.u_lo == u_lo, Match.u_hi == u_hi))
    return result.scalar_one_or_none()


async def reconcile(db: AsyncSession, swiper_id: str, target_id: str) -> SwipeResult:
    """
    Check reciprocity for a LIKE from swiper_id to target_id and materialise the match.

    The insert is guarded by the unique (u_lo, u_hi) index with ON CONFLICT DO
    NOTHING, so two concurrent reconciliations for the same pair both end up
    returning the single surviving row. A conflict is the "already matched"
    outcome, not an error.

    Does not commit; the caller owns the transaction.
    """
    if not await has_mirror_like(db, swiper_id, target_id):
        return SwipeResult(matched=False)

    u_lo, u_hi = pair_key(swiper_id, target_id)
    stmt = (
        insert_for(db, Match.__table__)
        .values(user1_id=swiper_id, user2_id=target_id, u_lo=u_lo, u_hi=u_hi, created_at=datetime.utcnow())
        .on_conflict_do_nothing(index_elements=["u_lo", "u_hi"])
    )
    result = await db.execute(stmt)
    created = result.rowcount == 1

    match = await find_match(db, swiper_id, target_id)
    if match is None:
        # Only reachable if the row vanished between insert and read; matches are never deleted
        raise RuntimeError(f"Match for pair ({u_lo}, {u_hi}) missing after guarded insert")

    matches_created_total.labels(status="created" if created else "existing").inc()
    if created:
        logger.info(f"Match created: id={match.id}, pair=({u_lo}, {u_hi})")
    return SwipeResult(matched=True, match_id=match.id)
