"""Swipe endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.deps import CallerContext, caller_context, get_db
from apps.api.schemas import SwipeIn, SwipeOut
from services.swipes import record_swipe

router = APIRouter()


@router.post("", response_model=SwipeOut, response_model_exclude_none=True)
async def create_swipe(
    body: SwipeIn, db: AsyncSession = Depends(get_db), ctx: CallerContext = Depends(caller_context)
) -> SwipeOut:
    """Record a LIKE/PASS; reports whether it completed a match."""
    result = await record_swipe(db, ctx, body.target_id, body.direction)
    return SwipeOut(matched=result.matched, match_id=result.match_id)
