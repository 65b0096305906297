"""Blocking and reporting endpoints."""

import redis.asyncio as redis
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.deps import CallerContext, caller_context, get_db, get_redis_client
from apps.api.schemas import BlockIn, OkOut, ReportIn
from services.safety import block_user, report_user

router = APIRouter()


@router.post("/blocks", response_model=OkOut)
async def block(
    body: BlockIn, db: AsyncSession = Depends(get_db), ctx: CallerContext = Depends(caller_context)
) -> OkOut:
    """Hide a user from the caller and the caller from them."""
    await block_user(db, ctx, body.target_id)
    return OkOut()


@router.post("/reports", response_model=OkOut)
async def report(
    body: ReportIn,
    db: AsyncSession = Depends(get_db),
    redis_client: redis.Redis = Depends(get_redis_client),
    ctx: CallerContext = Depends(caller_context),
) -> OkOut:
    """
    Report a user. The reported user is blocked for the caller as well.

    Rate limited to one report per caller per window (429 otherwise).
    """
    await report_user(db, redis_client, ctx, body.target_id, body.reason, body.comment)
    return OkOut()
