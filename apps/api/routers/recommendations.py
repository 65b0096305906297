"""Recommendation feed endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.deps import CallerContext, caller_context, get_db
from apps.api.schemas import PublicProfileOut
from services.feed import get_recommendations

router = APIRouter()


@router.get("", response_model=list[PublicProfileOut])
async def recommendations(
    db: AsyncSession = Depends(get_db), ctx: CallerContext = Depends(caller_context)
) -> list[PublicProfileOut]:
    """Profiles the caller has not swiped on yet."""
    candidates = await get_recommendations(db, ctx)
    return [PublicProfileOut.model_validate(profile) for profile in candidates]
