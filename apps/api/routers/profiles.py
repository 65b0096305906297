"""Profile endpoints."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.deps import CallerContext, caller_context, get_db
from apps.api.schemas import ProfileIn, ProfileOut
from models.profile import Profile
from services import profiles
from services.safety import blocked_user_ids

router = APIRouter()


async def _profile_out(db: AsyncSession, profile: Profile) -> ProfileOut:
    out = ProfileOut.model_validate(profile)
    return out.model_copy(update={"blocked_users": await blocked_user_ids(db, profile.user_id)})


@router.get("/me", response_model=ProfileOut)
async def get_my_profile(
    db: AsyncSession = Depends(get_db), ctx: CallerContext = Depends(caller_context)
) -> ProfileOut:
    """Return the caller's profile (404 if none yet)."""
    profile = await profiles.get_profile(db, ctx)
    return await _profile_out(db, profile)


@router.post("", response_model=ProfileOut)
async def upsert_my_profile(
    body: ProfileIn, db: AsyncSession = Depends(get_db), ctx: CallerContext = Depends(caller_context)
) -> ProfileOut:
    """
    Create the caller's profile or update it.

    The first call must carry username, age, gender and city; later calls may
    send any subset of fields.
    """
    profile, _ = await profiles.upsert_profile(db, ctx, body.model_dump(exclude_unset=True))
    return await _profile_out(db, profile)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_my_profile(
    db: AsyncSession = Depends(get_db), ctx: CallerContext = Depends(caller_context)
) -> Response:
    """Soft-delete the caller's profile."""
    await profiles.delete_profile(db, ctx)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
