"""Profile store: create/update/read profiles, soft delete and exposure penalties."""

import logging
from typing import Any

from sqlalchemy import case, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import CallerContext
from core.config import settings
from core.errors import NotFoundError, ValidationError
from core.metrics import penalties_total, profiles_created_total, profiles_deleted_total, profiles_edited_total
from models.profile import Profile

logger = logging.getLogger(__name__)

REQUIRED_ON_CREATE = ("username", "age", "gender", "city")
EDITABLE_FIELDS = ("username", "age", "gender", "city", "bio", "photos")

# kind -> (counter column, exposure score decrement)
PENALTIES: dict[str, tuple[str, int]] = {
    "dislike": ("dislike_count", 30),
    "block": ("block_count", 20),
    "chat_fail": ("chat_fail_count", 10),
}


async def find_profile(db: AsyncSession, user_id: str) -> Profile | None:
    """Return the profile for user_id, or None."""
    result = await db.execute(select(Profile).where(Profile.user_id == user_id))
    return result.scalar_one_or_none()


async def get_profile(db: AsyncSession, ctx: CallerContext) -> Profile:
    """Return the caller's profile or raise NotFoundError."""
    profile = await find_profile(db, ctx.user_id)
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile


async def require_profile(db: AsyncSession, user_id: str) -> Profile:
    """Return a live (not soft-deleted) profile for user_id or raise NotFoundError."""
    profile = await find_profile(db, user_id)
    if profile is None or profile.is_deleted:
        raise NotFoundError("Profile not found")
    return profile


def _check_fields(fields: dict[str, Any]) -> None:
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Field is not editable: {sorted(unknown)[0]}", field=sorted(unknown)[0])

    age = fields.get("age")
    if "age" in fields and (not isinstance(age, int) or isinstance(age, bool) or age <= 0):
        raise ValidationError("age must be a positive integer", field="age")

    for name in ("username", "gender", "city"):
        if name in fields and (not isinstance(fields[name], str) or not fields[name].strip()):
            raise ValidationError(f"{name} must not be empty", field=name)

    if "photos" in fields and fields["photos"] is not None:
        if not all(isinstance(url, str) for url in fields["photos"]):
            raise ValidationError("photos must be a list of URLs", field="photos")


async def upsert_profile(db: AsyncSession, ctx: CallerContext, fields: dict[str, Any]) -> tuple[Profile, bool]:
    """
    Create the caller's profile on first call, update it afterwards.

    Args:
        db: Database session
        ctx: Caller identity
        fields: Editable profile attributes; full set on create, any subset on update

    Returns:
        (profile, created)

    Raises:
        ValidationError: On malformed fields or missing required fields at creation
    """
    _check_fields(fields)
    profile = await find_profile(db, ctx.user_id)
    created = profile is None

    if profile is None:
        for name in REQUIRED_ON_CREATE:
            if fields.get(name) is None:
                raise ValidationError(f"{name} is required", field=name)
        profile = Profile(user_id=ctx.user_id, photos=[])
        db.add(profile)

    for name, value in fields.items():
        if name == "photos" and value is None:
            value = []
        setattr(profile, name, value)
    profile.is_underage = profile.age < settings.min_adult_age

    await db.commit()
    await db.refresh(profile)

    if created:
        profiles_created_total.inc()
        logger.info(f"Profile created: user={ctx.user_id}")
    else:
        profiles_edited_total.inc()
    return profile, created


async def delete_profile(db: AsyncSession, ctx: CallerContext) -> None:
    """Soft-delete the caller's profile. Repeated calls are no-ops."""
    profile = await get_profile(db, ctx)
    if profile.is_deleted:
        return
    profile.is_deleted = True
    await db.commit()
    profiles_deleted_total.inc()
    logger.info(f"Profile soft-deleted: user={ctx.user_id}")


async def apply_penalty(db: AsyncSession, user_id: str, kind: str) -> None:
    """
    Bump the penalty counter for kind and lower exposure_score, clamped at 0.

    Runs as a single UPDATE so concurrent penalties do not lose increments.
    Does not commit; callers commit together with the triggering write.
    """
    counter_name, amount = PENALTIES[kind]
    counter = getattr(Profile, counter_name)
    await db.execute(
        update(Profile)
        .where(Profile.user_id == user_id)
        .values(
            {
                counter: counter + 1,
                Profile.exposure_score: case(
                    (Profile.exposure_score - amount < 0, 0), else_=Profile.exposure_score - amount
                ),
            }
        )
        .execution_options(synchronize_session="fetch")
    )
    penalties_total.labels(kind=kind).inc()
