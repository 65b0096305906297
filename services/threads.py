"""Match list and per-match message threads."""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import CallerContext
from core.config import settings
from core.errors import AuthorizationError, NotFoundError, ValidationError
from core.metrics import messages_sent_total
from models.match import Match
from models.message import Message
from models.profile import Profile
from services.safety import blocked_pairs, is_blocked_between

logger = logging.getLogger(__name__)


@dataclass
class MatchSummary:
    """A match as seen by one participant."""

    match: Match
    partner_id: str
    partner: Profile
    last_message: Message | None


def is_participant(match: Match, user_id: str) -> bool:
    """Membership predicate gating every thread operation."""
    return user_id in (match.user1_id, match.user2_id)


async def get_match_for(db: AsyncSession, ctx: CallerContext, match_id: int) -> Match:
    """
    Load a match the caller participates in.

    Raises:
        NotFoundError: No such match, or a block separates the participants
        AuthorizationError: Caller is not one of the two users
    """
    result = await db.execute(select(Match).where(Match.id == match_id))
    match = result.scalar_one_or_none()
    if match is None:
        raise NotFoundError("Match not found")
    if not is_participant(match, ctx.user_id):
        raise AuthorizationError("User not part of this match")
    # Blocked matches are hidden from the list, so they read as missing here too
    if await is_blocked_between(db, match.user1_id, match.user2_id):
        raise NotFoundError("Match not found")
    return match


async def list_messages(db: AsyncSession, ctx: CallerContext, match_id: int) -> list[Message]:
    """Messages of a match in send order (created_at ascending, ties by id)."""
    await get_match_for(db, ctx, match_id)
    result = await db.execute(
        select(Message).where(Message.match_id == match_id).order_by(Message.created_at, Message.id)
    )
    return list(result.scalars().all())


async def send_message(db: AsyncSession, ctx: CallerContext, match_id: int, content: str) -> Message:
    """
    Append a message to a match thread.

    Raises:
        NotFoundError: No such match
        AuthorizationError: Caller is not one of the two users
        ValidationError: Content blank after trimming or too long
    """
    match = await get_match_for(db, ctx, match_id)

    text = (content or "").strip()
    if not text:
        raise ValidationError("content must not be empty", field="content")
    if len(text) > settings.max_message_length:
        raise ValidationError(f"content exceeds {settings.max_message_length} characters", field="content")

    message = Message(match_id=match.id, sender_id=ctx.user_id, content=text, created_at=datetime.utcnow())
    db.add(message)
    await db.commit()
    await db.refresh(message)

    messages_sent_total.inc()
    logger.debug(f"Message {message.id} sent in match {match.id} by {ctx.user_id}")
    return message


async def _last_messages(db: AsyncSession, match_ids: list[int]) -> dict[int, Message]:
    """Latest message of each match, keyed by match id, in one query."""
    if not match_ids:
        return {}
    ranked = (
        select(
            Message.id,
            func.row_number()
            .over(partition_by=Message.match_id, order_by=(Message.created_at.desc(), Message.id.desc()))
            .label("rn"),
        )
        .where(Message.match_id.in_(match_ids))
        .subquery()
    )
    result = await db.execute(select(Message).join(ranked, Message.id == ranked.c.id).where(ranked.c.rn == 1))
    return {message.match_id: message for message in result.scalars().all()}


async def list_matches(db: AsyncSession, ctx: CallerContext) -> list[MatchSummary]:
    """
    Every match the caller is part of, newest first, with the partner's profile.

    Matches are hidden when either participant has no live profile or when
    either side blocked the other; both rules are symmetric, so both users
    always see the same set of matches.
    """
    user_id = ctx.user_id
    own = await db.execute(select(Profile.is_deleted).where(Profile.user_id == user_id))
    own_deleted = own.scalar_one_or_none()
    if own_deleted is None or own_deleted:
        return []

    result = await db.execute(
        select(Match)
        .where(or_(Match.user1_id == user_id, Match.user2_id == user_id))
        .order_by(Match.created_at.desc(), Match.id.desc())
    )
    matches = list(result.scalars().all())
    if not matches:
        return []

    partner_ids = {match.partner_of(user_id) for match in matches}
    profiles_result = await db.execute(select(Profile).where(Profile.user_id.in_(partner_ids)))
    partners = {profile.user_id: profile for profile in profiles_result.scalars().all()}
    blocked = await blocked_pairs(db, user_id)

    visible = []
    for match in matches:
        partner_id = match.partner_of(user_id)
        partner = partners.get(partner_id)
        if partner is None or partner.is_deleted or partner_id in blocked:
            continue
        visible.append((match, partner_id, partner))

    last_messages = await _last_messages(db, [match.id for match, _, _ in visible])
    return [
        MatchSummary(match=match, partner_id=partner_id, partner=partner, last_message=last_messages.get(match.id))
        for match, partner_id, partner in visible
    ]
