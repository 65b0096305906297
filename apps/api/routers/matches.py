"""Match list and message thread endpoints.

Clients poll GET /{match_id}/messages for new messages; there is no push channel.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.deps import CallerContext, caller_context, get_db
from apps.api.schemas import MatchOut, MessageIn, MessageOut, PartnerOut, PublicProfileOut
from services import threads

router = APIRouter()


@router.get("", response_model=list[MatchOut], response_model_exclude_none=True)
async def list_matches(
    db: AsyncSession = Depends(get_db), ctx: CallerContext = Depends(caller_context)
) -> list[MatchOut]:
    """Matches of the caller, each with the other user as partner."""
    summaries = await threads.list_matches(db, ctx)
    return [
        MatchOut(
            id=summary.match.id,
            partner=PartnerOut(
                user_id=summary.partner_id,
                profile=PublicProfileOut.model_validate(summary.partner),
            ),
            last_message=summary.last_message.content if summary.last_message else None,
            created_at=summary.match.created_at,
        )
        for summary in summaries
    ]


@router.get("/{match_id}/messages", response_model=list[MessageOut])
async def list_messages(
    match_id: int, db: AsyncSession = Depends(get_db), ctx: CallerContext = Depends(caller_context)
) -> list[MessageOut]:
    """Thread of a match, oldest first."""
    messages = await threads.list_messages(db, ctx, match_id)
    return [MessageOut.model_validate(message) for message in messages]


@router.post("/{match_id}/messages", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
async def send_message(
    match_id: int,
    body: MessageIn,
    db: AsyncSession = Depends(get_db),
    ctx: CallerContext = Depends(caller_context),
) -> MessageOut:
    """Append a message; only the two matched users may post."""
    message = await threads.send_message(db, ctx, match_id, body.content)
    return MessageOut.model_validate(message)
