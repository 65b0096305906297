"""AI chat partner endpoint."""

from fastapi import APIRouter, Depends

from apps.ai_coach.provider import get_chat_reply
from apps.api.deps import CallerContext, caller_context
from apps.api.schemas import AIChatIn, AIChatOut

router = APIRouter()


@router.post("/chat", response_model=AIChatOut)
async def chat(body: AIChatIn, ctx: CallerContext = Depends(caller_context)) -> AIChatOut:
    """Next message from the practice chat partner (503 when AI is disabled)."""
    reply = await get_chat_reply([message.model_dump() for message in body.messages])
    return AIChatOut(reply=reply)
