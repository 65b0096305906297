"""AI chat partner: persona prompt and the OpenAI-compatible provider client."""

import logging

from openai import AsyncOpenAI, OpenAIError

from core.config import settings
from core.errors import ServiceUnavailableError, UpstreamError

logger = logging.getLogger(__name__)

PERSONA_PROMPT = """
You are playing a real person the user is chatting with on a dating app. Your job is to help
the user practise moving a conversation forward, not to replace a real match.

Goal:
Move the relationship along gradually and naturally, from getting acquainted, to familiarity,
to light flirting, to a concrete real-world suggestion. Never be pushy or greasy.
Chat like a real person: specific, down to earth, with feelings and give-and-take. Never sound
like a support agent or a questionnaire.

Rules:
1) Respond to the feeling or intent of the user's last message first, then move things forward.
2) Do not repeat your own earlier phrasing.
3) Keep replies short: usually 1-3 sentences, never more than 5.
4) Every reply moves things forward with exactly one of: one concrete question, a small
   either/or choice, or a light playful reaction.
5) Never combine care, flirting and an invitation in one reply.
6) Better slow than eager.
7) Never say you are an AI or that you cannot do something.

Stages (judge them silently, never mention them):
- Getting acquainted: relaxed, no declarations.
- Familiarity: show you remember things the user said, without reciting them.
- Flirting: allowed, but kept light; no early confessions.
- Real-world: suggest something doable, like a call, a video chat or meeting up.

Output only the message you would send to the user. Do not explain these rules.
""".strip()

# Shown when the provider answers with an empty completion
EMPTY_REPLY = "……"

_client: AsyncOpenAI | None = None


def get_client() -> AsyncOpenAI:
    """Get or create the shared provider client."""
    global _client
    if _client is None:
        _client = AsyncOpenAI(api_key=settings.openai_api_key, base_url=settings.ai_base_url or None)
    return _client


def set_client(client: AsyncOpenAI | None) -> None:
    """Replace the shared client (tests use this to inject a fake)."""
    global _client
    _client = client


async def get_chat_reply(history: list[dict[str, str]]) -> str:
    """
    Ask the provider for the persona's next message.

    Args:
        history: Conversation so far as {"role": "user"|"assistant", "content": ...} dicts,
            oldest first; the persona prompt is prepended here

    Returns:
        Reply text

    Raises:
        ServiceUnavailableError: AI chat is disabled or has no API key
        UpstreamError: The provider call failed
    """
    if not settings.ai_enabled or not settings.openai_api_key:
        raise ServiceUnavailableError("AI chat is disabled")

    messages = [{"role": "system", "content": PERSONA_PROMPT}, *history[-settings.ai_max_history :]]
    try:
        response = await get_client().chat.completions.create(
            model=settings.ai_model,
            messages=messages,
            temperature=settings.ai_temperature,
        )
    except OpenAIError:
        logger.exception("AI provider request failed")
        raise UpstreamError("AI provider request failed") from None

    if not response.choices:
        return EMPTY_REPLY
    return response.choices[0].message.content or EMPTY_REPLY
