"""Request/response models shared by the API routers (camelCase on the wire)."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):  # type: ignore[misc]
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Profiles


class ProfileIn(CamelModel):
    """Profile fields; all optional here, required ones are enforced on create."""

    username: str | None = Field(default=None, min_length=1, max_length=64)
    age: int | None = Field(default=None, gt=0, lt=150)
    gender: str | None = Field(default=None, min_length=1, max_length=32)
    city: str | None = Field(default=None, min_length=1, max_length=128)
    bio: str | None = Field(default=None, max_length=1000)
    photos: list[str] | None = Field(default=None, max_length=6)


class PublicProfileOut(CamelModel):
    """What other users get to see."""

    user_id: str
    username: str
    age: int
    gender: str
    city: str
    bio: str | None
    photos: list[str]


class ProfileOut(PublicProfileOut):
    """The caller's own profile, including server-managed state."""

    id: int
    exposure_score: int
    dislike_count: int
    block_count: int
    chat_fail_count: int
    is_deleted: bool
    is_underage: bool
    blocked_users: list[str] = []
    created_at: datetime


# Swipes


class SwipeIn(CamelModel):
    target_id: str = Field(min_length=1, max_length=64)
    direction: Literal["LIKE", "PASS"]


class SwipeOut(CamelModel):
    matched: bool
    match_id: int | None = None


# Matches & messages


class MessageIn(CamelModel):
    content: str


class MessageOut(CamelModel):
    id: int
    match_id: int
    sender_id: str
    content: str
    created_at: datetime


class PartnerOut(CamelModel):
    user_id: str
    profile: PublicProfileOut


class MatchOut(CamelModel):
    id: int
    partner: PartnerOut
    last_message: str | None = None
    created_at: datetime


# Safety


class BlockIn(CamelModel):
    target_id: str = Field(min_length=1, max_length=64)


class ReportIn(CamelModel):
    target_id: str = Field(min_length=1, max_length=64)
    reason: str  # spam|abuse|fake|unresponsive|other
    comment: str | None = Field(default=None, max_length=1000)


class OkOut(CamelModel):
    ok: bool = True


# AI chat


class AIChatMessage(CamelModel):
    role: Literal["user", "assistant"]
    content: str = Field(min_length=1, max_length=2000)


class AIChatIn(CamelModel):
    messages: list[AIChatMessage] = Field(min_length=1, max_length=100)


class AIChatOut(CamelModel):
    reply: str
