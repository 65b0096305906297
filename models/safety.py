"""Safety models - user blocks and reports."""

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from core.db import Base

REPORT_REASONS = ("spam", "abuse", "fake", "unresponsive", "other")


class UserBlock(Base):
    """One user hiding another. Applied in both directions by the feed and match list."""

    __tablename__ = "user_blocks"

    blocker_id: Mapped[str] = mapped_column(String(64), primary_key=True, nullable=False)
    blocked_id: Mapped[str] = mapped_column(String(64), primary_key=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("blocker_id <> blocked_id", name="chk_block_no_self"),
        Index("idx_user_blocks_blocked", "blocked_id"),
    )

    def __repr__(self) -> str:
        return f"<UserBlock(blocker_id={self.blocker_id}, blocked_id={self.blocked_id})>"


class Report(Base):
    """User-generated report (complaint) about another user."""

    __tablename__ = "reports"

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    from_user: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    to_user: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    reason: Mapped[str] = mapped_column(String(24), nullable=False)  # spam|abuse|fake|unresponsive|other
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("reason IN ('spam','abuse','fake','unresponsive','other')", name="chk_report_reason"),
    )

    def __repr__(self) -> str:
        return f"<Report(id={self.id}, from={self.from_user}, to={self.to_user}, reason={self.reason})>"
