from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from core.db import Base

LIKE = "LIKE"
PASS = "PASS"
DIRECTIONS = (LIKE, PASS)


class Swipe(Base):
    """Effective swipe decision for an ordered (swiper, target) pair."""

    __tablename__ = "swipes"

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    swiper_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    target_id: Mapped[str] = mapped_column(String(64), nullable=False)
    direction: Mapped[str] = mapped_column(String(8), nullable=False)  # LIKE, PASS
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("swiper_id <> target_id", name="chk_swipe_no_self"),
        CheckConstraint("direction IN ('LIKE', 'PASS')", name="chk_swipe_direction"),
        # One effective decision per ordered pair; re-swipes upsert onto it
        Index("uq_swipe_pair", "swiper_id", "target_id", unique=True),
        # Mirror lookups during reconciliation
        Index("idx_swipe_target_swiper", "target_id", "swiper_id"),
    )

    def __repr__(self) -> str:
        return f"<Swipe(swiper_id={self.swiper_id}, target_id={self.target_id}, direction={self.direction})>"
