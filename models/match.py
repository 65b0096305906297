import hashlib
from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from core.db import Base


def pair_key(user_x: str, user_y: str) -> tuple[str, str]:
    """Canonical (u_lo, u_hi) key for an unordered pair of users."""
    return (user_x, user_y) if user_x <= user_y else (user_y, user_x)


def pair_lock_key(user_x: str, user_y: str) -> int:
    """Stable signed 64-bit advisory lock key for an unordered pair of users."""
    u_lo, u_hi = pair_key(user_x, user_y)
    digest = hashlib.blake2b(f"{u_lo}\x00{u_hi}".encode(), digest_size=8).digest()
    return int.from_bytes(digest, "big", signed=True)


class Match(Base):
    """Mutual LIKE between two users."""

    __tablename__ = "matches"

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    user1_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    user2_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    # Ordered pair for deduplication: u_lo = min(user1_id, user2_id), u_hi = max(user1_id, user2_id)
    u_lo: Mapped[str] = mapped_column(String(64), nullable=False)
    u_hi: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        # Prevent self-matching (user cannot match with themselves)
        CheckConstraint("user1_id <> user2_id", name="chk_match_no_self"),
        # At most one match per unordered pair, ever
        Index("uq_match_pair", "u_lo", "u_hi", unique=True),
    )

    def partner_of(self, user_id: str) -> str:
        """Return the other participant."""
        return self.user2_id if user_id == self.user1_id else self.user1_id

    def __repr__(self) -> str:
        return f"<Match(id={self.id}, user1_id={self.user1_id}, user2_id={self.user2_id})>"
