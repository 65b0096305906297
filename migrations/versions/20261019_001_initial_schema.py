"""Initial schema: profiles, swipes, matches, messages, blocks, reports

Revision ID: 20261019_001
Revises:
Create Date: 2026-10-19 10:00:00

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261019_001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # Profiles
    op.create_table(
        "profiles",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("gender", sa.String(length=32), nullable=False),
        sa.Column("city", sa.String(length=128), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("photos", sa.JSON(), nullable=False),
        sa.Column("exposure_score", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("dislike_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("block_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("chat_fail_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_underage", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("age > 0", name="chk_profile_age_positive"),
        sa.CheckConstraint("exposure_score >= 0", name="chk_profile_exposure_floor"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_profiles_user_id"), "profiles", ["user_id"], unique=True)

    # Swipes: one effective decision per ordered pair
    op.create_table(
        "swipes",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("swiper_id", sa.String(length=64), nullable=False),
        sa.Column("target_id", sa.String(length=64), nullable=False),
        sa.Column("direction", sa.String(length=8), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("swiper_id <> target_id", name="chk_swipe_no_self"),
        sa.CheckConstraint("direction IN ('LIKE', 'PASS')", name="chk_swipe_direction"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_swipes_swiper_id"), "swipes", ["swiper_id"], unique=False)
    op.create_index("uq_swipe_pair", "swipes", ["swiper_id", "target_id"], unique=True)
    op.create_index("idx_swipe_target_swiper", "swipes", ["target_id", "swiper_id"], unique=False)

    # Matches: at most one per unordered pair (u_lo, u_hi)
    op.create_table(
        "matches",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user1_id", sa.String(length=64), nullable=False),
        sa.Column("user2_id", sa.String(length=64), nullable=False),
        sa.Column("u_lo", sa.String(length=64), nullable=False),
        sa.Column("u_hi", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("user1_id <> user2_id", name="chk_match_no_self"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_matches_user1_id"), "matches", ["user1_id"], unique=False)
    op.create_index(op.f("ix_matches_user2_id"), "matches", ["user2_id"], unique=False)
    op.create_index("uq_match_pair", "matches", ["u_lo", "u_hi"], unique=True)

    # Messages
    op.create_table(
        "messages",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("match_id", sa.BigInteger(), nullable=False),
        sa.Column("sender_id", sa.String(length=64), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["match_id"], ["matches.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_messages_match_created", "messages", ["match_id", "created_at", "id"], unique=False)

    # Blocks
    op.create_table(
        "user_blocks",
        sa.Column("blocker_id", sa.String(length=64), nullable=False),
        sa.Column("blocked_id", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("blocker_id <> blocked_id", name="chk_block_no_self"),
        sa.PrimaryKeyConstraint("blocker_id", "blocked_id"),
    )
    op.create_index("idx_user_blocks_blocked", "user_blocks", ["blocked_id"], unique=False)

    # Reports
    op.create_table(
        "reports",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("from_user", sa.String(length=64), nullable=False),
        sa.Column("to_user", sa.String(length=64), nullable=False),
        sa.Column("reason", sa.String(length=24), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("reason IN ('spam','abuse','fake','unresponsive','other')", name="chk_report_reason"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_reports_from_user"), "reports", ["from_user"], unique=False)
    op.create_index(op.f("ix_reports_to_user"), "reports", ["to_user"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_reports_to_user"), table_name="reports")
    op.drop_index(op.f("ix_reports_from_user"), table_name="reports")
    op.drop_table("reports")
    op.drop_index("idx_user_blocks_blocked", table_name="user_blocks")
    op.drop_table("user_blocks")
    op.drop_index("idx_messages_match_created", table_name="messages")
    op.drop_table("messages")
    op.drop_index("uq_match_pair", table_name="matches")
    op.drop_index(op.f("ix_matches_user2_id"), table_name="matches")
    op.drop_index(op.f("ix_matches_user1_id"), table_name="matches")
    op.drop_table("matches")
    op.drop_index("idx_swipe_target_swiper", table_name="swipes")
    op.drop_index("uq_swipe_pair", table_name="swipes")
    op.drop_index(op.f("ix_swipes_swiper_id"), table_name="swipes")
    op.drop_table("swipes")
    op.drop_index(op.f("ix_profiles_user_id"), table_name="profiles")
    op.drop_table("profiles")
