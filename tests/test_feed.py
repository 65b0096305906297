"""Recommendation feed exclusion set: self, swiped, soft-deleted, blocked (both ways)."""

from core.auth import CallerContext
from services.feed import get_recommendations
from services.profiles import delete_profile
from services.safety import block_user
from services.swipes import record_swipe

ALICE = CallerContext("alice")


async def _feed_ids(db, ctx=ALICE, limit=None) -> list[str]:
    return [p.user_id for p in await get_recommendations(db, ctx, limit=limit)]


async def test_feed_excludes_self(db, make_profile):
    await make_profile("alice")
    await make_profile("bob")

    assert await _feed_ids(db) == ["bob"]


async def test_swiped_targets_leave_the_feed_in_either_direction(db, make_profile):
    for user in ("alice", "bob", "carol", "dave"):
        await make_profile(user)

    await record_swipe(db, ALICE, "bob", "LIKE")
    await record_swipe(db, ALICE, "carol", "PASS")

    assert await _feed_ids(db) == ["dave"]
    # Other users' feeds are unaffected
    assert await _feed_ids(db, CallerContext("bob")) == ["alice", "carol", "dave"]


async def test_soft_deleted_profiles_are_hidden(db, make_profile):
    for user in ("alice", "bob", "carol"):
        await make_profile(user)
    await delete_profile(db, CallerContext("bob"))

    assert await _feed_ids(db) == ["carol"]


async def test_blocks_hide_both_directions(db, make_profile):
    for user in ("alice", "bob", "carol"):
        await make_profile(user)
    await block_user(db, CallerContext("bob"), "alice")

    assert await _feed_ids(db) == ["carol"]
    assert await _feed_ids(db, CallerContext("bob")) == ["carol"]


async def test_feed_is_bounded_and_stable(db, make_profile):
    await make_profile("alice")
    for i in range(15):
        await make_profile(f"user{i:02d}")

    first = await _feed_ids(db)
    second = await _feed_ids(db)

    assert len(first) == 10
    assert first == second
    assert await _feed_ids(db, limit=3) == first[:3]
