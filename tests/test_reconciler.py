"""Match reconciliation: reciprocity, idempotence and the concurrent-like race.

Invariants:
    - Exactly one Match per unordered pair, whatever the order or repetition of LIKEs
    - A PASS never creates a match
    - Concurrent reciprocal LIKEs resolve to a single row (guarded insert on u_lo/u_hi)
"""

import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from core.auth import CallerContext
from models.match import Match, pair_key, pair_lock_key
from services import swipes
from services.reconciler import reconcile
from services.swipes import record_swipe


async def _match_count(db) -> int:
    result = await db.execute(select(func.count(Match.id)))
    return result.scalar_one()


@pytest.fixture
async def pair(make_profile):
    await make_profile("user1")
    await make_profile("user2")
    return CallerContext("user1"), CallerContext("user2")


async def test_example_scenario(db, pair):
    """LIKE, mirror LIKE, duplicate LIKE -> one match, same id throughout."""
    user1, user2 = pair

    first = await record_swipe(db, user1, "user2", "LIKE")
    assert first.matched is False
    assert first.match_id is None

    second = await record_swipe(db, user2, "user1", "LIKE")
    assert second.matched is True
    assert second.match_id is not None

    again = await record_swipe(db, user1, "user2", "LIKE")
    assert again.matched is True
    assert again.match_id == second.match_id

    assert await _match_count(db) == 1


async def test_match_row_is_canonicalised(db, pair):
    user1, user2 = pair
    await record_swipe(db, user2, "user1", "LIKE")
    result = await record_swipe(db, user1, "user2", "LIKE")

    match = (await db.execute(select(Match).where(Match.id == result.match_id))).scalar_one()
    assert (match.user1_id, match.user2_id) == ("user1", "user2")
    assert (match.u_lo, match.u_hi) == pair_key("user2", "user1") == ("user1", "user2")


async def test_pass_never_matches_even_after_incoming_like(db, pair):
    user1, user2 = pair
    await record_swipe(db, user2, "user1", "LIKE")

    result = await record_swipe(db, user1, "user2", "PASS")

    assert result.matched is False
    assert await _match_count(db) == 0


async def test_reconcile_without_mirror_like(db, pair):
    result = await reconcile(db, "user1", "user2")
    assert result.matched is False


async def test_reconcile_returns_existing_row_on_conflict(db, pair):
    """A pre-existing row for the pair is returned, never duplicated."""
    user1, user2 = pair
    await record_swipe(db, user1, "user2", "LIKE")
    matched = await record_swipe(db, user2, "user1", "LIKE")

    for swiper, target in (("user1", "user2"), ("user2", "user1")):
        result = await reconcile(db, swiper, target)
        assert result.matched is True
        assert result.match_id == matched.match_id
    await db.commit()

    assert await _match_count(db) == 1


async def test_unique_pair_index_rejects_direct_duplicates(db):
    db.add(Match(user1_id="a", user2_id="b", u_lo="a", u_hi="b"))
    await db.commit()

    db.add(Match(user1_id="b", user2_id="a", u_lo="a", u_hi="b"))
    with pytest.raises(IntegrityError):
        await db.commit()
    await db.rollback()


@pytest.mark.parametrize("trial", range(5))
async def test_concurrent_reciprocal_likes_create_one_match(session_factory, make_profile, trial):
    """Both users LIKE at the same time, each on its own connection."""
    await make_profile(f"a{trial}")
    await make_profile(f"b{trial}")

    async def like(swiper: str, target: str):
        async with session_factory() as session:
            return await record_swipe(session, CallerContext(swiper), target, "LIKE")

    results = await asyncio.gather(like(f"a{trial}", f"b{trial}"), like(f"b{trial}", f"a{trial}"))

    match_ids = {r.match_id for r in results if r.matched}
    assert len(match_ids) == 1

    async with session_factory() as session:
        assert await _match_count(session) == 1


async def test_concurrent_reconcile_calls_share_one_row(session_factory, make_profile):
    """Retried reconciliation racing against itself still yields a single match."""
    await make_profile("x")
    await make_profile("y")
    async with session_factory() as session:
        await record_swipe(session, CallerContext("x"), "y", "LIKE")
        await record_swipe(session, CallerContext("y"), "x", "LIKE")

    async def run(swiper: str, target: str):
        async with session_factory() as session:
            result = await reconcile(session, swiper, target)
            await session.commit()
            return result

    results = await asyncio.gather(*(run("x", "y") if i % 2 else run("y", "x") for i in range(6)))

    assert all(r.matched for r in results)
    assert len({r.match_id for r in results}) == 1
    async with session_factory() as session:
        assert await _match_count(session) == 1


def test_pair_lock_key_is_symmetric_and_stable():
    assert pair_lock_key("alice", "bob") == pair_lock_key("bob", "alice")
    assert pair_lock_key("alice", "bob") != pair_lock_key("alice", "carol")
    assert -(2**63) <= pair_lock_key("alice", "bob") < 2**63


async def test_pair_lock_is_taken_before_the_swipe_is_written(db, pair, monkeypatch):
    """The mirror check must run under the pair lock, after this side's swipe is in."""
    user1, _ = pair
    calls = []

    async def fake_lock(session, key):
        calls.append(("lock", key))

    real_upsert = swipes._upsert_swipe
    real_reconcile = swipes.reconcile

    async def spy_upsert(session, swiper_id, target_id, direction):
        calls.append(("upsert", swiper_id, target_id))
        await real_upsert(session, swiper_id, target_id, direction)

    async def spy_reconcile(session, swiper_id, target_id):
        calls.append(("reconcile", swiper_id, target_id))
        return await real_reconcile(session, swiper_id, target_id)

    monkeypatch.setattr(swipes, "advisory_xact_lock", fake_lock)
    monkeypatch.setattr(swipes, "_upsert_swipe", spy_upsert)
    monkeypatch.setattr(swipes, "reconcile", spy_reconcile)

    await record_swipe(db, user1, "user2", "LIKE")

    assert calls == [
        ("lock", pair_lock_key("user1", "user2")),
        ("upsert", "user1", "user2"),
        ("reconcile", "user1", "user2"),
    ]
