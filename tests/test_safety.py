"""Blocks and reports: idempotent blocking, penalties, Redis rate limit."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from core.auth import CallerContext
from core.errors import NotFoundError, RateLimitedError, ValidationError
from models.safety import Report
from services import safety
from services.profiles import find_profile
from services.safety import block_user, blocked_pairs, blocked_user_ids, report_user

ALICE = CallerContext("alice")


@pytest.fixture
async def people(make_profile):
    for user in ("alice", "bob", "carol"):
        await make_profile(user)


async def _profile(db, user_id):
    db.expire_all()
    return await find_profile(db, user_id)


async def test_block_is_idempotent_and_penalises_once(db, people):
    assert await block_user(db, ALICE, "bob") is True
    assert await block_user(db, ALICE, "bob") is False

    bob = await _profile(db, "bob")
    assert bob.block_count == 1
    assert bob.exposure_score == 80
    assert await blocked_user_ids(db, "alice") == ["bob"]
    assert await blocked_pairs(db, "bob") == {"alice"}


async def test_cannot_block_self_or_missing_user(db, people):
    with pytest.raises(ValidationError):
        await block_user(db, ALICE, "alice")
    with pytest.raises(NotFoundError):
        await block_user(db, ALICE, "ghost")


async def test_report_blocks_target(db, fake_redis, people):
    report = await report_user(db, fake_redis, ALICE, "bob", "spam", "sends links")

    assert report.id is not None
    assert report.comment == "sends links"
    assert await blocked_user_ids(db, "alice") == ["bob"]


async def test_unresponsive_report_counts_chat_failure(db, fake_redis, people):
    await report_user(db, fake_redis, ALICE, "carol", "unresponsive")

    carol = await _profile(db, "carol")
    assert carol.chat_fail_count == 1
    assert carol.block_count == 1
    assert carol.exposure_score == 70


async def test_report_rate_limit(db, fake_redis, people):
    await report_user(db, fake_redis, ALICE, "bob", "abuse")

    with pytest.raises(RateLimitedError) as exc:
        await report_user(db, fake_redis, ALICE, "carol", "abuse")
    assert exc.value.http_status == 429

    reports = (await db.execute(select(Report))).scalars().all()
    assert [r.to_user for r in reports] == ["bob"]
    # Other reporters have their own window
    await report_user(db, fake_redis, CallerContext("carol"), "bob", "fake")


async def test_invalid_report_does_not_consume_rate_limit(db, fake_redis, people):
    with pytest.raises(ValidationError):
        await report_user(db, fake_redis, ALICE, "bob", "boring")
    with pytest.raises(ValidationError):
        await report_user(db, fake_redis, ALICE, "alice", "spam")

    await report_user(db, fake_redis, ALICE, "bob", "other")


async def test_failed_report_write_releases_rate_limit(db, fake_redis, people, monkeypatch):
    async def broken_insert(session, blocker_id, blocked_id):
        raise OperationalError("INSERT INTO user_blocks", {}, Exception("database is locked"))

    monkeypatch.setattr(safety, "_insert_block", broken_insert)
    with pytest.raises(OperationalError):
        await report_user(db, fake_redis, ALICE, "bob", "abuse")
    assert await fake_redis.get("rl:report:alice") is None
    assert (await db.execute(select(Report))).scalars().all() == []

    monkeypatch.undo()
    report = await report_user(db, fake_redis, ALICE, "bob", "abuse")
    assert report.to_user == "bob"
