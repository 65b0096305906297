"""Profile store: create vs partial update, validation, soft delete, penalties."""

import pytest

from core.auth import CallerContext
from core.errors import NotFoundError, ValidationError
from services.profiles import apply_penalty, delete_profile, find_profile, get_profile, upsert_profile

ALICE = CallerContext("alice")


async def test_create_requires_full_field_set(db):
    with pytest.raises(ValidationError) as exc:
        await upsert_profile(db, ALICE, {"username": "Alice", "age": 30, "gender": "Female"})
    assert exc.value.field == "city"
    assert await find_profile(db, "alice") is None


async def test_create_then_partial_update(db):
    profile, created = await upsert_profile(
        db, ALICE, {"username": "Alice", "age": 30, "gender": "Female", "city": "Lisbon", "photos": ["a.jpg", ""]}
    )
    assert created is True
    assert profile.exposure_score == 100
    assert profile.photos == ["a.jpg", ""]
    assert profile.is_underage is False

    updated, created = await upsert_profile(db, ALICE, {"city": "Porto", "bio": "hi"})
    assert created is False
    assert updated.id == profile.id
    assert updated.city == "Porto"
    assert updated.username == "Alice"
    assert updated.bio == "hi"


async def test_underage_flag_follows_age(db, make_profile):
    profile = await make_profile("teen", age=16)
    assert profile.is_underage is True

    profile, _ = await upsert_profile(db, CallerContext("teen"), {"age": 19})
    assert profile.is_underage is False


@pytest.mark.parametrize("age", [0, -3, True, "20"])
async def test_age_must_be_positive_integer(db, age):
    with pytest.raises(ValidationError) as exc:
        await upsert_profile(db, ALICE, {"username": "Alice", "age": age, "gender": "F", "city": "Rome"})
    assert exc.value.field == "age"


async def test_server_managed_fields_are_not_editable(db, make_profile):
    await make_profile("alice")
    with pytest.raises(ValidationError) as exc:
        await upsert_profile(db, ALICE, {"exposure_score": 1000})
    assert exc.value.field == "exposure_score"


async def test_get_profile_missing(db):
    with pytest.raises(NotFoundError):
        await get_profile(db, ALICE)


async def test_soft_delete_is_idempotent(db, make_profile):
    await make_profile("alice")
    await delete_profile(db, ALICE)
    await delete_profile(db, ALICE)

    profile = await get_profile(db, ALICE)
    assert profile.is_deleted is True


async def test_penalties_clamp_at_zero(db, make_profile):
    await make_profile("bob")
    for _ in range(4):
        await apply_penalty(db, "bob", "dislike")
    await apply_penalty(db, "bob", "block")
    await apply_penalty(db, "bob", "chat_fail")
    await db.commit()

    db.expire_all()
    bob = await find_profile(db, "bob")
    assert bob.exposure_score == 0
    assert (bob.dislike_count, bob.block_count, bob.chat_fail_count) == (4, 1, 1)


async def test_penalty_for_unknown_user_is_noop(db):
    await apply_penalty(db, "nobody", "block")
    await db.commit()
    assert await find_profile(db, "nobody") is None
