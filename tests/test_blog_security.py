"""
Tests for the registry permission guards.
"""
import pytest

from blog_registry.managers.blog_security import (
    Denylisted,
    PaymentRequired,
    PermissionDenied,
    assert_is_author,
    assert_not_in_denylist,
    assert_one_deposit,
    assert_owner_or_moderator,
)


@pytest.mark.parametrize("deposit", [-1, 0, 2, 1000])
def test_deposit_guard_rejects_wrong_amounts(make_context, deposit):
    """Test that any deposit other than one unit is rejected."""
    with pytest.raises(PaymentRequired) as exc_info:
        assert_one_deposit(make_context("alice", deposit=deposit))
    assert exc_info.value.status_code == 402


def test_deposit_guard_accepts_exactly_one(make_context):
    """Test that exactly one unit passes the deposit guard."""
    assert_one_deposit(make_context("alice", deposit=1))


@pytest.mark.asyncio
async def test_author_guard_defaults_to_caller(state, make_context):
    """Test that the author guard checks the caller by default."""
    with pytest.raises(PermissionDenied, match="not registered as an author"):
        await assert_is_author(state, make_context("alice"))

    await state.authors.add("alice")
    await assert_is_author(state, make_context("alice"))


@pytest.mark.asyncio
async def test_author_guard_checks_explicit_account(state, make_context):
    """Test the author guard with an explicit account."""
    await state.authors.add("alice")

    with pytest.raises(PermissionDenied):
        await assert_is_author(state, make_context("alice"), "bob")


@pytest.mark.asyncio
async def test_denylist_guard(state, make_context):
    """Test the denylist guard for the caller and explicit accounts."""
    await assert_not_in_denylist(state, make_context("alice"))

    with pytest.raises(Denylisted):
        await assert_not_in_denylist(state, make_context("mallory"))

    with pytest.raises(Denylisted):
        await assert_not_in_denylist(state, make_context("alice"), "mallory")


@pytest.mark.asyncio
async def test_owner_or_moderator_guard(state, make_context):
    """Test that only the registry account and moderators pass."""
    await assert_owner_or_moderator(state, make_context("blog-registry"))

    with pytest.raises(PermissionDenied):
        await assert_owner_or_moderator(state, make_context("carol"))

    await state.moderators.add("carol")
    await assert_owner_or_moderator(state, make_context("carol"))
