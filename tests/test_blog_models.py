"""
Tests for the BlogPost entity.
"""
from datetime import datetime, timedelta, timezone

import pytest

from blog_registry.managers.blog_security import InvalidArgument, PermissionDenied
from blog_registry.models.blog_models import BlogPost, CallContext


@pytest.fixture
def context():
    return CallContext(
        signer_account_id="alice",
        current_account_id="blog-registry",
        block_timestamp=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        random_seed="seed-1",
    )


@pytest.fixture
def post(context):
    return BlogPost.create("First", "cid-content", "cid-thumb", context)


def test_create_uses_call_context(post, context):
    """Test that a new post takes its id, author and timestamps from the call."""
    assert post.id == "seed-1"
    assert post.author_id == "alice"
    assert post.created_at == context.block_timestamp
    assert post.last_updated_at == context.block_timestamp


def test_update_title_changes_only_title(post):
    """Test that a title-only patch leaves every other field alone."""
    before = post.model_dump()

    applied = post.update({"title": "new"}, signer_account_id="alice")

    assert applied is True
    after = post.model_dump()
    assert after["title"] == "new"
    assert {k: v for k, v in after.items() if k != "title"} == {k: v for k, v in before.items() if k != "title"}


def test_update_applies_every_recognized_field(post):
    """Test that all updatable fields are applied together."""
    post.update(
        {"title": "t", "content_ref": "c2", "thumbnail_ref": "th2", "author_id": "bob"},
        signer_account_id="alice",
    )

    assert (post.title, post.content_ref, post.thumbnail_ref, post.author_id) == ("t", "c2", "th2", "bob")


def test_update_with_unknown_field_is_silently_ignored(post):
    """Test that any unknown key makes the whole patch a no-op."""
    before = post.model_dump()

    applied = post.update({"title": "new", "unknown_field": "x"}, signer_account_id="alice")

    assert applied is False
    assert post.model_dump() == before


def test_update_with_empty_patch_is_ignored(post):
    """Test that an empty patch reports no change."""
    before = post.model_dump()

    assert post.update({}, signer_account_id="alice") is False
    assert post.model_dump() == before


def test_update_by_non_author_is_denied(post):
    """Test that only the post's author can update it."""
    before = post.model_dump()

    with pytest.raises(PermissionDenied):
        post.update({"title": "hijacked"}, signer_account_id="bob")

    assert post.model_dump() == before


def test_non_author_is_denied_even_for_ignored_patch(post):
    """Test that ownership is checked before the patch is inspected."""
    with pytest.raises(PermissionDenied):
        post.update({"unknown_field": "x"}, signer_account_id="bob")


def test_update_rejects_non_string_values(post):
    """Test that recognized fields only accept strings."""
    with pytest.raises(InvalidArgument):
        post.update({"title": 42}, signer_account_id="alice")
    assert post.title == "First"


def test_update_rejects_empty_author(post):
    """Test that a post cannot be transferred to an empty account id."""
    with pytest.raises(InvalidArgument):
        post.update({"author_id": ""}, signer_account_id="alice")
    assert post.author_id == "alice"


def test_update_does_not_refresh_last_updated_at(post):
    """Test that last_updated_at keeps its creation value."""
    original = post.last_updated_at

    post.update({"title": "later"}, signer_account_id="alice")

    assert post.last_updated_at == original


def test_reconstruct_from_serialized_document(post):
    """Test rebuilding a post from its stored document."""
    document = post.to_document()
    assert isinstance(document["created_at"], str)

    rebuilt = BlogPost.reconstruct(document)

    assert rebuilt == post


def test_reconstruct_accepts_datetimes():
    """Test rebuilding a post from native datetime values."""
    now = datetime.now(timezone.utc)
    rebuilt = BlogPost.reconstruct(
        {
            "id": "x",
            "title": "t",
            "content_ref": "c",
            "thumbnail_ref": "th",
            "author_id": "alice",
            "created_at": now,
            "last_updated_at": now + timedelta(seconds=1),
        }
    )

    assert rebuilt.created_at == now
    assert rebuilt.last_updated_at > rebuilt.created_at
