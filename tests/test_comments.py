"""
Tests for comment operations and moderation.
"""
import pytest

from gharnari.errors import CommentNotFoundError, RecordValidationError

from conftest import OTHER_POST_ID, POST_ID


def new_comment(comment_factory, **overrides):
    data = comment_factory(**overrides)
    for key in ("id", "createdAt"):
        data.pop(key, None)
    return data


@pytest.mark.asyncio
async def test_create_comment_always_pending(store, comment_factory):
    created = await store.create_comment(new_comment(comment_factory, approved=True))

    assert created.id
    assert created.approved is False
    assert created.created_at
    assert await store.get_comment_by_id(created.id) == created


@pytest.mark.asyncio
async def test_create_comment_rejects_invalid(store, comment_factory):
    with pytest.raises(RecordValidationError) as exc_info:
        await store.create_comment(new_comment(comment_factory, email="nope"))

    assert any(issue.path.endswith("email") for issue in exc_info.value.issues)
    assert await store.get_comments() == []


@pytest.mark.asyncio
async def test_moderation_controls_public_visibility(store, comment_factory):
    first = await store.create_comment(new_comment(comment_factory))
    second = await store.create_comment(new_comment(comment_factory, content="Second thought"))

    assert await store.get_approved_comments(POST_ID) == []

    approved = await store.set_comment_approval(first.id, True)
    assert approved.approved is True

    visible = await store.get_approved_comments(POST_ID)
    assert [c.id for c in visible] == [first.id]
    assert len(await store.get_comments_by_post_id(POST_ID)) == 2
    assert second.id not in {c.id for c in visible}


@pytest.mark.asyncio
async def test_set_approval_missing_comment(store):
    with pytest.raises(CommentNotFoundError):
        await store.set_comment_approval("00000000-0000-4000-8000-000000000000", True)


@pytest.mark.asyncio
async def test_delete_comment(store, comment_factory):
    kept = await store.create_comment(new_comment(comment_factory, postId=OTHER_POST_ID))
    gone = await store.create_comment(new_comment(comment_factory))

    assert await store.delete_comment(gone.id) is True
    assert await store.delete_comment(gone.id) is False
    assert [c.id for c in await store.get_comments()] == [kept.id]
