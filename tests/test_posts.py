"""
Tests for post accessors, lifecycle helpers and cascading deletion.
"""
import pytest

from gharnari.errors import PostNotFoundError, RecordValidationError
from gharnari.schemas import PostStatus

from conftest import OTHER_POST_ID, POST_ID


def new_post(post_factory, **overrides):
    data = post_factory(**overrides)
    for key in ("id", "createdAt", "updatedAt", "publishedAt", "views"):
        data.pop(key, None)
    return data


# =============================================================================
# Accessors
# =============================================================================

@pytest.mark.asyncio
async def test_lookup_by_id_and_slug(store, post_factory):
    await store.save_posts([
        post_factory(status="published"),
        post_factory(id=OTHER_POST_ID, slug="kachcha-draft"),
    ])

    assert (await store.get_post_by_id(OTHER_POST_ID)).slug == "kachcha-draft"
    assert (await store.get_post_by_slug("maa-ki-rasoi")).id == POST_ID
    # Drafts are never served by slug
    assert await store.get_post_by_slug("kachcha-draft") is None
    assert await store.get_post_by_id("missing") is None


@pytest.mark.asyncio
async def test_get_published_posts(store, post_factory):
    await store.save_posts([
        post_factory(status="published"),
        post_factory(id=OTHER_POST_ID, slug="other", status="scheduled"),
    ])

    published = await store.get_published_posts()

    assert [p.id for p in published] == [POST_ID]


@pytest.mark.asyncio
async def test_increment_post_views(store, post_factory):
    await store.save_posts([post_factory(status="published", views=41)])

    assert await store.increment_post_views(POST_ID) == 42
    assert (await store.get_post_by_id(POST_ID)).views == 42
    assert await store.increment_post_views(OTHER_POST_ID) is None


# =============================================================================
# Lifecycle
# =============================================================================

@pytest.mark.asyncio
async def test_create_post_assigns_identity(store, post_factory):
    created = await store.create_post(new_post(post_factory))

    assert created.id and created.id != POST_ID
    assert created.created_at == created.updated_at
    assert created.views == 0
    assert created.status == PostStatus.DRAFT
    assert created.published_at is None
    assert await store.get_post_by_id(created.id) == created


@pytest.mark.asyncio
async def test_create_published_post_stamps_published_at(store, post_factory):
    created = await store.create_post(new_post(post_factory, status="published"))

    assert created.published_at == created.created_at


@pytest.mark.asyncio
async def test_create_post_rejects_invalid(store, post_factory):
    with pytest.raises(RecordValidationError):
        await store.create_post(new_post(post_factory, category="Travel"))

    assert await store.get_posts() == []


@pytest.mark.asyncio
async def test_publish_toggle_sets_and_clears_published_at(store, post_factory):
    post = await store.create_post(new_post(post_factory))
    assert post.published_at is None

    published = await store.set_post_status(post.id, PostStatus.PUBLISHED)
    assert published.published_at is not None
    assert published.is_draft is False

    draft = await store.set_post_status(post.id, "draft")
    assert draft.published_at is None
    assert draft.is_draft is True


@pytest.mark.asyncio
async def test_update_post_keeps_identity(store, post_factory):
    await store.save_posts([post_factory()])

    updated = await store.update_post(POST_ID, {
        "id": OTHER_POST_ID,
        "createdAt": "2020-01-01T00:00:00.000Z",
        "title": "Naya Sheershak",
    })

    assert updated.id == POST_ID
    assert updated.title == "Naya Sheershak"
    assert updated.created_at == "2026-01-10T08:00:00.000Z"
    assert updated.updated_at > updated.created_at


@pytest.mark.asyncio
async def test_update_post_cannot_change_views(store, post_factory):
    await store.save_posts([post_factory(views=42)])

    updated = await store.update_post(POST_ID, {"views": 0, "title": "Naya Sheershak"})

    assert updated.views == 42
    assert (await store.get_post_by_id(POST_ID)).views == 42
    assert await store.increment_post_views(POST_ID) == 43


@pytest.mark.asyncio
async def test_update_missing_post(store):
    with pytest.raises(PostNotFoundError) as exc_info:
        await store.update_post(POST_ID, {"title": "x"})
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_update_replacing_local_image_deletes_old_file(store, uploads_dir, post_factory):
    (uploads_dir / "old.png").write_bytes(b"png")
    (uploads_dir / "new.png").write_bytes(b"png")
    await store.save_posts([post_factory(featuredImage="/uploads/old.png")])

    await store.update_post(POST_ID, {"featuredImage": "/uploads/new.png"})

    assert not (uploads_dir / "old.png").exists()
    assert (uploads_dir / "new.png").exists()


# =============================================================================
# Deletion
# =============================================================================

@pytest.mark.asyncio
async def test_delete_post_cascades_comments(store, post_factory, comment_factory):
    await store.save_posts([post_factory(), post_factory(id=OTHER_POST_ID, slug="other")])
    await store.save_comments([
        comment_factory(id="00000000-0000-4000-8000-000000000001"),
        comment_factory(id="00000000-0000-4000-8000-000000000002"),
        comment_factory(id="00000000-0000-4000-8000-000000000003"),
        comment_factory(id="00000000-0000-4000-8000-000000000004", postId=OTHER_POST_ID),
    ])

    result = await store.delete_post(POST_ID)

    assert result.comments_deleted == 3
    assert result.to_dict()["commentsDeleted"] == 3
    assert await store.get_post_by_id(POST_ID) is None
    assert await store.get_comments_by_post_id(POST_ID) == []
    assert len(await store.get_comments_by_post_id(OTHER_POST_ID)) == 1


@pytest.mark.asyncio
async def test_delete_post_removes_local_image(store, uploads_dir, post_factory):
    image = uploads_dir / "cover.png"
    image.write_bytes(b"png")
    await store.save_posts([post_factory(featuredImage="/uploads/cover.png")])

    result = await store.delete_post(POST_ID)

    assert result.image_deleted is True
    assert not image.exists()
    assert result.to_dict()["errors"] == {"commentError": None, "imageError": None}


@pytest.mark.asyncio
async def test_delete_post_skips_external_image(store, post_factory):
    await store.save_posts([post_factory(featuredImage="https://cdn.example.com/cover.png")])

    result = await store.delete_post(POST_ID)

    assert result.image_deleted is False
    assert result.image_error is None
    assert await store.get_posts() == []


@pytest.mark.asyncio
async def test_delete_missing_post(store):
    with pytest.raises(PostNotFoundError):
        await store.delete_post(POST_ID)
