"""
Tests for integrity checks, orphan cleanup, health and analytics summary.
"""
import json

import pytest

from gharnari.core.constants import COMMENTS_FILE, POSTS_FILE

from conftest import OTHER_POST_ID, POST_ID


@pytest.mark.asyncio
async def test_integrity_check_healthy(store, post_factory, comment_factory):
    await store.save_posts([post_factory()])
    await store.save_comments([comment_factory()])

    report = await store.perform_integrity_check()

    assert report == {"status": "healthy", "issues": []}


@pytest.mark.asyncio
async def test_integrity_check_reports_missing_ids(store, post_factory, comment_factory):
    post = post_factory()
    del post["id"]
    comment = comment_factory()
    del comment["id"]
    store.collection_path(POSTS_FILE).write_text(json.dumps([post]))
    store.collection_path(COMMENTS_FILE).write_text(json.dumps([comment]))

    report = await store.perform_integrity_check()

    assert report["status"] == "issues_found"
    assert report["issues"] == [
        "Post at index 0 is missing required fields",
        "Comment at index 0 is missing required fields",
    ]


@pytest.mark.asyncio
async def test_cleanup_orphaned_comments(store, post_factory, comment_factory):
    await store.save_posts([post_factory()])
    await store.save_comments([
        comment_factory(),
        comment_factory(id="00000000-0000-4000-8000-000000000001", postId=OTHER_POST_ID),
    ])

    result = await store.cleanup_orphaned_comments()

    assert result == {"removed": 1, "remaining": 1}
    assert [c.post_id for c in await store.get_comments()] == [POST_ID]


@pytest.mark.asyncio
async def test_cleanup_without_orphans_does_not_write(store, post_factory, comment_factory):
    await store.save_posts([post_factory()])
    await store.save_comments([comment_factory()])
    path = store.collection_path(COMMENTS_FILE)
    mtime = path.stat().st_mtime_ns

    assert await store.cleanup_orphaned_comments() == {"removed": 0, "remaining": 1}
    assert path.stat().st_mtime_ns == mtime


@pytest.mark.asyncio
async def test_health_check(store):
    report = await store.health_check()

    assert report["status"] == "healthy"
    assert report["files"] == {
        "posts": True,
        "comments": True,
        "settings": True,
        "analytics": True,
    }


@pytest.mark.asyncio
async def test_analytics_summary(store, post_factory, comment_factory):
    await store.save_posts([
        post_factory(status="published", views=10),
        post_factory(id=OTHER_POST_ID, slug="other", status="published", views=25),
        post_factory(id="aaaaaaaa-bbbb-4ccc-8ddd-eeeeeeeeeeee", slug="draft", views=99),
    ])
    await store.save_comments([
        comment_factory(approved=True),
        comment_factory(id="00000000-0000-4000-8000-000000000001"),
    ])

    summary = await store.get_analytics_summary()

    assert summary["totalViews"] == 35
    assert summary["totalPosts"] == 2
    assert summary["totalComments"] == 1
    assert [p["id"] for p in summary["topPosts"]] == [OTHER_POST_ID, POST_ID]


@pytest.mark.asyncio
async def test_analytics_round_trip(store):
    saved = await store.save_analytics([
        {"postId": POST_ID, "views": 3, "reads": 1, "engagementScore": 0.5},
    ])

    assert await store.get_analytics() == saved
    assert saved[0].engagement_score == 0.5
