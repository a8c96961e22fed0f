"""
Tests for backup creation, listing, retention, restore and export.
"""
import json

import pytest

from gharnari.backup import BackupManager
from gharnari.core.constants import POSTS_FILE
from gharnari.errors import BackupFormatError, BackupNotFoundError
from gharnari.utils.timestamps import utc_now

from conftest import OTHER_POST_ID


async def seed(store, post_factory, comment_factory):
    await store.save_posts([
        post_factory(status="published"),
        post_factory(id=OTHER_POST_ID, slug="other"),
    ])
    await store.save_comments([
        comment_factory(id="00000000-0000-4000-8000-000000000001"),
        comment_factory(id="00000000-0000-4000-8000-000000000002", approved=True),
        comment_factory(id="00000000-0000-4000-8000-000000000003", postId=OTHER_POST_ID),
    ])


def write_backup_file(manager, name, document):
    manager.backup_dir.mkdir(parents=True, exist_ok=True)
    path = manager.backup_dir / name
    path.write_text(json.dumps(document) if not isinstance(document, str) else document)
    return path


# =============================================================================
# Create / List
# =============================================================================

@pytest.mark.asyncio
async def test_create_backup_contents(manager, store, post_factory, comment_factory):
    await seed(store, post_factory, comment_factory)

    path = await manager.create_backup()
    document = json.loads(path.read_text())

    assert path.name.startswith("backup-") and path.suffix == ".json"
    assert len(document["posts"]) == 2
    assert len(document["comments"]) == 3
    assert document["settings"]["siteName"] == "Ghar nari"
    assert document["analytics"] == []
    assert document["version"] == "1.0.0"
    assert document["timestamp"].endswith("Z")


@pytest.mark.asyncio
async def test_new_backup_is_listed_first(manager):
    first = await manager.create_backup()
    second = await manager.create_backup()

    backups = await manager.list_backups()

    assert [b.name for b in backups] == [second.name, first.name]
    assert backups[0].created_at > backups[1].created_at
    assert backups[0].size == second.stat().st_size
    assert (await manager.get_latest_backup()).name == second.name


@pytest.mark.asyncio
async def test_list_backups_empty(manager):
    assert await manager.list_backups() == []
    assert await manager.get_latest_backup() is None


@pytest.mark.asyncio
async def test_list_ignores_other_files_and_skips_content(manager):
    await manager.create_backup()
    write_backup_file(manager, "notes.txt", "hello")
    write_backup_file(manager, "backup-garbage.json", "not json at all")

    names = [b.name for b in await manager.list_backups()]

    assert "notes.txt" not in names
    assert "backup-garbage.json" in names
    assert len(names) == 2


@pytest.mark.asyncio
async def test_backup_info_to_dict(manager):
    await manager.create_backup()
    info = (await manager.list_backups())[0].to_dict()

    assert set(info) == {"name", "size", "created"}
    assert info["created"].endswith("Z")


# =============================================================================
# Retention / Delete
# =============================================================================

@pytest.mark.asyncio
async def test_retention_keeps_newest(manager):
    created = [await manager.create_backup() for _ in range(31)]

    backups = await manager.list_backups()
    names = {b.name for b in backups}

    assert len(backups) == 30
    assert created[0].name not in names
    assert created[-1].name in names
    assert not created[0].exists()


@pytest.mark.asyncio
async def test_cleanup_with_small_cap(store):
    manager = BackupManager(store, max_backups=2)
    for _ in range(3):
        await manager.create_backup()

    assert len(await manager.list_backups()) == 2
    assert await manager.cleanup_old_backups() == 0


@pytest.mark.asyncio
async def test_delete_backup(manager):
    path = await manager.create_backup()

    assert await manager.delete_backup(path.name) is True
    assert not path.exists()
    assert await manager.delete_backup(path.name) is False


@pytest.mark.asyncio
async def test_delete_backup_rejects_foreign_paths(manager, store):
    await manager.create_backup()

    assert await manager.delete_backup("../posts.json") is False
    assert await manager.delete_backup("posts.json") is False
    assert store.collection_path(POSTS_FILE).exists()


# =============================================================================
# Restore
# =============================================================================

@pytest.mark.asyncio
async def test_restore_replaces_live_data(manager, store, post_factory, comment_factory):
    await seed(store, post_factory, comment_factory)
    backup = await manager.create_backup()

    await store.save_posts([])
    await store.save_comments([])
    started = utc_now()

    result = await manager.restore_from_backup(backup.name)

    assert len(await store.get_posts()) == 2
    assert len(await store.get_comments()) == 3
    assert result["restored"] == backup.name
    assert result["posts"] == 2
    assert result["comments"] == 3

    backups = await manager.list_backups()
    safety = next(b for b in backups if b.name == result["safetyBackup"])
    assert safety.created_at >= started
    assert len(backups) == 2


@pytest.mark.asyncio
async def test_safety_backup_holds_pre_restore_state(manager, store, post_factory, comment_factory):
    backup = await manager.create_backup()
    await seed(store, post_factory, comment_factory)

    result = await manager.restore_from_backup(backup.name)

    safety = json.loads((manager.backup_dir / result["safetyBackup"]).read_text())
    assert len(safety["posts"]) == 2
    assert await store.get_posts() == []


@pytest.mark.asyncio
async def test_restore_at_cap_keeps_source_until_written(store, monkeypatch):
    manager = BackupManager(store, max_backups=2)
    source = await manager.create_backup()
    newer = await manager.create_backup()

    source_present = []
    save_posts = store.save_posts

    async def recording_save_posts(posts):
        source_present.append(source.exists())
        return await save_posts(posts)

    monkeypatch.setattr(store, "save_posts", recording_save_posts)

    result = await manager.restore_from_backup(source.name)

    assert source_present == [True]
    names = [b.name for b in await manager.list_backups()]
    assert names == [result["safetyBackup"], newer.name]


@pytest.mark.asyncio
async def test_restore_missing_backup(manager):
    with pytest.raises(BackupNotFoundError) as exc_info:
        await manager.restore_from_backup("backup-2026-01-01T00-00-00-000000Z.json")
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("document", [
    "not json",
    {"posts": [], "comments": []},
    {"posts": {}, "comments": [], "settings": {}},
])
async def test_restore_structural_failure_leaves_live_data(
    manager, store, post_factory, comment_factory, document
):
    await seed(store, post_factory, comment_factory)
    posts_before = store.collection_path(POSTS_FILE).read_bytes()
    write_backup_file(manager, "backup-broken.json", document)

    with pytest.raises(BackupFormatError):
        await manager.restore_from_backup("backup-broken.json")

    assert store.collection_path(POSTS_FILE).read_bytes() == posts_before
    # No safety backup was taken
    assert [b.name for b in await manager.list_backups()] == ["backup-broken.json"]


@pytest.mark.asyncio
async def test_restore_rejects_invalid_records(manager, store, post_factory, comment_factory):
    await seed(store, post_factory, comment_factory)
    settings = (await store.get_settings()).to_json()
    write_backup_file(manager, "backup-bad-record.json", {
        "posts": [post_factory(category="Travel")],
        "comments": [],
        "settings": settings,
    })

    with pytest.raises(BackupFormatError) as exc_info:
        await manager.restore_from_backup("backup-bad-record.json")

    issues = exc_info.value.details["issues"]
    assert issues[0]["path"] == "posts[0].category"
    assert len(await store.get_posts()) == 2


@pytest.mark.asyncio
async def test_restore_without_analytics_keeps_live_analytics(manager, store, post_factory):
    settings = (await store.get_settings()).to_json()
    await store.save_analytics([{"postId": "p1", "views": 7}])
    write_backup_file(manager, "backup-old.json", {
        "posts": [post_factory()],
        "comments": [],
        "settings": settings,
    })

    result = await manager.restore_from_backup("backup-old.json")

    assert result["analytics"] is None
    assert (await store.get_analytics())[0].views == 7


# =============================================================================
# Export
# =============================================================================

@pytest.mark.asyncio
async def test_export_data(manager, store, post_factory, comment_factory):
    await seed(store, post_factory, comment_factory)

    path = await manager.export_data()
    document = json.loads(path.read_text())

    assert path.parent == store.data_dir
    assert path.name.startswith("export-")
    assert document["exportedAt"].endswith("Z")
    assert len(document["posts"]) == 2
    assert await manager.list_backups() == []


@pytest.mark.asyncio
async def test_exports_are_not_pruned(store):
    manager = BackupManager(store, max_backups=1)
    export = await manager.export_data()
    for _ in range(3):
        await manager.create_backup()

    assert export.exists()
    assert len(await manager.list_backups()) == 1
