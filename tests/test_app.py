"""
Tests for the composition root.
"""
import pytest

from gharnari.app import BlogServices


@pytest.fixture
def services(data_dir, uploads_dir):
    return BlogServices(
        data_dir=data_dir,
        uploads_dir=uploads_dir,
        max_backups=5,
        timezone_name="UTC",
        webhook_url="",
    )


@pytest.mark.asyncio
async def test_initialize_backup_system_is_once_only(services):
    try:
        assert await services.initialize_backup_system() is True
        assert await services.initialize_backup_system() is False
        assert services.scheduler.is_running
    finally:
        await services.close()

    assert not services.scheduler.is_running


@pytest.mark.asyncio
async def test_backup_surface(services, data_dir):
    path = await services.create_backup()

    assert path.parent == data_dir / "backups"
    assert [b.name for b in await services.list_backups()] == [path.name]

    result = await services.restore_from_backup(path.name)
    assert result["restored"] == path.name
    assert len(await services.list_backups()) == 2

    export = await services.export_data()
    assert export.exists()

    assert await services.delete_backup(path.name) is True
    assert services.backups.max_backups == 5
