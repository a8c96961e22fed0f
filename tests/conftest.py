"""
Shared fixtures for the storage engine tests.
"""
import os
import tempfile

# Keep test log files out of the repository
os.environ.setdefault("GHARNARI_LOGS_DIR", os.path.join(tempfile.gettempdir(), "gharnari-test-logs"))

import pytest

from gharnari.backup import BackupManager
from gharnari.storage import DocumentStore


POST_ID = "3f2b8c1e-7a4d-4e2b-9c6f-1a2b3c4d5e6f"
OTHER_POST_ID = "9a8b7c6d-5e4f-4a3b-8c2d-1e0f9a8b7c6d"


def make_post(**overrides):
    post = {
        "id": POST_ID,
        "title": "Maa ki Rasoi",
        "slug": "maa-ki-rasoi",
        "content": "Stories from the kitchen where every meal carried a memory.",
        "excerpt": "Stories from the kitchen",
        "author": "Author Name",
        "publishedAt": None,
        "createdAt": "2026-01-10T08:00:00.000Z",
        "updatedAt": "2026-01-10T08:00:00.000Z",
        "category": "Ghar ki baat",
        "tags": ["family", "food"],
        "status": "draft",
        "views": 0,
    }
    post.update(overrides)
    return post


def make_comment(**overrides):
    comment = {
        "id": "c0ffee00-1234-4abc-8def-0123456789ab",
        "postId": POST_ID,
        "author": "Asha Verma",
        "email": "asha@example.com",
        "content": "Beautifully written.",
        "createdAt": "2026-01-11T09:30:00.000Z",
        "approved": False,
    }
    comment.update(overrides)
    return comment


@pytest.fixture
def post_factory():
    return make_post


@pytest.fixture
def comment_factory():
    return make_comment


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def uploads_dir(tmp_path):
    path = tmp_path / "public" / "uploads"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def store(data_dir, uploads_dir):
    return DocumentStore(data_dir=data_dir, uploads_dir=uploads_dir)


@pytest.fixture
def manager(store):
    return BackupManager(store, max_backups=30)
