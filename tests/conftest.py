"""
Shared fixtures: every test gets its own SQLite database and upload directory.
"""
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from blog_api.config import Settings
from blog_api.main import create_app


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'blog.db'}",
        UPLOAD_DIR=str(tmp_path / "public" / "uploads"),
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def upload_dir(settings: Settings) -> Path:
    return Path(settings.UPLOAD_DIR)


@pytest.fixture
def client(settings: Settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def create_post(client: TestClient):
    """Create a post through the API and return its id."""

    def _create(files=None, **fields):
        data = {"name": "Sample post", "publish": "on"}
        data.update(fields)
        response = client.post("/api/blog", data=data, files=files)
        assert response.status_code == 200, response.text
        return response.json()["id"]

    return _create
