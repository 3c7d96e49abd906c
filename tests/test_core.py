"""
Core functionality tests.
"""
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import text

from mangashelf.core.config import settings
from mangashelf.core.database import get_db
from mangashelf.main import app


class TestSettings:
    """Test application settings."""

    def test_testing_settings_loaded(self):
        assert settings.ENVIRONMENT == "testing"
        assert settings.is_testing
        assert settings.SECRET_KEY
        assert settings.IMAGE_OPTIMIZE is False

    def test_library_settings(self):
        assert settings.PAGE_SIZE == 10
        assert settings.HOT_CHAPTER_THRESHOLD == 3
        assert settings.NEW_MANGA_COUNT == 5
        assert settings.MAX_ARCHIVE_SIZE > settings.MAX_UPLOAD_SIZE


class TestDatabase:
    """Test database configuration."""

    def test_database_connection(self):
        db_generator = get_db()
        db = next(db_generator)
        try:
            assert db.execute(text("SELECT 1")).scalar() == 1
        finally:
            db.close()


class TestApplication:
    """Test FastAPI application setup."""

    def test_app_instance(self):
        assert app.title == settings.PROJECT_NAME
        assert app.openapi_url == f"{settings.API_V1_STR}/openapi.json"

    def test_health_endpoint(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"
        assert data["environment"] == "testing"

    def test_validation_errors_use_envelope(self, client: TestClient, api_v1_prefix: str):
        response = client.post(f"{api_v1_prefix}/auth/login", json={"username": "x"})

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["errors"]
        assert body["detail"][0]["loc"][-1] == "password"

    def test_media_is_served(self, client: TestClient):
        folder = Path(settings.MANGA_DIR) / "served"
        folder.mkdir(parents=True, exist_ok=True)
        (folder / "cover.jpg").write_bytes(b"img")

        response = client.get(f"{settings.MEDIA_URL_PREFIX}/served/cover.jpg")

        assert response.status_code == 200
        assert response.content == b"img"
