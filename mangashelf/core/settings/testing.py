from typing import List, Optional

from .base import BaseSettings


class TestingSettings(BaseSettings):
    ENVIRONMENT: str = "testing"
    DEBUG: bool = True

    DATABASE_URL: str = "sqlite:///:memory:"
    DATABASE_ECHO: bool = False

    SECRET_KEY: str = "testing-secret-key-not-for-real-use-0123456789abcdef"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 5

    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Tests point the storage at a tmp_path
    MANGA_DIR: str = "tests/media"

    # Fake image bytes in tests are not decodable
    IMAGE_OPTIMIZE: bool = False

    LOG_LEVEL: str = "ERROR"
    LOG_FILE: Optional[str] = None

    model_config = {
        "case_sensitive": True,
        "env_prefix": "TEST_",
        "extra": "ignore",
    }
