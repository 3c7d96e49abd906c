from typing import List, Optional

from pydantic_settings import BaseSettings as PydanticBaseSettings


class BaseSettings(PydanticBaseSettings):
    # ===============================
    # APPLICATION SETTINGS
    # ===============================
    PROJECT_NAME: str = "Mangashelf API"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "Self-hosted manga reading and publishing platform"

    # ===============================
    # API SETTINGS
    # ===============================
    API_V1_STR: str = "/api/v1"

    # ===============================
    # JWT ALGORITHM
    # ===============================
    ALGORITHM: str = "HS256"

    # ===============================
    # LIBRARY SETTINGS
    # ===============================
    PAGE_SIZE: int = 10
    HOT_CHAPTER_THRESHOLD: int = 3
    NEW_MANGA_COUNT: int = 5
    LATEST_CHAPTERS_PER_MANGA: int = 3
    RELATED_LIMIT: int = 6

    # ===============================
    # MEDIA SETTINGS
    # ===============================
    MANGA_DIR: str = "manga"
    MEDIA_URL_PREFIX: str = "/manga"
    MAX_UPLOAD_SIZE: int = 20 * 1024 * 1024  # 20MB per file
    MAX_ARCHIVE_SIZE: int = 200 * 1024 * 1024  # 200MB per chapter archive
    ALLOWED_IMAGE_TYPES: List[str] = [
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/webp",
        "image/gif",
    ]
    ALLOWED_ARCHIVE_TYPES: List[str] = [
        "application/zip",
        "application/x-zip-compressed",
        "application/octet-stream",
    ]

    # ===============================
    # IMAGE OPTIMIZATION
    # ===============================
    IMAGE_OPTIMIZE: bool = True
    IMAGE_MAX_WIDTH: int = 1280
    IMAGE_QUALITY: int = 80

    # ===============================
    # LOGGING SETTINGS
    # ===============================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    # ===============================
    # COMPUTED PROPERTIES
    # ===============================
    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_testing(self) -> bool:
        return self.ENVIRONMENT == "testing"

    model_config = {
        "case_sensitive": True,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }
