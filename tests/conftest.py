"""
Test configuration and fixtures for Mangashelf API tests.
"""
import os
import sqlite3
import tempfile
from typing import Any, Callable, Dict, Generator, List, Optional

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("TEST_MANGA_DIR", tempfile.mkdtemp(prefix="mangashelf-media-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mangashelf.core.auth import create_access_token
from mangashelf.core.database import Base, get_db
from mangashelf.core.storage import MangaStorage, manga_storage
from mangashelf.crud.chapter import crud_chapter
from mangashelf.crud.manga import crud_manga
from mangashelf.crud.user import crud_user
from mangashelf.main import app
from mangashelf.models.chapter import Chapter
from mangashelf.models.manga import Manga
from mangashelf.models.user import ROLE_ADMIN, User
from mangashelf.schemas.manga import MangaCreate
from mangashelf.schemas.user import UserCreate
from mangashelf.utils.text import slugify_title

# Use in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"

# Create test engine with foreign key support enabled
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={
        "check_same_thread": False,
    },
    poolclass=StaticPool,
    echo=False,
)


# Add event listener to enable foreign keys for each connection
@event.listens_for(Engine, "connect")
def enable_sqlite_fks(dbapi_connection, connection_record):
    """Enable foreign key constraints in SQLite."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Create test session
TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    # Create tables
    Base.metadata.create_all(bind=engine)

    # Create session
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        # Drop tables after test
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def media_root(tmp_path, monkeypatch) -> MangaStorage:
    """Point the media storage at a per-test folder."""
    root = tmp_path / "manga"
    root.mkdir()
    monkeypatch.setattr(manga_storage, "root", root)
    return manga_storage


@pytest.fixture(scope="function")
def client(db_session) -> Generator[TestClient, None, None]:
    """Create a test client with database session override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def test_user_data() -> Dict[str, Any]:
    """Test user data."""
    return {
        "username": "reader",
        "nickname": "Reader One",
        "password": "readerpass123",
    }


@pytest.fixture
def test_admin_data() -> Dict[str, Any]:
    """Test admin user data."""
    return {
        "username": "curator",
        "password": "curatorpass123",
    }


@pytest.fixture
def test_user(db_session, test_user_data) -> User:
    """Create a test user."""
    return crud_user.create(db_session, obj_in=UserCreate(**test_user_data))


@pytest.fixture
def test_user_2(db_session) -> User:
    """Create a second test user."""
    user_in = UserCreate(username="reader2", password="readerpass456")
    return crud_user.create(db_session, obj_in=user_in)


@pytest.fixture
def test_admin_user(db_session, test_admin_data) -> User:
    """Create a test admin user."""
    return crud_user.create(
        db_session, obj_in=UserCreate(**test_admin_data), role=ROLE_ADMIN
    )


@pytest.fixture
def user_token(test_user) -> str:
    """Generate JWT token for test user."""
    return create_access_token(test_user.id)


@pytest.fixture
def admin_token(test_admin_user) -> str:
    """Generate JWT token for test admin user."""
    return create_access_token(test_admin_user.id)


@pytest.fixture
def auth_headers(user_token) -> Dict[str, str]:
    """Authentication headers for regular user."""
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture
def auth_headers_2(test_user_2) -> Dict[str, str]:
    """Authentication headers for the second regular user."""
    return {"Authorization": f"Bearer {create_access_token(test_user_2.id)}"}


@pytest.fixture
def admin_headers(admin_token) -> Dict[str, str]:
    """Authentication headers for admin user."""
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def make_manga(db_session) -> Callable[..., Manga]:
    """Factory that inserts a manga row directly."""

    def _make_manga(title: str, **fields: Any) -> Manga:
        cover = fields.pop("cover", None)
        return crud_manga.create_with_slug(
            db_session,
            obj_in=MangaCreate(title=title, **fields),
            slug=slugify_title(title),
            cover=cover,
        )

    return _make_manga


@pytest.fixture
def make_chapter(db_session) -> Callable[..., Chapter]:
    """Factory that inserts a chapter row directly."""

    def _make_chapter(
        manga: Manga,
        title: str,
        volume: str = "Unknown Volume",
        pages: Optional[List[str]] = None,
    ) -> Chapter:
        slug = slugify_title(title)
        if pages is None:
            pages = [f"/manga/{manga.slug}/{slug}/001-page.jpg"]
        return crud_chapter.create_for_manga(
            db_session,
            manga_id=manga.id,
            title=title,
            slug=slug,
            volume=volume,
            pages=pages,
        )

    return _make_chapter


@pytest.fixture
def test_manga(make_manga) -> Manga:
    """Create a test manga."""
    return make_manga(
        "One Piece",
        author="Eiichiro Oda",
        genre="Action, Adventure, Comedy",
        synopsis="Pirates searching for the One Piece",
    )


@pytest.fixture
def adult_manga(make_manga) -> Manga:
    """Create an 18+ manga."""
    return make_manga("Night Garden", author="Someone Else", genre="Drama", rating="18+")


@pytest.fixture
def test_chapter(make_chapter, test_manga) -> Chapter:
    """Create a test chapter."""
    return make_chapter(test_manga, "Chapter 1")


@pytest.fixture
def image_file() -> Callable[..., tuple]:
    """Build a multipart file tuple with placeholder image bytes."""

    def _image_file(name: str = "page.jpg", content: bytes = b"\xff\xd8fake-jpeg", content_type: str = "image/jpeg"):
        return (name, content, content_type)

    return _image_file


@pytest.fixture
def api_v1_prefix() -> str:
    """API v1 prefix."""
    return "/api/v1"
