"""
Test manga endpoints.
"""
from unittest.mock import patch

import pytest

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from mangashelf.core.storage import MangaStorage
from mangashelf.crud.bookmark import crud_bookmark
from mangashelf.crud.manga import crud_manga
from mangashelf.crud.reaction import crud_reaction
from mangashelf.crud.reading_progress import crud_reading_progress
from mangashelf.models.bookmark import Bookmark
from mangashelf.models.chapter import Chapter
from mangashelf.models.comment import Comment
from mangashelf.models.manga import Manga
from mangashelf.models.reaction import Reaction
from mangashelf.models.reading_progress import ReadingProgress
from mangashelf.models.user import User
from mangashelf.schemas.social import TargetType


class TestCreateManga:
    """Test manga creation."""

    def test_create_with_cover(
        self,
        client: TestClient,
        api_v1_prefix: str,
        admin_headers: dict,
        image_file,
        media_root: MangaStorage,
    ):
        response = client.post(
            f"{api_v1_prefix}/manga/",
            data={
                "title": "  Vinland   Saga ",
                "author": "Makoto Yukimura",
                "genre": "Action, History",
                "rating": "",
            },
            files={"cover": image_file("front.PNG", b"cover-bytes", "image/png")},
            headers=admin_headers,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["title"] == "Vinland   Saga"
        assert data["slug"] == "vinland-saga"
        assert data["cover"] == "/manga/vinland-saga/cover.png"
        assert (media_root.root / "vinland-saga" / "cover.png").read_bytes() == b"cover-bytes"

    def test_create_without_cover(self, client: TestClient, api_v1_prefix: str, admin_headers: dict, media_root: MangaStorage):
        response = client.post(
            f"{api_v1_prefix}/manga/", data={"title": "Blame"}, headers=admin_headers
        )

        assert response.status_code == 201
        assert response.json()["data"]["cover"] is None
        assert (media_root.root / "blame").is_dir()

    def test_create_blank_title(self, client: TestClient, api_v1_prefix: str, admin_headers: dict):
        response = client.post(
            f"{api_v1_prefix}/manga/", data={"title": "   "}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Field 'title' must not be empty"

    def test_create_duplicate_slug(self, client: TestClient, api_v1_prefix: str, admin_headers: dict, test_manga: Manga):
        response = client.post(
            f"{api_v1_prefix}/manga/", data={"title": "ONE  piece"}, headers=admin_headers
        )

        assert response.status_code == 400
        assert "already exists" in response.json()["detail"]

    def test_create_invalid_rating(self, client: TestClient, api_v1_prefix: str, admin_headers: dict):
        response = client.post(
            f"{api_v1_prefix}/manga/",
            data={"title": "Rated", "rating": "PG-13"},
            headers=admin_headers,
        )

        assert response.status_code == 422

    def test_create_unsafe_title(self, client: TestClient, api_v1_prefix: str, admin_headers: dict):
        response = client.post(
            f"{api_v1_prefix}/manga/", data={"title": "../etc"}, headers=admin_headers
        )

        assert response.status_code == 400

    def test_create_rejects_wrong_cover_type(
        self, client: TestClient, api_v1_prefix: str, admin_headers: dict, media_root: MangaStorage
    ):
        response = client.post(
            f"{api_v1_prefix}/manga/",
            data={"title": "Bad Cover"},
            files={"cover": ("cover.pdf", b"%PDF", "application/pdf")},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert not (media_root.root / "bad-cover").exists()

    def test_create_requires_admin(self, client: TestClient, api_v1_prefix: str, auth_headers: dict):
        response = client.post(
            f"{api_v1_prefix}/manga/", data={"title": "Nope"}, headers=auth_headers
        )

        assert response.status_code == 403

    def test_create_requires_auth(self, client: TestClient, api_v1_prefix: str):
        response = client.post(f"{api_v1_prefix}/manga/", data={"title": "Nope"})

        assert response.status_code == 401

    def test_failed_insert_removes_written_files(
        self,
        client: TestClient,
        api_v1_prefix: str,
        admin_headers: dict,
        image_file,
        media_root: MangaStorage,
    ):
        with patch.object(crud_manga, "create_with_slug", side_effect=RuntimeError("db down")):
            with pytest.raises(RuntimeError):
                client.post(
                    f"{api_v1_prefix}/manga/",
                    data={"title": "Doomed"},
                    files={"cover": image_file("c.jpg")},
                    headers=admin_headers,
                )

        assert not (media_root.root / "doomed").exists()


class TestReadManga:
    """Test the manga detail endpoint."""

    def test_detail(
        self,
        client: TestClient,
        api_v1_prefix: str,
        auth_headers: dict,
        test_user: User,
        test_manga: Manga,
        make_manga,
        make_chapter,
        db_session: Session,
    ):
        first = make_chapter(test_manga, "Chapter 1", volume="1")
        make_chapter(test_manga, "Chapter 2", volume="2")
        make_manga("Naruto", author="Kishimoto", genre="Action")
        crud_bookmark.set(db_session, user_id=test_user.id, manga_id=test_manga.id)
        crud_reading_progress.upsert(
            db_session, user_id=test_user.id, manga_id=test_manga.id, chapter_id=first.id
        )

        response = client.get(f"{api_v1_prefix}/manga/one-piece", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["manga"]["slug"] == "one-piece"
        assert data["genres"] == ["Action", "Adventure", "Comedy"]
        assert data["chapter_count"] == 2
        assert [v["label"] for v in data["volumes"]] == ["Volume 2", "Volume 1"]
        assert [r["manga"]["slug"] for r in data["related"]] == ["naruto"]
        assert data["is_bookmarked"] is True
        assert data["progress"]["chapter_id"] == first.id

    def test_detail_anonymous(self, client: TestClient, api_v1_prefix: str, test_manga: Manga):
        data = client.get(f"{api_v1_prefix}/manga/one-piece").json()["data"]

        assert data["is_bookmarked"] is False
        assert data["progress"] is None

    def test_not_found(self, client: TestClient, api_v1_prefix: str):
        response = client.get(f"{api_v1_prefix}/manga/missing")

        assert response.status_code == 404
        assert response.json()["detail"] == "Manga 'missing' not found"


class TestUpdateManga:
    """Test manga updates and renames."""

    def test_update_fields(self, client: TestClient, api_v1_prefix: str, admin_headers: dict, test_manga: Manga):
        response = client.put(
            f"{api_v1_prefix}/manga/one-piece",
            data={"synopsis": "Updated", "rating": "18+"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["synopsis"] == "Updated"
        assert data["rating"] == "18+"
        assert data["slug"] == "one-piece"
        assert data["author"] == "Eiichiro Oda"

    def test_rename_moves_folder_and_paths(
        self,
        client: TestClient,
        api_v1_prefix: str,
        admin_headers: dict,
        image_file,
        media_root: MangaStorage,
        db_session: Session,
    ):
        created = client.post(
            f"{api_v1_prefix}/manga/",
            data={"title": "Old Name"},
            files={"cover": image_file("cover.jpg")},
            headers=admin_headers,
        )
        assert created.status_code == 201
        client.post(
            f"{api_v1_prefix}/manga/old-name/chapters",
            data={"title": "Chapter 1"},
            files=[("pages", image_file("a.jpg")), ("pages", image_file("b.jpg"))],
            headers=admin_headers,
        )

        response = client.put(
            f"{api_v1_prefix}/manga/old-name", data={"title": "New Name"}, headers=admin_headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["slug"] == "new-name"
        assert data["cover"] == "/manga/new-name/cover.jpg"
        assert not (media_root.root / "old-name").exists()
        assert (media_root.root / "new-name" / "cover.jpg").exists()

        chapter = db_session.query(Chapter).one()
        assert chapter.pages == [
            "/manga/new-name/chapter-1/001-a.jpg",
            "/manga/new-name/chapter-1/002-b.jpg",
        ]
        for page in chapter.pages:
            assert media_root.local_path(page).exists()

        assert client.get(f"{api_v1_prefix}/manga/old-name").status_code == 404
        assert client.get(f"{api_v1_prefix}/manga/new-name/chapter-1").status_code == 200

    def test_rename_to_existing_slug(
        self, client: TestClient, api_v1_prefix: str, admin_headers: dict, test_manga: Manga, make_manga
    ):
        make_manga("Bleach")

        response = client.put(
            f"{api_v1_prefix}/manga/bleach", data={"title": "One Piece"}, headers=admin_headers
        )

        assert response.status_code == 400

    def test_failed_update_renames_folder_back(
        self,
        client: TestClient,
        api_v1_prefix: str,
        admin_headers: dict,
        media_root: MangaStorage,
    ):
        client.post(f"{api_v1_prefix}/manga/", data={"title": "Stable"}, headers=admin_headers)

        with patch.object(crud_manga, "update_by_id", side_effect=RuntimeError("db down")):
            with pytest.raises(RuntimeError):
                client.put(
                    f"{api_v1_prefix}/manga/stable", data={"title": "Moved"}, headers=admin_headers
                )

        assert (media_root.root / "stable").is_dir()
        assert not (media_root.root / "moved").exists()

    def test_replace_cover_with_new_format(
        self,
        client: TestClient,
        api_v1_prefix: str,
        admin_headers: dict,
        image_file,
        media_root: MangaStorage,
    ):
        client.post(
            f"{api_v1_prefix}/manga/",
            data={"title": "Covered"},
            files={"cover": image_file("cover.jpg")},
            headers=admin_headers,
        )

        response = client.put(
            f"{api_v1_prefix}/manga/covered",
            files={"cover": image_file("cover.png", b"png", "image/png")},
            headers=admin_headers,
        )

        assert response.json()["data"]["cover"] == "/manga/covered/cover.png"
        assert not (media_root.root / "covered" / "cover.jpg").exists()

    def test_failed_update_keeps_old_cover(
        self,
        client: TestClient,
        api_v1_prefix: str,
        admin_headers: dict,
        image_file,
        media_root: MangaStorage,
    ):
        client.post(
            f"{api_v1_prefix}/manga/",
            data={"title": "Covered"},
            files={"cover": image_file("cover.jpg", b"old cover")},
            headers=admin_headers,
        )

        with patch.object(crud_manga, "update_by_id", side_effect=RuntimeError("db down")):
            with pytest.raises(RuntimeError):
                client.put(
                    f"{api_v1_prefix}/manga/covered",
                    files={"cover": image_file("cover.jpg", b"new cover")},
                    headers=admin_headers,
                )

        folder = media_root.root / "covered"
        assert (folder / "cover.jpg").read_bytes() == b"old cover"
        assert [p.name for p in folder.iterdir()] == ["cover.jpg"]

    def test_replace_cover_same_format(
        self,
        client: TestClient,
        api_v1_prefix: str,
        admin_headers: dict,
        image_file,
        media_root: MangaStorage,
    ):
        client.post(
            f"{api_v1_prefix}/manga/",
            data={"title": "Covered"},
            files={"cover": image_file("cover.jpg", b"old cover")},
            headers=admin_headers,
        )

        response = client.put(
            f"{api_v1_prefix}/manga/covered",
            files={"cover": image_file("cover.jpg", b"new cover")},
            headers=admin_headers,
        )

        assert response.json()["data"]["cover"] == "/manga/covered/cover.jpg"
        folder = media_root.root / "covered"
        assert (folder / "cover.jpg").read_bytes() == b"new cover"
        assert [p.name for p in folder.iterdir()] == ["cover.jpg"]


class TestDeleteManga:
    """Test manga deletion."""

    def test_delete_cascades(
        self,
        client: TestClient,
        api_v1_prefix: str,
        admin_headers: dict,
        auth_headers: dict,
        test_user: User,
        test_manga: Manga,
        test_chapter: Chapter,
        media_root: MangaStorage,
        db_session: Session,
    ):
        (media_root.root / "one-piece" / "chapter-1").mkdir(parents=True)
        manga_id, chapter_id = test_manga.id, test_chapter.id
        client.post(f"{api_v1_prefix}/bookmarks/one-piece", headers=auth_headers)
        client.get(f"{api_v1_prefix}/manga/one-piece/chapter-1", headers=auth_headers)
        comment = client.post(
            f"{api_v1_prefix}/comments/chapter/{chapter_id}",
            json={"body": "Great chapter"},
            headers=auth_headers,
        ).json()["data"]
        client.post(
            f"{api_v1_prefix}/comments/manga/{manga_id}", json={"body": "Classic"}, headers=auth_headers
        )
        client.post(
            f"{api_v1_prefix}/reactions/comment/{comment['id']}",
            json={"emoji": "\U0001F44D"},
            headers=auth_headers,
        )
        client.post(
            f"{api_v1_prefix}/reactions/manga/{manga_id}", json={"emoji": "❤️"}, headers=auth_headers
        )

        response = client.delete(f"{api_v1_prefix}/manga/one-piece", headers=admin_headers)

        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.get(Manga, manga_id) is None
        assert db_session.query(Chapter).count() == 0
        assert db_session.query(Bookmark).count() == 0
        assert db_session.query(ReadingProgress).count() == 0
        assert db_session.query(Comment).count() == 0
        assert db_session.query(Reaction).count() == 0
        assert not (media_root.root / "one-piece").exists()

    def test_delete_keeps_other_manga_social_rows(
        self,
        client: TestClient,
        api_v1_prefix: str,
        admin_headers: dict,
        test_user: User,
        test_manga: Manga,
        make_manga,
        db_session: Session,
    ):
        other = make_manga("Survivor")
        crud_reaction.upsert(
            db_session, user_id=test_user.id, target_type=TargetType.MANGA, target_id=other.id, emoji="x"
        )

        client.delete(f"{api_v1_prefix}/manga/one-piece", headers=admin_headers)

        assert db_session.query(Reaction).count() == 1

    def test_delete_survives_folder_removal_failure(
        self,
        client: TestClient,
        api_v1_prefix: str,
        admin_headers: dict,
        test_manga: Manga,
        media_root: MangaStorage,
    ):
        with patch.object(media_root, "remove_manga_dir", return_value=False):
            response = client.delete(f"{api_v1_prefix}/manga/one-piece", headers=admin_headers)

        assert response.status_code == 200
        assert client.get(f"{api_v1_prefix}/manga/one-piece").status_code == 404

    def test_delete_requires_admin(self, client: TestClient, api_v1_prefix: str, auth_headers: dict, test_manga: Manga):
        response = client.delete(f"{api_v1_prefix}/manga/one-piece", headers=auth_headers)

        assert response.status_code == 403
