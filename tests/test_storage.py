"""
Test the media folder: paths, page writes, archives and image optimization.
"""
import io
import zipfile

import pytest
from PIL import Image

from mangashelf.core.config import settings
from mangashelf.core.exceptions import StorageUnavailable
from mangashelf.core.storage import MangaStorage


@pytest.fixture
def storage(tmp_path) -> MangaStorage:
    return MangaStorage(root=str(tmp_path / "media"), url_prefix="/manga/")


def png_bytes(width: int = 40, height: int = 20) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 30, 30)).save(buffer, "PNG")
    return buffer.getvalue()


class TestPaths:
    """Test public path and local path mapping."""

    def test_public_paths(self, storage: MangaStorage):
        assert storage.public_path("one-piece", "cover.jpg") == "/manga/one-piece/cover.jpg"
        assert storage.manga_prefix("one-piece") == "/manga/one-piece/"
        assert storage.chapter_prefix("one-piece", "chapter-1") == "/manga/one-piece/chapter-1/"

    def test_local_path_round_trip(self, storage: MangaStorage):
        path = storage.local_path("/manga/one-piece/chapter-1/001-a.jpg")

        assert path == storage.chapter_dir("one-piece", "chapter-1") / "001-a.jpg"

    def test_local_path_rejects_foreign_paths(self, storage: MangaStorage):
        assert storage.local_path("/static/x.jpg") is None
        assert storage.local_path("/manga/../../etc/passwd") is None
        assert storage.local_path("") is None

    def test_escaping_slug_is_rejected(self, storage: MangaStorage):
        with pytest.raises(ValueError):
            storage.manga_dir("..")


class TestWrites:
    """Test covers, pages and avatars."""

    def test_save_pages_prefixes_index(self, storage: MangaStorage):
        pages = storage.save_pages(
            "one-piece", "chapter-1", [("b.jpg", b"1"), ("a.jpg", b"2"), ("../evil.jpg", b"3")]
        )

        assert pages == [
            "/manga/one-piece/chapter-1/001-b.jpg",
            "/manga/one-piece/chapter-1/002-a.jpg",
            "/manga/one-piece/chapter-1/003-evil.jpg",
        ]
        assert sorted(p.name for p in storage.chapter_dir("one-piece", "chapter-1").iterdir()) == [
            "001-b.jpg",
            "002-a.jpg",
            "003-evil.jpg",
        ]

    def test_save_cover_replaces_by_extension(self, storage: MangaStorage):
        assert storage.save_cover("berserk", b"x", "Front.JPEG") == "/manga/berserk/cover.jpeg"
        assert storage.save_cover("berserk", b"y", None) == "/manga/berserk/cover.jpg"

    def test_save_avatar(self, storage: MangaStorage):
        path = storage.save_avatar(b"face", "me.png")

        assert path.startswith("/manga/avatars/")
        assert path.endswith(".png")
        assert storage.local_path(path).read_bytes() == b"face"

    def test_ensure_manga_dir_reports_creation(self, storage: MangaStorage):
        assert storage.ensure_manga_dir("monster") is True
        assert storage.ensure_manga_dir("monster") is False

    def test_create_chapter_dir_is_exclusive(self, storage: MangaStorage):
        assert storage.create_chapter_dir("monster", "chapter-1") is True
        assert storage.create_chapter_dir("monster", "chapter-1") is False
        assert storage.chapter_dir("monster", "chapter-1").is_dir()

    def test_staged_cover_leaves_current_cover_until_promoted(self, storage: MangaStorage):
        storage.save_cover("pluto", b"old", "c.jpg")
        current = storage.manga_dir("pluto") / "cover.jpg"

        staged, public = storage.stage_cover("pluto", b"new", "c.jpg")

        assert public == "/manga/pluto/cover.jpg"
        assert staged.name.startswith(".cover-")
        assert current.read_bytes() == b"old"

        storage.promote_cover(staged)

        assert current.read_bytes() == b"new"
        assert not staged.exists()

    def test_discard_staged_cover(self, storage: MangaStorage):
        staged, _ = storage.stage_cover("pluto", b"new", "c.png")

        storage.discard(staged)
        storage.discard(staged)

        assert not staged.exists()

    def test_delete_public_file(self, storage: MangaStorage):
        cover = storage.save_cover("pluto", b"x", "c.jpg")

        assert storage.delete_public_file(cover) is True
        assert not storage.local_path(cover).exists()
        assert storage.delete_public_file(cover) is True
        assert storage.delete_public_file("https://cdn.example.com/c.jpg") is False


class TestArchives:
    """Test zip reading."""

    def _zip(self, names) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zf:
            for name in names:
                zf.writestr(name, name)
        return buffer.getvalue()

    def test_natural_order_and_filtering(self, storage: MangaStorage):
        content = self._zip(
            [
                "ch/page10.PNG",
                "ch/page9.png",
                "ch/page1.png",
                "ch/.DS_Store",
                "__MACOSX/ch/._page1.png",
                "ch/info.txt",
            ]
        )

        entries = storage.read_archive(content)

        assert [name for name, _ in entries] == ["page1.png", "page9.png", "page10.PNG"]

    def test_no_images(self, storage: MangaStorage):
        with pytest.raises(ValueError):
            storage.read_archive(self._zip(["readme.md"]))

    def test_corrupt_archive(self, storage: MangaStorage):
        with pytest.raises(zipfile.BadZipFile):
            storage.read_archive(b"PK-not-really")

    def test_entry_over_size_limit(self, storage: MangaStorage):
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            zf.writestr("page1.jpg", b"\0" * 5000)
        content = buffer.getvalue()

        assert len(content) < 1000
        with pytest.raises(ValueError, match="too large"):
            storage.read_archive(content, max_entry_size=4096)

    def test_entry_size_defaults_to_upload_limit(self, storage: MangaStorage, monkeypatch):
        monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 4)

        with pytest.raises(ValueError):
            storage.read_archive(self._zip(["page1.jpg"]))


class TestRenamesAndRemoval:
    """Test folder renames and best-effort removal."""

    def test_rename_manga_dir(self, storage: MangaStorage):
        storage.save_cover("old", b"x", "c.jpg")

        storage.rename_manga_dir("old", "new")

        assert (storage.manga_dir("new") / "cover.jpg").exists()
        assert not storage.manga_dir("old").exists()

    def test_rename_onto_existing_folder(self, storage: MangaStorage):
        storage.ensure_manga_dir("first")
        storage.ensure_manga_dir("second")

        with pytest.raises(StorageUnavailable):
            storage.rename_manga_dir("first", "second")

    def test_rename_missing_folder_is_noop(self, storage: MangaStorage):
        storage.rename_chapter_dir("ghost", "a", "b")

        assert not storage.manga_dir("ghost").exists()

    def test_remove_dirs(self, storage: MangaStorage):
        storage.save_pages("m", "c", [("1.jpg", b"1")])

        assert storage.remove_chapter_dir("m", "c") is True
        assert storage.manga_dir("m").is_dir()
        assert storage.remove_manga_dir("m") is True
        assert storage.remove_manga_dir("m") is True
        assert not storage.manga_dir("m").exists()


class TestOptimization:
    """Test Pillow re-encoding."""

    def test_disabled_keeps_file(self, storage: MangaStorage):
        page = storage.save_pages("m", "c", [("1.png", png_bytes())])[0]

        assert page.endswith("001-1.png")

    def test_converts_and_downscales(self, storage: MangaStorage, monkeypatch):
        monkeypatch.setattr(settings, "IMAGE_OPTIMIZE", True)
        monkeypatch.setattr(settings, "IMAGE_MAX_WIDTH", 20)

        page = storage.save_pages("m", "c", [("1.png", png_bytes(40, 20))])[0]

        assert page == "/manga/m/c/001-1.webp"
        path = storage.local_path(page)
        assert not path.with_suffix(".png").exists()
        with Image.open(path) as img:
            assert img.format == "WEBP"
            assert img.size == (20, 10)

    def test_undecodable_image_kept(self, storage: MangaStorage, monkeypatch):
        monkeypatch.setattr(settings, "IMAGE_OPTIMIZE", True)

        page = storage.save_pages("m", "c", [("1.jpg", b"not an image")])[0]

        assert page == "/manga/m/c/001-1.jpg"
        assert storage.local_path(page).read_bytes() == b"not an image"
        assert not storage.local_path("/manga/m/c/001-1.webp").exists()

    def test_gif_is_left_alone(self, storage: MangaStorage, monkeypatch):
        monkeypatch.setattr(settings, "IMAGE_OPTIMIZE", True)

        page = storage.save_pages("m", "c", [("anim.gif", b"GIF89a")])[0]

        assert page.endswith(".gif")
