import io
import logging
import os
import shutil
import uuid
import zipfile
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image, ImageOps

from mangashelf.core.config import settings
from mangashelf.core.exceptions import StorageUnavailable
from mangashelf.utils.text import natural_key

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".gif")
AVATAR_FOLDER = "avatars"


def _safe_name(filename: Optional[str], default: str = "file") -> str:
    name = os.path.basename((filename or "").replace("\\", "/")).strip()
    if not name or name in (".", ".."):
        return default
    return name


def _extension(filename: Optional[str], default: str = "jpg") -> str:
    name = _safe_name(filename)
    if "." in name:
        ext = name.rsplit(".", 1)[-1].lower()
        if ext:
            return ext
    return default


class MangaStorage:
    """
    Media folder for covers, chapter pages and avatars.

    Layout under the root::

        <manga-slug>/cover.<ext>
        <manga-slug>/<chapter-slug>/<page files>
        avatars/<file>

    Public paths are the relative path joined onto the media URL prefix.
    """

    def __init__(self, root: Optional[str] = None, url_prefix: Optional[str] = None):
        self.root = Path(root or settings.MANGA_DIR)
        self.url_prefix = (url_prefix or settings.MEDIA_URL_PREFIX).rstrip("/")

    # ===============================
    # PATH HELPERS
    # ===============================
    def _path(self, *parts: str) -> Path:
        root = self.root.resolve()
        path = root.joinpath(*parts).resolve()
        if path != root and root not in path.parents:
            raise ValueError(f"Path escapes the media root: {'/'.join(parts)}")
        return path

    def manga_dir(self, manga_slug: str) -> Path:
        return self._path(manga_slug)

    def chapter_dir(self, manga_slug: str, chapter_slug: str) -> Path:
        return self._path(manga_slug, chapter_slug)

    def public_path(self, *parts: str) -> str:
        return "/".join([self.url_prefix, *parts])

    def manga_prefix(self, manga_slug: str) -> str:
        return self.public_path(manga_slug) + "/"

    def chapter_prefix(self, manga_slug: str, chapter_slug: str) -> str:
        return self.public_path(manga_slug, chapter_slug) + "/"

    def local_path(self, public_path: str) -> Optional[Path]:
        """Map a stored public path back onto the file system."""
        prefix = self.url_prefix + "/"
        if not public_path or not public_path.startswith(prefix):
            return None
        try:
            return self._path(*public_path[len(prefix):].split("/"))
        except ValueError:
            return None

    def _relative_public_path(self, path: Path) -> str:
        relative = path.relative_to(self.root.resolve())
        return self.public_path(*relative.parts)

    # ===============================
    # WRITES
    # ===============================
    def _write(self, path: Path, content: bytes) -> Path:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as e:
            logger.error(f"Error writing {path}: {e}")
            raise StorageUnavailable(f"Could not write {path.name}") from e
        return path

    def ensure_manga_dir(self, manga_slug: str) -> bool:
        """Create the manga folder. Returns True when it did not exist before."""
        path = self.manga_dir(manga_slug)
        existed = path.is_dir()
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Error creating folder {path}: {e}")
            raise StorageUnavailable(f"Could not create folder for '{manga_slug}'") from e
        return not existed

    def create_chapter_dir(self, manga_slug: str, chapter_slug: str) -> bool:
        """
        Create an empty chapter folder. Returns False when the folder already
        exists, in which case nothing is written to it.
        """
        path = self.chapter_dir(manga_slug, chapter_slug)
        try:
            path.mkdir(parents=True)
        except FileExistsError:
            return False
        except OSError as e:
            logger.error(f"Error creating folder {path}: {e}")
            raise StorageUnavailable(
                f"Could not create folder for '{manga_slug}/{chapter_slug}'"
            ) from e
        return True

    def save_cover(self, manga_slug: str, content: bytes, filename: Optional[str]) -> str:
        path = self._write(
            self.manga_dir(manga_slug) / f"cover.{_extension(filename)}", content
        )
        path = self.optimize_image(path)
        logger.info(f"Saved cover for {manga_slug}: {path.name}")
        return self._relative_public_path(path)

    def stage_cover(
        self, manga_slug: str, content: bytes, filename: Optional[str]
    ) -> Tuple[Path, str]:
        """
        Write a replacement cover under a temporary name next to the current
        one. Returns the staged file and the public path it will have once
        ``promote_cover`` moves it into place.
        """
        path = self._write(
            self.manga_dir(manga_slug)
            / f".cover-{uuid.uuid4().hex}.{_extension(filename)}",
            content,
        )
        path = self.optimize_image(path)
        return path, self._relative_public_path(path.with_name(f"cover{path.suffix}"))

    def promote_cover(self, staged: Path) -> None:
        target = staged.with_name(f"cover{staged.suffix}")
        try:
            staged.replace(target)
        except OSError as e:
            logger.error(f"Error moving {staged} to {target}: {e}")
            raise StorageUnavailable(f"Could not replace {target.name}") from e
        logger.info(f"Replaced cover {target}")

    def discard(self, path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Error deleting {path}: {e}")

    def save_pages(
        self, manga_slug: str, chapter_slug: str, files: List[Tuple[str, bytes]]
    ) -> List[str]:
        """
        Write page images in the given order. File names carry an index
        prefix so the folder listing matches the reading order.
        """
        folder = self.chapter_dir(manga_slug, chapter_slug)
        pages = []
        for index, (filename, content) in enumerate(files, start=1):
            path = self._write(folder / f"{index:03d}-{_safe_name(filename, 'page')}", content)
            path = self.optimize_image(path)
            pages.append(self._relative_public_path(path))
        logger.info(f"Saved {len(pages)} pages to {manga_slug}/{chapter_slug}")
        return pages

    def read_archive(
        self, content: bytes, max_entry_size: Optional[int] = None
    ) -> List[Tuple[str, bytes]]:
        """
        Read the page images out of a zip archive in natural filename order.

        Folders, hidden files, macOS metadata and non-image entries are
        skipped. Raises ``zipfile.BadZipFile`` for corrupt data and
        ``ValueError`` when no images remain or an image unpacks larger
        than ``max_entry_size`` (MAX_UPLOAD_SIZE by default).
        """
        if max_entry_size is None:
            max_entry_size = settings.MAX_UPLOAD_SIZE
        entries = []
        with zipfile.ZipFile(io.BytesIO(content)) as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue
                parts = info.filename.replace("\\", "/").split("/")
                name = parts[-1]
                if "__MACOSX" in parts or name.startswith("."):
                    continue
                if not name.lower().endswith(IMAGE_EXTENSIONS):
                    continue
                if info.file_size > max_entry_size:
                    raise ValueError(
                        f"Archive entry '{name}' is too large. "
                        f"Maximum allowed: {max_entry_size} bytes"
                    )
                entries.append((name, zf.read(info)))
        if not entries:
            raise ValueError("Archive contains no images")
        entries.sort(key=lambda entry: natural_key(entry[0]))
        return entries

    def save_avatar(self, content: bytes, filename: Optional[str]) -> str:
        path = self._write(
            self._path(AVATAR_FOLDER, f"{uuid.uuid4()}.{_extension(filename)}"), content
        )
        path = self.optimize_image(path)
        return self._relative_public_path(path)

    def optimize_image(self, path: Path) -> Path:
        """
        Downscale to IMAGE_MAX_WIDTH and re-encode as WebP.

        Best-effort: any failure keeps the original file untouched.
        """
        if not settings.IMAGE_OPTIMIZE or path.suffix.lower() == ".gif":
            return path

        target = path.with_suffix(".webp")
        try:
            with Image.open(path) as img:
                img = ImageOps.exif_transpose(img)
                if img.width > settings.IMAGE_MAX_WIDTH:
                    height = round(img.height * settings.IMAGE_MAX_WIDTH / img.width)
                    img = img.resize((settings.IMAGE_MAX_WIDTH, height), Image.LANCZOS)
                if img.mode not in ("RGB", "RGBA"):
                    img = img.convert("RGBA" if "transparency" in img.info else "RGB")
                img.save(target, "WEBP", quality=settings.IMAGE_QUALITY)
        except Exception as e:
            logger.warning(f"Image optimization failed for {path.name}, keeping original: {e}")
            if target != path and target.exists():
                target.unlink()
            return path

        if target != path:
            path.unlink()
        return target

    # ===============================
    # DELETES AND RENAMES
    # ===============================
    def delete_public_file(self, public_path: Optional[str]) -> bool:
        path = self.local_path(public_path) if public_path else None
        if path is None:
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            logger.info(f"File already gone: {public_path}")
            return True
        except OSError as e:
            logger.error(f"Error deleting file {public_path}: {e}")
            return False
        return True

    def _remove_tree(self, path: Path) -> bool:
        if not path.exists():
            return True
        try:
            shutil.rmtree(path)
        except OSError as e:
            logger.error(f"Error removing folder {path}: {e}")
            return False
        logger.info(f"Removed folder {path}")
        return True

    def remove_manga_dir(self, manga_slug: str) -> bool:
        return self._remove_tree(self.manga_dir(manga_slug))

    def remove_chapter_dir(self, manga_slug: str, chapter_slug: str) -> bool:
        return self._remove_tree(self.chapter_dir(manga_slug, chapter_slug))

    def _rename(self, source: Path, target: Path) -> None:
        if not source.exists():
            return
        if target.exists():
            raise StorageUnavailable(f"Folder '{target.name}' already exists")
        try:
            source.rename(target)
        except OSError as e:
            logger.error(f"Error renaming {source} to {target}: {e}")
            raise StorageUnavailable(f"Could not rename folder '{source.name}'") from e
        logger.info(f"Renamed folder {source.name} -> {target.name}")

    def rename_manga_dir(self, old_slug: str, new_slug: str) -> None:
        self._rename(self.manga_dir(old_slug), self.manga_dir(new_slug))

    def rename_chapter_dir(self, manga_slug: str, old_slug: str, new_slug: str) -> None:
        self._rename(
            self.chapter_dir(manga_slug, old_slug), self.chapter_dir(manga_slug, new_slug)
        )


# Singleton instance
manga_storage = MangaStorage()
