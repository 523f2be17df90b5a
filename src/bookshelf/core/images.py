"""Store uploaded book images on disk."""

from __future__ import annotations

import errno
import mimetypes
import re
import uuid
from pathlib import Path

import structlog

from .errors import NotFoundError, StorageError

log = structlog.get_logger()

_SUFFIX_RE = re.compile(r"^\.[A-Za-z0-9]{1,10}$")
_MAX_NAME_BYTES = 255


class ImageStore:
    """Keeps uploaded images as flat files inside one directory.

    Stored names are ``<uuid4 hex><ext>``; only the extension of the client's
    filename survives, so names are always safe to use as a path component.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def ensure_directory(self) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"cannot create {self.directory}: {e}") from e

    def _generate_name(self, original_name: str) -> str:
        suffix = Path(original_name or "").suffix
        if not _SUFFIX_RE.match(suffix):
            suffix = ""
        return f"{uuid.uuid4().hex}{suffix.lower()}"

    def path_for(self, name: str) -> Path:
        """Resolve a stored name to its path, rejecting anything that is not
        a plain filename inside the image directory."""
        if (
            not name
            or name.startswith(".")
            or Path(name).name != name
            or "\\" in name
            or len(name.encode("utf-8", "surrogateescape")) > _MAX_NAME_BYTES
        ):
            raise NotFoundError("Image not found")
        return self.directory / name

    def save(self, content: bytes, original_name: str) -> str:
        """Write ``content`` under a freshly generated name and return it."""
        name = self._generate_name(original_name)
        dest = self.directory / name
        try:
            # "xb" refuses to clobber an existing file.
            with dest.open("xb") as f:
                f.write(content)
        except OSError as e:
            log.error("image_write_failed", name=name, error=str(e))
            raise StorageError(f"cannot write image {dest}: {e}") from e
        log.info("image_saved", name=name, original=original_name, size=len(content))
        return name

    def delete(self, name: str | None) -> bool:
        """Remove a stored image. Returns whether a file was actually removed."""
        if not name:
            return False
        try:
            path = self.path_for(name)
        except NotFoundError:
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            log.error("image_delete_failed", name=name, error=str(e))
            raise StorageError(f"cannot delete image {path}: {e}") from e
        log.info("image_deleted", name=name)
        return True

    def exists(self, name: str | None) -> bool:
        if not name:
            return False
        try:
            return self.path_for(name).is_file()
        except (NotFoundError, OSError):
            return False

    def read(self, name: str) -> bytes:
        path = self.path_for(name)
        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError):
            raise NotFoundError("Image not found") from None
        except OSError as e:
            if e.errno == errno.ENAMETOOLONG:
                raise NotFoundError("Image not found") from None
            log.error("image_read_failed", name=name, error=str(e))
            raise StorageError(f"cannot read image {path}: {e}") from e

    @staticmethod
    def media_type(name: str) -> str:
        guessed, _ = mimetypes.guess_type(name)
        return guessed or "application/octet-stream"
