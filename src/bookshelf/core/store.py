"""JSON-file persistence for the book collection."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

import structlog

from .errors import StorageError
from .models import Book

log = structlog.get_logger()


class RecordStore:
    """Load and save the whole collection as one JSON array.

    Every save rewrites the file completely. The new content is written to a
    temporary file next to the target and renamed over it, so a failed save
    leaves the previous collection in place.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        if not self.path.exists():
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text("[]\n", encoding="utf-8")
            except OSError as e:
                raise StorageError(f"cannot create {self.path}: {e}") from e
            log.info("books_file_created", path=str(self.path))

    def load(self) -> list[Book]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            log.error("storage_read_failed", path=str(self.path), error=str(e))
            raise StorageError(f"cannot read {self.path}: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            log.error("storage_decode_failed", path=str(self.path), error=str(e))
            raise StorageError(f"{self.path} is not valid JSON: {e}") from e

        if not isinstance(data, list) or not all(isinstance(d, dict) for d in data):
            log.error("storage_bad_shape", path=str(self.path))
            raise StorageError(f"{self.path} does not hold a JSON array of objects")

        return [Book.from_dict(d) for d in data]

    def save(self, books: list[Book]) -> None:
        payload = json.dumps([b.to_dict() for b in books], indent=2, ensure_ascii=False)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.write("\n")
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name:
                Path(tmp_name).unlink(missing_ok=True)
            log.error("storage_write_failed", path=str(self.path), error=str(e))
            raise StorageError(f"cannot write {self.path}: {e}") from e
        log.debug("books_saved", path=str(self.path), count=len(books))
