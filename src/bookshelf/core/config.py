"""Runtime settings read from the environment (and a .env file if present)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    books_file: Path = Path("books.json")
    upload_dir: Path = Path("uploads")
    uploads_enabled: bool = True
    max_upload_bytes: int = 5_000_000  # ~5 MB max request body
    host: str = "0.0.0.0"
    port: int = 3000
    env: str = "dev"
    log_level: str = "info"

    @classmethod
    def from_env(cls) -> Settings:
        load_dotenv()
        return cls(
            books_file=Path(os.environ.get("BOOKS_FILE", "books.json")),
            upload_dir=Path(os.environ.get("UPLOAD_DIR", "uploads")),
            uploads_enabled=os.environ.get("UPLOADS_ENABLED", "true").strip().lower() not in _FALSY,
            max_upload_bytes=int(os.environ.get("MAX_UPLOAD_BYTES", "5000000")),
            host=os.environ.get("HOST", "0.0.0.0"),
            port=int(os.environ.get("PORT", "3000")),
            env=os.environ.get("ENV", "dev"),
            log_level=os.environ.get("LOG_LEVEL", "info"),
        )

    @property
    def is_dev(self) -> bool:
        return self.env == "dev"
