"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from bookshelf.core.config import Settings
from bookshelf.core.images import ImageStore
from bookshelf.core.models import BookFields
from bookshelf.core.service import BookService
from bookshelf.core.store import RecordStore
from bookshelf.web.app import create_app

# PNG signature plus a few bytes; enough to stand in for an upload.
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def books_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "books.json"


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def record_store(books_file: Path) -> RecordStore:
    return RecordStore(books_file)


@pytest.fixture
def image_store(upload_dir: Path) -> ImageStore:
    store = ImageStore(upload_dir)
    store.ensure_directory()
    return store


@pytest.fixture
def service(record_store: RecordStore, image_store: ImageStore) -> BookService:
    """Service with uploads enabled."""
    return BookService(record_store, image_store)


@pytest.fixture
def plain_service(record_store: RecordStore) -> BookService:
    """Service without an image store (no ids, no images)."""
    return BookService(record_store)


@pytest.fixture
def sample_fields() -> BookFields:
    return BookFields(
        title="A", author="B", publisher="C", published_date="2020", isbn="111"
    )


@pytest.fixture
def sample_payload() -> dict[str, str]:
    return {
        "title": "A",
        "author": "B",
        "publisher": "C",
        "publishedDate": "2020",
        "isbn": "111",
    }


@pytest.fixture
def settings(books_file: Path, upload_dir: Path) -> Settings:
    return Settings(books_file=books_file, upload_dir=upload_dir, env="test")


@pytest.fixture
def client(settings: Settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def plain_client(books_file: Path, upload_dir: Path):
    settings = Settings(
        books_file=books_file, upload_dir=upload_dir, uploads_enabled=False, env="test"
    )
    with TestClient(create_app(settings)) as c:
        yield c
