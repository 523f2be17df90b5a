"""Create/read/update/delete operations over the book collection."""

from __future__ import annotations

import threading
import uuid

import structlog

from .errors import DuplicateKeyError, NotFoundError, StorageError, ValidationError
from .images import ImageStore
from .models import Book, BookFields, Upload
from .store import RecordStore

log = structlog.get_logger()

DELETED_MESSAGE = "Book deleted successfully"
DELETED_WITH_IMAGE_MESSAGE = "Book and associated image deleted successfully"


def _find(books: list[Book], isbn: str) -> int:
    for i, book in enumerate(books):
        if book.isbn == isbn:
            return i
    return -1


class BookService:
    """Book operations on top of a RecordStore and an optional ImageStore.

    Without an image store the service behaves as the plain catalog: uploads
    are ignored and records get no ``id``/``image``.

    Every operation loads the collection fresh and holds ``_lock`` for the
    whole load-modify-save, so two writers in this process cannot lose each
    other's changes.
    """

    def __init__(self, records: RecordStore, images: ImageStore | None = None) -> None:
        self.records = records
        self.images = images
        self._lock = threading.Lock()

    @property
    def uploads_enabled(self) -> bool:
        return self.images is not None

    def _usable(self, upload: Upload | None) -> Upload | None:
        if self.images is None or upload is None or upload.is_empty:
            return None
        return upload

    def _save_with_new_image(self, books: list[Book], new_image: str | None) -> None:
        try:
            self.records.save(books)
        except StorageError:
            if new_image:
                # Every stored image belongs to a saved record.
                self.images.delete(new_image)
            raise

    def list_books(self) -> list[Book]:
        with self._lock:
            return self.records.load()

    def get_book(self, isbn: str) -> Book:
        with self._lock:
            books = self.records.load()
        i = _find(books, isbn)
        if i == -1:
            raise NotFoundError("Book not found")
        return books[i]

    def create_book(self, fields: BookFields, upload: Upload | None = None) -> Book:
        missing = fields.missing()
        if missing:
            log.info("book_create_rejected", missing=missing)
            raise ValidationError("All fields are required")

        upload = self._usable(upload)
        with self._lock:
            books = self.records.load()
            if _find(books, fields.isbn) != -1:
                log.info("book_create_duplicate", isbn=fields.isbn)
                raise DuplicateKeyError("Book with this ISBN already exists")

            book = Book(
                isbn=fields.isbn,
                title=fields.title,
                author=fields.author,
                publisher=fields.publisher,
                published_date=fields.published_date,
            )
            if self.uploads_enabled:
                book.id = uuid.uuid4().hex
                if upload:
                    book.image = self.images.save(upload.content, upload.filename)

            books.append(book)
            self._save_with_new_image(books, book.image)

        log.info("book_created", isbn=book.isbn, image=book.image)
        return book

    def update_book(self, isbn: str, fields: BookFields, upload: Upload | None = None) -> Book:
        upload = self._usable(upload)
        with self._lock:
            books = self.records.load()
            i = _find(books, isbn)
            if i == -1:
                raise NotFoundError("Book not found")
            book = books[i]

            if fields.title:
                book.title = fields.title
            if fields.author:
                book.author = fields.author
            if fields.publisher:
                book.publisher = fields.publisher
            if fields.published_date:
                book.published_date = fields.published_date

            new_image = None
            old_image = book.image
            if upload:
                new_image = self.images.save(upload.content, upload.filename)
                book.image = new_image

            self._save_with_new_image(books, new_image)
            # The old file goes only once the record points at the new one.
            if new_image and old_image:
                self.images.delete(old_image)

        log.info("book_updated", isbn=isbn, new_image=new_image)
        return book

    def delete_book(self, isbn: str) -> str:
        with self._lock:
            books = self.records.load()
            i = _find(books, isbn)
            if i == -1:
                raise NotFoundError("Book not found")

            book = books.pop(i)
            image_removed = False
            if self.images is not None and book.image:
                image_removed = self.images.delete(book.image)
            self.records.save(books)

        log.info("book_deleted", isbn=isbn, image_removed=image_removed)
        return DELETED_WITH_IMAGE_MESSAGE if image_removed else DELETED_MESSAGE

    def read_image(self, name: str) -> tuple[bytes, str]:
        if self.images is None or not self.images.exists(name):
            raise NotFoundError("Image not found")
        return self.images.read(name), self.images.media_type(name)
