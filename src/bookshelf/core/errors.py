"""Exception hierarchy for the catalog.

Each error carries the HTTP status and machine-readable code it maps to, so
the web layer can render any of them with a single handler.
"""

from __future__ import annotations


class BookshelfError(Exception):
    """Base class for all catalog errors."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str = "Internal server error") -> None:
        self.message = message
        super().__init__(message)

    @property
    def public_message(self) -> str:
        return self.message

    def to_response(self) -> dict[str, str]:
        return {"message": self.public_message, "code": self.code}


class ValidationError(BookshelfError):
    """A required field is missing or the request body is unusable."""

    status_code = 400
    code = "VALIDATION_ERROR"


class DuplicateKeyError(BookshelfError):
    """A book with the same ISBN already exists."""

    status_code = 400
    code = "DUPLICATE_ISBN"


class NotFoundError(BookshelfError):
    status_code = 404
    code = "NOT_FOUND"


class StorageError(BookshelfError):
    """Reading or writing the books file or the upload directory failed.

    The message holds internal detail (paths, OS errors) for the logs only;
    clients get a generic message.
    """

    status_code = 500
    code = "STORAGE_ERROR"

    @property
    def public_message(self) -> str:
        return "Internal server error"
