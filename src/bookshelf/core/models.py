"""Data models for book records."""

from __future__ import annotations

from dataclasses import dataclass, field, fields

# Serialized key order for the required text fields.
REQUIRED_FIELDS = ("title", "author", "publisher", "publishedDate", "isbn")

_KNOWN_KEYS = set(REQUIRED_FIELDS) | {"id", "image"}


@dataclass
class Book:
    isbn: str
    title: str = ""
    author: str = ""
    publisher: str = ""
    published_date: str = ""
    id: str | None = None
    image: str | None = None
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> Book:
        """Build a Book from its stored JSON object.

        Keys this model does not know about are kept in ``extra`` so a
        load/save round trip does not drop them.
        """
        return cls(
            isbn=data.get("isbn", ""),
            title=data.get("title", ""),
            author=data.get("author", ""),
            publisher=data.get("publisher", ""),
            published_date=data.get("publishedDate", ""),
            id=data.get("id"),
            image=data.get("image"),
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    def to_dict(self) -> dict:
        """Serialize to the stored/wire JSON shape.

        Records from the upload-enabled catalog carry both ``id`` and
        ``image`` (either possibly null).
        """
        data = {
            "title": self.title,
            "author": self.author,
            "publisher": self.publisher,
            "publishedDate": self.published_date,
            "isbn": self.isbn,
        }
        if self.id is not None or self.image is not None:
            data["id"] = self.id
            data["image"] = self.image
        data.update(self.extra)
        return data


@dataclass
class BookFields:
    """Text fields decoded from a create/update request.

    ``None`` means "not provided". ``from_mapping`` treats every falsy value
    (``""``, ``0``, ``null``, ``false``) as not provided, so such a value can
    never clear a field. Numbers are kept in their string form; any other
    non-string value (booleans, lists, objects) counts as not provided.
    """

    title: str | None = None
    author: str | None = None
    publisher: str | None = None
    published_date: str | None = None
    isbn: str | None = None

    @classmethod
    def from_mapping(cls, data) -> BookFields:
        def provided(key: str) -> str | None:
            value = data.get(key)
            if not value or isinstance(value, bool):
                return None
            if isinstance(value, str):
                return value
            if isinstance(value, (int, float)):
                return str(value)
            return None

        return cls(
            title=provided("title"),
            author=provided("author"),
            publisher=provided("publisher"),
            published_date=provided("publishedDate"),
            isbn=provided("isbn"),
        )

    def missing(self) -> list[str]:
        """Names of required fields that were not provided."""
        return [f.name for f in fields(self) if getattr(self, f.name) is None]


@dataclass
class Upload:
    """An uploaded file as received from a multipart request."""

    filename: str
    content: bytes
    content_type: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.filename or not self.content
