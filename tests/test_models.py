"""Tests for Book serialization and request field decoding."""

from bookshelf.core.models import Book, BookFields, Upload


class TestBookSerialization:
    def test_plain_record_has_only_five_fields(self) -> None:
        book = Book(isbn="1", title="T", author="A", publisher="P", published_date="2001")

        assert book.to_dict() == {
            "title": "T",
            "author": "A",
            "publisher": "P",
            "publishedDate": "2001",
            "isbn": "1",
        }

    def test_record_with_id_always_carries_image_key(self) -> None:
        book = Book(isbn="1", title="T", id="abc")

        data = book.to_dict()

        assert data["id"] == "abc"
        assert "image" in data
        assert data["image"] is None

    def test_from_dict_maps_published_date(self) -> None:
        book = Book.from_dict({"isbn": "9", "publishedDate": "1999-01-01"})

        assert book.published_date == "1999-01-01"
        assert book.id is None
        assert book.image is None

    def test_unknown_keys_survive_round_trip(self) -> None:
        """Fields written by other tools must not be dropped on save."""
        stored = {
            "title": "T",
            "author": "A",
            "publisher": "P",
            "publishedDate": "2001",
            "isbn": "1",
            "shelf": "B3",
        }

        assert Book.from_dict(stored).to_dict() == stored

    def test_image_without_id_is_still_serialized(self) -> None:
        book = Book(isbn="1", image="abc.png")

        data = book.to_dict()

        assert data["image"] == "abc.png"
        assert data["id"] is None


class TestBookFields:
    def test_empty_strings_count_as_not_provided(self) -> None:
        fields = BookFields.from_mapping({"title": "", "author": "X", "publishedDate": None})

        assert fields.title is None
        assert fields.author == "X"
        assert fields.published_date is None

    def test_missing_lists_every_absent_field(self) -> None:
        fields = BookFields.from_mapping({"title": "T", "isbn": ""})

        assert fields.missing() == ["author", "publisher", "published_date", "isbn"]

    def test_complete_fields_have_nothing_missing(self) -> None:
        fields = BookFields.from_mapping(
            {"title": "T", "author": "A", "publisher": "P", "publishedDate": "2001", "isbn": "1"}
        )

        assert fields.missing() == []

    def test_non_string_values_are_stringified(self) -> None:
        fields = BookFields.from_mapping({"isbn": 9780000000001, "publishedDate": 2020})

        assert fields.isbn == "9780000000001"
        assert fields.published_date == "2020"

    def test_falsy_numbers_count_as_not_provided(self) -> None:
        fields = BookFields.from_mapping({"publishedDate": 0, "isbn": 0.0})

        assert fields.published_date is None
        assert fields.isbn is None

    def test_booleans_and_containers_count_as_not_provided(self) -> None:
        fields = BookFields.from_mapping({"title": True, "author": ["A"], "publisher": {"n": 1}})

        assert fields.title is None
        assert fields.author is None
        assert fields.publisher is None


class TestUpload:
    def test_upload_without_filename_is_empty(self) -> None:
        assert Upload(filename="", content=b"data").is_empty

    def test_upload_without_content_is_empty(self) -> None:
        assert Upload(filename="cover.png", content=b"").is_empty

    def test_upload_with_name_and_content_is_not_empty(self) -> None:
        assert not Upload(filename="cover.png", content=b"data").is_empty
