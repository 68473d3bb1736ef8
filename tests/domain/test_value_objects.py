"""Tests for media proxy value objects."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from domain.exceptions import InvalidPathError
from domain.value_objects.byte_range import ByteRange
from domain.value_objects.mime_type import MimeType
from domain.value_objects.object_reference import ObjectReference
from domain.value_objects.retry_policy import NO_RETRY, RetryPolicy


class TestObjectReference:
    """Test ObjectReference.parse and its derived properties."""

    def test_parse_strips_single_leading_separator(self) -> None:
        """Test one leading separator is removed."""
        reference = ObjectReference.parse("/owner-1/1714060800000.mp4")

        assert reference.path == "owner-1/1714060800000.mp4"
        assert str(reference) == "owner-1/1714060800000.mp4"

    def test_parse_accepts_path_without_separator(self) -> None:
        """Test a relative path is accepted unchanged."""
        reference = ObjectReference.parse("owner-1/clip.webm")

        assert reference.path == "owner-1/clip.webm"

    @pytest.mark.parametrize("raw_path", ["", None, "/"])
    def test_parse_rejects_empty(self, raw_path: str | None) -> None:
        """Test empty paths are rejected."""
        with pytest.raises(InvalidPathError):
            ObjectReference.parse(raw_path)

    def test_missing_path_message(self) -> None:
        """Test the message for a missing path."""
        with pytest.raises(InvalidPathError, match="File path is required."):
            ObjectReference.parse("")

    @pytest.mark.parametrize(
        "raw_path",
        [
            "//etc/passwd",
            "/owner/../other/clip.mp4",
            "../secret.mp4",
            "/owner/..",
            "..",
        ],
    )
    def test_parse_rejects_traversal_and_absolute(self, raw_path: str) -> None:
        """Test parent segments and absolute paths are rejected."""
        with pytest.raises(InvalidPathError, match="Invalid file path."):
            ObjectReference.parse(raw_path)

    def test_dots_inside_a_name_are_allowed(self) -> None:
        """Test '..' only counts as a whole segment."""
        reference = ObjectReference.parse("/owner/my..clip.mp4")

        assert reference.filename == "my..clip.mp4"

    def test_derived_properties(self) -> None:
        """Test owner, filename, extension and content type."""
        reference = ObjectReference.parse("/owner-1/1714060800000.MOV")

        assert reference.owner_id == "owner-1"
        assert reference.filename == "1714060800000.MOV"
        assert reference.extension == "MOV"
        assert reference.content_type is MimeType.MOV

    def test_no_extension_defaults_to_octet_stream(self) -> None:
        """Test an extensionless name gets the fallback type."""
        reference = ObjectReference.parse("/owner-1/blob")

        assert reference.extension is None
        assert reference.content_type is MimeType.OCTET_STREAM


class TestMimeType:
    """Test MimeType.from_extension."""

    @pytest.mark.parametrize(
        ("extension", "expected"),
        [
            ("mp4", "video/mp4"),
            (".webm", "video/webm"),
            ("JPG", "image/jpeg"),
            ("jpeg", "image/jpeg"),
            ("svg", "image/svg+xml"),
            ("exe", "application/octet-stream"),
            (None, "application/octet-stream"),
        ],
    )
    def test_lookup(self, extension: str | None, expected: str) -> None:
        assert MimeType.from_extension(extension).value == expected


class TestByteRange:
    """Test ByteRange."""

    def test_length_is_inclusive(self) -> None:
        assert ByteRange(start=90, end=99).length == 10

    def test_end_before_start_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            ByteRange(start=10, end=9)

    def test_negative_start_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            ByteRange(start=-1, end=9)

    def test_capped(self) -> None:
        byte_range = ByteRange(start=100, end=10_000)

        assert byte_range.capped(50) == ByteRange(start=100, end=149)
        assert byte_range.capped(1_000_000) is byte_range

    def test_headers(self) -> None:
        byte_range = ByteRange(start=150, end=200)

        assert byte_range.content_range(1000) == "bytes 150-200/1000"
        assert byte_range.range_header() == "bytes=150-200"

    def test_covers(self) -> None:
        assert ByteRange(start=0, end=99).covers(100)
        assert not ByteRange(start=0, end=98).covers(100)
        assert not ByteRange(start=1, end=99).covers(100)

    def test_immutable(self) -> None:
        byte_range = ByteRange(start=0, end=1)

        with pytest.raises(PydanticValidationError):
            byte_range.start = 5  # type: ignore[misc]


class TestRetryPolicy:
    """Test RetryPolicy delay computation."""

    def test_no_retry_has_no_delays(self) -> None:
        assert NO_RETRY.maximum_attempts == 1
        assert NO_RETRY.delays() == []

    def test_exponential_delays_capped(self) -> None:
        policy = RetryPolicy(
            maximum_attempts=4,
            initial_interval=2.0,
            backoff_coefficient=2.5,
            maximum_interval=10.0,
        )

        assert policy.delays() == [2.0, 5.0, 10.0]

    def test_uncapped_delays(self) -> None:
        policy = RetryPolicy(maximum_attempts=3, initial_interval=1.0, backoff_coefficient=3.0)

        assert policy.delay_for(1) == 1.0
        assert policy.delay_for(2) == 3.0
        assert policy.delays() == [1.0, 3.0]

    def test_zero_attempts_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            RetryPolicy(maximum_attempts=0)
