"""Unit tests for shared helpers."""

import pytest

from app.shared.data_uri import encode_data_uri
from app.shared.text import format_file_size, truncate_title
from tests.factories import decode_data_uri


class TestDataURI:
    """Test cases for data URI encoding."""

    def test_encode(self):
        assert encode_data_uri(b"hello", "text/plain") == "data:text/plain;base64,aGVsbG8="

    def test_encode_without_mime_type(self):
        assert encode_data_uri(b"", None) == "data:application/octet-stream;base64,"

    def test_encoded_payload_round_trips(self, png_bytes):
        assert decode_data_uri(encode_data_uri(png_bytes, "image/png")) == ("image/png", png_bytes)


class TestText:
    """Test cases for text helpers."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Hello", "Hello"),
            ("a" * 50, "a" * 50),
            ("a" * 51, "a" * 50 + "..."),
            ("", ""),
        ],
    )
    def test_truncate_title(self, text, expected):
        assert truncate_title(text) == expected

    def test_truncate_title_custom_length(self):
        assert truncate_title("abcdef", 3) == "abc..."

    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            (0, "0 Bytes"),
            (512, "512 Bytes"),
            (1024, "1 KB"),
            (1536, "1.5 KB"),
            (1024 * 1024, "1 MB"),
            (12 * 1024 * 1024, "12 MB"),
            (3 * 1024**3, "3 GB"),
        ],
    )
    def test_format_file_size(self, size, expected):
        assert format_file_size(size) == expected
