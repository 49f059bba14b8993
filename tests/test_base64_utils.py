"""Тесты разбора и декодирования base64."""

import base64

import pytest

from tesseract_api.errors import InvalidBase64Error
from tesseract_api.services.base64_utils import (
    decode_base64,
    estimate_decoded_size,
    extension_from_mime,
    parse_base64,
)


class TestParseBase64:
    def test_bare_payload(self):
        payload = parse_base64("aGVsbG8=")
        assert payload.content == "aGVsbG8="
        assert payload.extension is None
        assert payload.mime_type is None

    def test_data_uri(self):
        payload = parse_base64("data:image/png;base64,aGVsbG8=")
        assert payload.content == "aGVsbG8="
        assert payload.extension == "png"
        assert payload.mime_type == "image/png"

    def test_data_uri_with_params(self):
        payload = parse_base64("data:image/jpeg;name=scan.jpg;base64,aGVsbG8=")
        assert payload.content == "aGVsbG8="
        assert payload.extension == "jpg"

    def test_data_uri_without_mime(self):
        payload = parse_base64("data:;base64,aGVsbG8=")
        assert payload.content == "aGVsbG8="
        assert payload.extension is None

    def test_strips_whitespace_and_quotes(self):
        payload = parse_base64('  "data:image/PNG;base64,aGVsbG8="\n')
        assert payload.content == "aGVsbG8="
        assert payload.extension == "png"


class TestExtensionFromMime:
    @pytest.mark.parametrize(
        "mime, extension",
        [
            ("image/png", "png"),
            ("image/jpeg", "jpg"),
            ("image/tiff", "tiff"),
            ("image/svg+xml", "svg"),
            ("image/x-ms-bmp", "bmp"),
            ("", None),
            (None, None),
            ("png", None),
        ],
    )
    def test_mapping(self, mime, extension):
        assert extension_from_mime(mime) == extension


class TestEstimateDecodedSize:
    @pytest.mark.parametrize("size", [0, 1, 2, 3, 4, 5, 100, 1001])
    def test_matches_real_size(self, size):
        encoded = base64.b64encode(b"x" * size).decode("ascii")
        assert estimate_decoded_size(encoded) == size

    @pytest.mark.parametrize("line_end", ["\n", "\r\n"])
    def test_ignores_line_breaks(self, line_end):
        encoded = base64.encodebytes(b"x" * 1000).decode("ascii").replace("\n", line_end)
        assert estimate_decoded_size(encoded) == 1000

    def test_whitespace_only(self):
        assert estimate_decoded_size(" \r\n ") == 0

    def test_unpadded(self):
        encoded = base64.b64encode(b"hello").decode("ascii").rstrip("=")
        assert estimate_decoded_size(encoded) == 5


class TestDecodeBase64:
    @pytest.mark.parametrize("data", [b"\x89PNG\r\n\x1a\n", b"a", b"ab", bytes(range(256))])
    def test_round_trip(self, data):
        encoded = base64.b64encode(data).decode("ascii")
        assert base64.b64encode(decode_base64(encoded)).decode("ascii") == encoded

    def test_missing_padding(self):
        assert decode_base64("aGVsbG8") == b"hello"

    def test_line_wrapped(self):
        encoded = base64.encodebytes(b"x" * 200).decode("ascii")
        assert "\n" in encoded
        assert decode_base64(encoded) == b"x" * 200

    def test_url_safe_alphabet(self):
        data = b"\xfb\xff\xfe"
        assert decode_base64(base64.urlsafe_b64encode(data).decode("ascii")) == data

    @pytest.mark.parametrize("value", ["not base64!", "a", "aGVsbG8=aGVs", "%%%%"])
    def test_invalid(self, value):
        with pytest.raises(InvalidBase64Error):
            decode_base64(value)
