"""
Unit tests for Base64Image.

Tests cover:
- Construction from bytes, base64 text, files and PIL images
- Binary and wire-form round trips
- Strict base64 decoding
- Data URLs per format
"""

import pytest
from PIL import Image
from pydantic import ValidationError as PydanticValidationError

from pixellab.errors import DecodeError, PixelLabError
from pixellab.image import Base64Image


class TestConstruction:
    def test_from_bytes_defaults_to_png(self) -> None:
        image = Base64Image.from_bytes(b"\x89PNG")
        assert image.format == "png"
        assert image.type == "base64"
        assert image.base64 == "iVBORw=="

    def test_from_base64_is_not_validated(self) -> None:
        image = Base64Image.from_base64("not base64!!", format="gif")
        assert image.base64 == "not base64!!"
        assert image.format == "gif"

    def test_is_immutable(self, sample_image) -> None:
        with pytest.raises(PydanticValidationError):
            sample_image.format = "jpg"

    def test_from_file_uses_lowercase_suffix(self, tmp_path, png_bytes) -> None:
        path = tmp_path / "hero.PNG"
        path.write_bytes(png_bytes)
        image = Base64Image.from_file(path)
        assert image.format == "png"
        assert image.to_bytes() == png_bytes

    def test_from_file_without_suffix(self, tmp_path) -> None:
        path = tmp_path / "sprite"
        path.write_bytes(b"abc")
        assert Base64Image.from_file(path).format == "png"

    def test_from_pil(self) -> None:
        image = Base64Image.from_pil(Image.new("RGB", (8, 4)), format="jpg")
        assert image.format == "jpg"
        assert image.to_pil().size == (8, 4)


class TestRoundTrips:
    @pytest.mark.parametrize("data", [b"", b"\x00\xff", bytes(range(256))])
    def test_binary_round_trip(self, data) -> None:
        assert Base64Image.from_bytes(data).to_bytes() == data

    def test_wire_round_trip(self, sample_image) -> None:
        assert Base64Image.from_wire(sample_image.to_wire()) == sample_image

    def test_wire_form(self) -> None:
        image = Base64Image.from_base64("AAAA", format="jpeg")
        assert image.to_wire() == {"type": "base64", "base64": "AAAA", "format": "jpeg"}

    def test_from_wire_missing_format(self) -> None:
        assert Base64Image.from_wire({"base64": "AAAA"}).format == "png"

    def test_save(self, tmp_path, sample_image, png_bytes) -> None:
        path = sample_image.save(tmp_path / "nested" / "out.png")
        assert path.read_bytes() == png_bytes


class TestDecoding:
    def test_invalid_base64_raises_decode_error(self) -> None:
        image = Base64Image.from_base64("@@not-base64@@")
        with pytest.raises(DecodeError) as exc_info:
            image.to_bytes()
        assert isinstance(exc_info.value, PixelLabError)
        assert exc_info.value.status_code is None

    def test_to_pil(self, sample_image) -> None:
        assert sample_image.to_pil().size == (32, 32)


class TestDataUrl:
    @pytest.mark.parametrize(
        "format,mime",
        [
            ("png", "image/png"),
            ("jpg", "image/jpeg"),
            ("jpeg", "image/jpeg"),
            ("gif", "image/gif"),
            ("webp", "image/webp"),
        ],
    )
    def test_mime_type(self, format, mime) -> None:
        image = Base64Image.from_base64("AAAA", format=format)
        assert image.to_data_url() == f"data:{mime};base64,AAAA"
