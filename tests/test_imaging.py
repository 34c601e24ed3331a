"""Tests for image validation and encoding."""

import base64
import io

import pytest
from PIL import Image

from drawing_chat.analysis.imaging import ImagePreparationError, encode_image_base64, verify_image


def test_verify_image_reports_format(drawing_png):
    image_format, size = verify_image(drawing_png)
    assert image_format == "PNG"
    assert size == (64, 48)


def test_verify_rejects_garbage(tmp_path):
    path = tmp_path / "fake.png"
    path.write_bytes(b"not an image at all")
    with pytest.raises(ImagePreparationError):
        verify_image(str(path))


def test_encode_downscales_to_jpeg(tmp_path):
    path = tmp_path / "large.png"
    Image.new("RGBA", (400, 200), color=(10, 20, 30, 255)).save(path, format="PNG")

    encoded = encode_image_base64(str(path), max_dimension=100)

    with Image.open(io.BytesIO(base64.b64decode(encoded))) as decoded:
        assert decoded.format == "JPEG"
        assert decoded.size == (100, 50)
