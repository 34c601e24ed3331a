"""Image helpers: upload validation and base64 JPEG payloads for vision models."""

from __future__ import annotations

import base64
import io
import logging
from typing import Tuple

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


class ImagePreparationError(ValueError):
    """Raised when an uploaded file cannot be decoded as an image."""


def verify_image(path: str) -> Tuple[str, Tuple[int, int]]:
    """Return (format, size) for a decodable image, raising ImagePreparationError otherwise."""

    try:
        with Image.open(path) as image:
            image_format = image.format or "UNKNOWN"
            size = image.size
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise ImagePreparationError(f"Unreadable image {path}: {exc}") from exc
    return image_format, size


def encode_image_base64(path: str, max_dimension: int = 1600, jpeg_quality: int = 85) -> str:
    """Downscale an image to fit *max_dimension* and return it as base64 JPEG."""

    try:
        with Image.open(path) as image:
            original_size = image.size
            # Animated formats send their first frame only.
            image.seek(0)
            converted = image.convert("RGB")
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise ImagePreparationError(f"Unreadable image {path}: {exc}") from exc

    buffer = io.BytesIO()
    try:
        converted.thumbnail((max_dimension, max_dimension), Image.LANCZOS)
        converted.save(buffer, format="JPEG", quality=jpeg_quality, optimize=True)
        final_size = converted.size
        jpeg_bytes = buffer.getvalue()
    finally:
        converted.close()
        buffer.close()

    logger.info(
        "Prepared image %s: %sx%s -> %sx%s JPEG (%0.2f MB)",
        path,
        original_size[0],
        original_size[1],
        final_size[0],
        final_size[1],
        len(jpeg_bytes) / 1_000_000,
    )
    return base64.b64encode(jpeg_bytes).decode("ascii")
