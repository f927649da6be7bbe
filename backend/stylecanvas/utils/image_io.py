"""Upload decoding and result encoding at the engine's I/O boundary.

decode_upload: validate type and size, decode with Pillow, apply the EXIF
orientation, downscale so no side exceeds ``max_dimension`` (aspect ratio
preserved), wrap as a uint8 PixelBuffer. The pixel count is checked from the
header before anything is decoded.
encode_png: PixelBuffer → PNG bytes.
"""

from __future__ import annotations

import io
import re
from datetime import date

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from stylecanvas.config import Settings
from stylecanvas.engine.buffer import PixelBuffer
from stylecanvas.engine.errors import InvalidInput

ACCEPTED_FORMATS = frozenset({"JPEG", "PNG", "WEBP"})
INVALID_TYPE = "Invalid file type. Please upload JPG, PNG, or WebP images."

EXIF_ORIENTATION = 0x0112
# Orientations 5-8 rotate by 90 degrees
_SWAPPED_ORIENTATIONS = (5, 6, 7, 8)


def decode_upload(data: bytes, content_type: str | None, settings: Settings) -> PixelBuffer:
    if content_type not in settings.accepted_content_types:
        raise InvalidInput(INVALID_TYPE)
    if len(data) > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes // (1024 * 1024)
        raise InvalidInput(f"File too large. Maximum size is {limit_mb}MB.", status_code=413)
    if not data:
        raise InvalidInput("Uploaded file is empty.")

    try:
        with Image.open(io.BytesIO(data)) as img:
            if img.format not in ACCEPTED_FORMATS:
                raise InvalidInput(INVALID_TYPE)

            width, height = img.size
            if width * height > settings.max_image_pixels:
                raise InvalidInput(
                    f"Image is too large ({width}x{height}). "
                    f"Maximum is {settings.max_image_pixels:,} pixels.",
                    status_code=413,
                )

            swapped = img.getexif().get(EXIF_ORIENTATION) in _SWAPPED_ORIENTATIONS
            if swapped:
                width, height = height, width
            target = target_size(width, height, settings.max_dimension)

            # JPEG only: decode at a reduced scale that still covers the target
            img.draft("RGB", (target[1], target[0]) if swapped else target)
            rgb = ImageOps.exif_transpose(img).convert("RGB")
    except Image.DecompressionBombError as e:
        raise InvalidInput("Image dimensions are too large.", status_code=413) from e
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidInput("File is not a readable image.") from e

    rgb = _resize_to(rgb, target)
    return PixelBuffer.from_array(np.asarray(rgb, dtype=np.uint8).copy())


def target_size(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """Size after fitting the longer side to ``max_dimension``; smaller sizes are kept."""
    if width <= max_dimension and height <= max_dimension:
        return width, height
    if width > height:
        new_w, new_h = max_dimension, int(height / width * max_dimension)
    else:
        new_w, new_h = int(width / height * max_dimension), max_dimension
    return max(1, new_w), max(1, new_h)


def fit_within(img: Image.Image, max_dimension: int) -> Image.Image:
    """Downscale so the longer side equals ``max_dimension``; smaller images pass through."""
    return _resize_to(img, target_size(*img.size, max_dimension))


def _resize_to(img: Image.Image, size: tuple[int, int]) -> Image.Image:
    if img.size == size:
        return img
    return img.resize(size, resample=Image.BILINEAR)


def encode_png(buffer: PixelBuffer) -> bytes:
    data = buffer.data
    if buffer.is_normalized:
        data = PixelBuffer.denormalize(data).data
    out = io.BytesIO()
    Image.fromarray(np.ascontiguousarray(data, dtype=np.uint8)).save(out, format="PNG")
    return out.getvalue()


def download_filename(style_id: str, today: date | None = None) -> str:
    """``styled_<slug>_<YYYY-MM-DD>.png``."""
    slug = re.sub(r"\s+", "_", style_id.lower())
    stamp = (today or date.today()).isoformat()
    return f"styled_{slug}_{stamp}.png"
