import logging
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

from annoview.models.workspace import ImagePayload
from .exceptions import ImageDecodeError

logger = logging.getLogger(__name__)

GRAYSCALE_TOLERANCE = 2
GRAYSCALE_SAMPLE_LIMIT = 50_000
MAX_MASK_CLASSES = 256


@dataclass(frozen=True)
class DecodedImage:
    payload: ImagePayload
    is_grayscale: bool


def decode_image(data: bytes, name: str = "") -> DecodedImage:
    """
    Decode raster bytes (PNG, JPEG, TIFF, ...) into an 8-bit BGR payload.

    Args:
        data: Raw file contents.
        name: File name, used for error messages only.

    Raises:
        ImageDecodeError: If OpenCV cannot decode the bytes.
    """
    buffer = np.frombuffer(data, dtype=np.uint8)
    raw = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED) if buffer.size else None
    if raw is None:
        raise ImageDecodeError(
            f"Failed to load image {name}".strip(),
            log_message=f"cv2.imdecode returned None for {len(data)} bytes",
        )

    pixels = to_bgr8(raw)
    payload = ImagePayload.from_array(pixels)
    grayscale = is_grayscale(pixels)
    logger.debug(
        f"Decoded {name or 'image'}: {payload.width}x{payload.height}, "
        f"dtype={raw.dtype}, grayscale={grayscale}"
    )
    return DecodedImage(payload=payload, is_grayscale=grayscale)


def to_bgr8(raw: np.ndarray) -> np.ndarray:
    """Normalize any decoded raster to a contiguous (H, W, 3) uint8 BGR array."""
    if raw.ndim == 3 and raw.shape[2] == 1:
        raw = raw[:, :, 0]

    if raw.ndim == 2:
        gray = _gray_to_uint8(raw)
        return cv2.cvtColor(gray, cv2.COLOR_GRAY2BGR)

    channels = raw.shape[2]
    if raw.dtype == np.uint16:
        raw = (raw >> 8).astype(np.uint8)
    elif raw.dtype != np.uint8:
        raw = cv2.normalize(raw, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

    if channels == 4:
        return cv2.cvtColor(raw, cv2.COLOR_BGRA2BGR)
    if channels == 3:
        return np.ascontiguousarray(raw)
    raise ImageDecodeError(f"Unsupported channel count: {channels}")


def _gray_to_uint8(gray: np.ndarray) -> np.ndarray:
    if gray.dtype == np.uint8:
        return np.ascontiguousarray(gray)
    if gray.dtype == np.uint16:
        return (gray >> 8).astype(np.uint8)
    if gray.dtype == np.bool_:
        return gray.astype(np.uint8) * 255
    return _label_mask_to_uint8(gray)


def _label_mask_to_uint8(gray: np.ndarray) -> np.ndarray:
    """
    Map a wide single-channel raster (usually an integer label mask) to 8 bits.

    Up to 256 distinct non-zero values each get an evenly spread grey level with
    background 0 kept black. With more values the raster is binarized.
    """
    values = np.unique(gray[gray != 0])
    if values.size > MAX_MASK_CLASSES:
        logger.debug(f"{values.size} distinct mask values, binarizing")
        return np.where(gray > 0, 255, 0).astype(np.uint8)

    out = np.zeros(gray.shape, dtype=np.uint8)
    if values.size == 0:
        return out
    # values is sorted, so searchsorted gives each pixel its class rank.
    ranks = np.searchsorted(values, gray[gray != 0])
    levels = np.round((ranks + 1) * 255 / values.size).astype(np.uint8)
    out[gray != 0] = levels
    return out


def is_grayscale(pixels: np.ndarray, tolerance: int = GRAYSCALE_TOLERANCE) -> bool:
    """True if sampled pixels have (nearly) equal B, G and R values."""
    if pixels.ndim == 2:
        return True
    flat = pixels.reshape(-1, pixels.shape[2])[:, :3].astype(np.int16)
    step = max(1, flat.shape[0] // GRAYSCALE_SAMPLE_LIMIT)
    sample = flat[::step]
    blue, green, red = sample[:, 0], sample[:, 1], sample[:, 2]
    return bool(
        np.all(np.abs(red - green) <= tolerance)
        and np.all(np.abs(green - blue) <= tolerance)
        and np.all(np.abs(red - blue) <= tolerance)
    )


def treat_as_mask(candidate: ImagePayload, current: Optional[ImagePayload]) -> bool:
    """A mask must overlay an already loaded image of the same size."""
    if current is None:
        return False
    return candidate.width == current.width and candidate.height == current.height
