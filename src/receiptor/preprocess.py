"""
preprocess.py

Image preprocessing for receipt OCR.
This module DOES NOT perform OCR.

Responsibilities:
- Load images of any channel layout / bit depth
- Convert to 8-bit grayscale
- Binarize with a fixed global threshold (dark text -> 0, paper -> 255)
"""

from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np

from .errors import LoadError

logger = logging.getLogger(__name__)

# Tuned for faint carbon-copy receipts: ink is only a little darker than paper,
# so the cut sits well above the 128 midpoint.
RECEIPT_THRESHOLD = 189


def load_image(path: str | Path) -> np.ndarray:
    """
    Decode an image file as-is (BGR/BGRA/gray, any bit depth).

    Raises:
        LoadError: kind is "not_found", "unreadable" or "decode".
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except FileNotFoundError as exc:
        raise LoadError(path, "not_found", "no such file") from exc
    except OSError as exc:
        raise LoadError(path, "unreadable", exc.strerror or str(exc)) from exc

    if not data:
        raise LoadError(path, "decode", "file is empty")

    # imdecode instead of imread: imread returns None for every failure and
    # cannot open non-ASCII paths on Windows.
    img = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
    if img is None:
        raise LoadError(path, "decode", "unrecognized or corrupt image data")

    logger.debug("loaded %s shape=%s dtype=%s", path, img.shape, img.dtype)
    return img


def _to_uint8(img: np.ndarray) -> np.ndarray:
    if img.dtype == np.uint8:
        return img
    if img.dtype == np.uint16:
        return np.round(img / 257.0).astype(np.uint8)
    if np.issubdtype(img.dtype, np.floating):
        return np.round(np.clip(img, 0.0, 1.0) * 255.0).astype(np.uint8)
    # other integer types: clip into range
    return np.clip(img, 0, 255).astype(np.uint8)


def to_grayscale(img: np.ndarray) -> np.ndarray:
    """
    Convert a decoded image to single-channel uint8 luminance.

    Uses OpenCV's BT.601 weights (0.299 R + 0.587 G + 0.114 B).
    Output shape is (H, W), same H and W as the input.
    """
    img = _to_uint8(np.asarray(img))

    if img.ndim == 2:
        return img
    if img.ndim != 3:
        raise ValueError(f"Expected 2-D or 3-D image array, got shape {img.shape}")

    channels = img.shape[2]
    if channels == 1:
        return img[:, :, 0]
    if channels == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
    if channels == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2GRAY)

    raise ValueError(f"Unsupported channel count: {channels}")


def apply_threshold(gray: np.ndarray, threshold: int = RECEIPT_THRESHOLD) -> np.ndarray:
    """
    Binarize a grayscale buffer.

    Output:
      - text (value < threshold): 0
      - paper (value >= threshold): 255
    """
    gray = np.asarray(gray)
    if gray.ndim != 2:
        raise ValueError(f"Expected single-channel (H, W) buffer, got shape {gray.shape}")
    if not 0 <= threshold <= 256:
        raise ValueError("threshold must be between 0 and 256")

    return np.where(gray < threshold, 0, 255).astype(np.uint8)
