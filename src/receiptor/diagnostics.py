"""
diagnostics.py

Quality diagnostics for binarized receipts.

These are meant for logging and the debug meta file,
not for judging OCR quality.
"""

from __future__ import annotations

from typing import Dict

import numpy as np


def is_binary(buf: np.ndarray) -> bool:
    """True if every pixel is exactly 0 or 255."""
    buf = np.asarray(buf)
    return bool(np.all((buf == 0) | (buf == 255)))


def binary_stats(buf: np.ndarray) -> Dict[str, float]:
    """
    Pixel counts for a binary (0/255) buffer.

    A black_ratio near 0 or 1 usually means the threshold wiped out the text
    (blank page) or the background (very dark scan).

    Returns:
      width, height, black_pixels, white_pixels, black_ratio
    """
    buf = np.asarray(buf)
    h, w = buf.shape[:2]
    total = max(h * w, 1)
    black = int(np.count_nonzero(buf == 0))
    return {
        "width": int(w),
        "height": int(h),
        "black_pixels": black,
        "white_pixels": int(h * w - black),
        "black_ratio": float(black / total),
    }
