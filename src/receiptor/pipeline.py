"""
pipeline.py

Receipt preprocessing pipeline.

Flow:
- load image
- grayscale
- threshold (fixed, RECEIPT_THRESHOLD)
- save one PNG at a content-derived path
- optionally dump intermediate artefacts for inspection

Notes:
- No OCR here. The returned path is what the OCR engine should read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np

from .diagnostics import binary_stats, is_binary
from .preprocess import RECEIPT_THRESHOLD, apply_threshold, load_image, to_grayscale
from .storage import ensure_dir, save_image, save_json, unique_output_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    output_path: Path
    width: int
    height: int
    black_ratio: float


def _save_debug_artifacts(
    debug_dir: Path,
    input_path: Path,
    gray: np.ndarray,
    binary: np.ndarray,
    stats: Dict[str, Any],
    output_path: Path,
) -> None:
    ensure_dir(debug_dir)
    stem = input_path.stem or "receipt"

    save_image(gray, debug_dir / f"{stem}_gray.png")
    save_json(
        {
            "input": str(input_path),
            "output": str(output_path),
            "threshold": RECEIPT_THRESHOLD,
            "binary": is_binary(binary),
            "diagnostics": stats,
        },
        debug_dir / f"{stem}_meta.json",
    )
    logger.debug("debug artefacts written to %s", debug_dir)


def optimize_image_for_ocr(
    input_path: str | Path,
    output_dir: Optional[str | Path] = None,
    debug_dir: Optional[str | Path] = None,
) -> PipelineResult:
    """
    Enhance a receipt scan for OCR and persist it.

    Args:
        input_path: source image
        output_dir: where to write the result (default: system temp dir)
        debug_dir: if set, also write the grayscale image and a JSON meta file

    Returns:
        PipelineResult with the path of the single persisted PNG.

    Raises:
        LoadError, SaveError
    """
    input_path = Path(input_path)

    img = load_image(input_path)

    # colour carries only carbon-paper noise
    gray = to_grayscale(img)
    logger.debug("grayscale %dx%d", gray.shape[1], gray.shape[0])

    binary = apply_threshold(gray, RECEIPT_THRESHOLD)
    stats = binary_stats(binary)
    output_path = unique_output_path(binary, output_dir)

    # debug output first: a debug failure must not leave a result behind
    if debug_dir is not None:
        _save_debug_artifacts(
            Path(debug_dir), input_path, gray, binary, stats, output_path
        )

    save_image(binary, output_path)
    logger.info(
        "processed %s -> %s (%dx%d, black=%.3f)",
        input_path,
        output_path,
        stats["width"],
        stats["height"],
        stats["black_ratio"],
    )

    return PipelineResult(
        output_path=output_path,
        width=stats["width"],
        height=stats["height"],
        black_ratio=stats["black_ratio"],
    )
