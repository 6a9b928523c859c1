"""
receiptor

Receipt image preprocessing for OCR: grayscale + fixed global threshold.
"""

from .errors import LoadError, ReceiptorError, SaveError
from .pipeline import PipelineResult, optimize_image_for_ocr
from .preprocess import RECEIPT_THRESHOLD, apply_threshold, load_image, to_grayscale

__all__ = [
    "RECEIPT_THRESHOLD",
    "LoadError",
    "PipelineResult",
    "ReceiptorError",
    "SaveError",
    "apply_threshold",
    "load_image",
    "optimize_image_for_ocr",
    "to_grayscale",
]

__version__ = "0.1.0"
