"""
errors.py

Failure types raised by the pipeline stages.

Every error carries the path it concerns and a short machine-readable kind.
"""

from __future__ import annotations

from pathlib import Path


class ReceiptorError(Exception):
    """Base class for pipeline failures."""

    action = "Failed on"

    def __init__(self, path: str | Path, kind: str, detail: str = "") -> None:
        self.path = Path(path)
        self.kind = kind
        self.detail = detail
        msg = f"{self.action} {self.path} ({kind})"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class LoadError(ReceiptorError):
    """Source image missing, unreadable or not decodable."""

    action = "Failed to open image"


class SaveError(ReceiptorError):
    """Processed image could not be encoded or persisted."""

    action = "Failed to save processed image"
