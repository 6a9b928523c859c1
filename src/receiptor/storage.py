"""
storage.py

Persist processed images for the OCR step.

Rules:
- One durable write per run
- Write to a sibling temp file, then rename over the destination
- Never leave a partial file behind on failure
"""

from __future__ import annotations

import errno
import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

import cv2
import numpy as np

from .errors import SaveError

logger = logging.getLogger(__name__)

OUTPUT_PREFIX = "receiptor_"
OUTPUT_SUFFIX = ".png"

_DISK_FULL = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}
_UNWRITABLE = {errno.ENOENT, errno.ENOTDIR, errno.EACCES, errno.EPERM, errno.EROFS}


def content_digest(buf: np.ndarray, length: int = 16) -> str:
    """Short SHA-256 hex digest over a buffer's shape and bytes."""
    h = hashlib.sha256()
    h.update(repr(buf.shape).encode("ascii"))
    h.update(np.ascontiguousarray(buf).tobytes())
    return h.hexdigest()[:length]


def unique_output_path(buf: np.ndarray, directory: Optional[str | Path] = None) -> Path:
    """
    Content-derived output location.

    Equal buffers map to the same path, so reprocessing an image is idempotent
    and concurrent runs on different images never share a file.
    """
    base = Path(directory) if directory is not None else Path(tempfile.gettempdir())
    return base / f"{OUTPUT_PREFIX}{content_digest(buf)}{OUTPUT_SUFFIX}"


def encode_png(buf: np.ndarray, path: str | Path) -> bytes:
    """Encode a buffer as PNG bytes. `path` is only used for error context."""
    try:
        ok, encoded = cv2.imencode(".png", buf)
    except cv2.error as exc:
        raise SaveError(path, "encode", str(exc).strip()) from exc
    if not ok:
        raise SaveError(path, "encode", "PNG encoder rejected the buffer")
    return encoded.tobytes()


def _classify(exc: OSError) -> str:
    if exc.errno in _DISK_FULL:
        return "disk_full"
    if exc.errno in _UNWRITABLE or isinstance(exc, PermissionError):
        return "unwritable"
    return "io"


def ensure_dir(path: str | Path) -> Path:
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise SaveError(path, _classify(exc), exc.strerror or str(exc)) from exc
    return path


def _file_mode() -> int:
    # umask can only be read by setting it
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_atomic(data: bytes, path: str | Path) -> Path:
    """Write bytes next to `path`, then rename over it."""
    path = Path(path)
    tmp_name: Optional[str] = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.stem}.", suffix=".tmp", dir=path.parent
        )
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        # mkstemp creates 0600; the OCR step may run as another user
        os.chmod(tmp_name, _file_mode())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise SaveError(path, _classify(exc), exc.strerror or str(exc)) from exc
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass

    logger.debug("wrote %d bytes to %s", len(data), path)
    return path


def save_image(buf: np.ndarray, path: str | Path) -> Path:
    """
    Encode `buf` as PNG and write it to `path`, replacing any existing file.

    Raises:
        SaveError: kind is "encode", "unwritable", "disk_full" or "io".
    """
    path = Path(path)
    return write_atomic(encode_png(buf, path), path)


def save_json(data: Dict[str, Any], path: str | Path) -> Path:
    text = json.dumps(data, ensure_ascii=False, indent=2)
    return write_atomic(text.encode("utf-8"), path)
