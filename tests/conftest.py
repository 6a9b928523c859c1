from pathlib import Path

import cv2
import numpy as np
import pytest


@pytest.fixture
def write_png(tmp_path):
    """Write a numpy buffer (gray or BGR) as PNG and return its path."""

    def _write(arr: np.ndarray, name: str = "receipt.png") -> Path:
        path = tmp_path / name
        assert cv2.imwrite(str(path), arr)
        return path

    return _write


@pytest.fixture
def out_dir(tmp_path):
    d = tmp_path / "out"
    d.mkdir()
    return d
