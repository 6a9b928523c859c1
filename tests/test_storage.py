import os
import stat

import cv2
import numpy as np
import pytest

from receiptor.errors import SaveError
from receiptor.storage import save_image, unique_output_path


def test_unique_path_depends_on_content(tmp_path):
    a = np.zeros((2, 2), dtype=np.uint8)
    b = np.full((2, 2), 255, dtype=np.uint8)
    assert unique_output_path(a, tmp_path) == unique_output_path(a.copy(), tmp_path)
    assert unique_output_path(a, tmp_path) != unique_output_path(b, tmp_path)


def test_unique_path_depends_on_shape(tmp_path):
    a = np.zeros((2, 3), dtype=np.uint8)
    b = np.zeros((3, 2), dtype=np.uint8)
    assert unique_output_path(a, tmp_path) != unique_output_path(b, tmp_path)


def test_unique_path_defaults_to_tempdir(monkeypatch, tmp_path):
    monkeypatch.setattr("tempfile.gettempdir", lambda: str(tmp_path))
    path = unique_output_path(np.zeros((1, 1), dtype=np.uint8))
    assert path.parent == tmp_path
    assert path.name.startswith("receiptor_")
    assert path.suffix == ".png"


def test_save_overwrites_and_leaves_no_temp_files(tmp_path):
    dest = tmp_path / "out.png"
    dest.write_bytes(b"old")
    buf = np.array([[0, 255]], dtype=np.uint8)
    assert save_image(buf, dest) == dest
    assert sorted(p.name for p in tmp_path.iterdir()) == ["out.png"]
    decoded = cv2.imread(str(dest), cv2.IMREAD_UNCHANGED)
    assert decoded.tolist() == [[0, 255]]


def test_save_into_missing_directory(tmp_path):
    dest = tmp_path / "missing" / "out.png"
    with pytest.raises(SaveError) as info:
        save_image(np.zeros((1, 1), dtype=np.uint8), dest)
    assert info.value.kind == "unwritable"
    assert info.value.path == dest
    assert not dest.parent.exists()


def test_save_encode_failure(tmp_path):
    dest = tmp_path / "out.png"
    with pytest.raises(SaveError) as info:
        save_image(np.zeros((0, 0), dtype=np.uint8), dest)
    assert info.value.kind == "encode"
    assert not dest.exists()


def test_save_disk_full_cleans_up(tmp_path, monkeypatch):
    import errno

    def _full(src, dst):
        raise OSError(errno.ENOSPC, "No space left on device")

    monkeypatch.setattr(os, "replace", _full)
    dest = tmp_path / "out.png"
    with pytest.raises(SaveError) as info:
        save_image(np.zeros((2, 2), dtype=np.uint8), dest)
    assert info.value.kind == "disk_full"
    assert list(tmp_path.iterdir()) == []


@pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
def test_saved_file_follows_umask(tmp_path):
    dest = tmp_path / "out.png"
    old = os.umask(0o022)
    try:
        save_image(np.zeros((2, 2), dtype=np.uint8), dest)
    finally:
        os.umask(old)
    assert stat.S_IMODE(dest.stat().st_mode) == 0o644
